# scripts/seed_local_data.py
# -*- coding: utf-8 -*-
"""
Seed local pour DailyLedger : crée des utilisateurs, leurs journaux (humeur,
repas, activité) et leurs libellés de notes.

Caractéristiques :
- Passe par les services (mêmes validations, mêmes lots que l'UI)
- Un lot par jour et par type : chaque lot est tout ou rien
- Libellés réconciliés par note : réexécuter ne crée pas de doublons
- Paramétrable via CLI : nb d'utilisateurs, nb de jours, date de fin, gaps aléatoires
- Option (--wipe) pour drop+recreate le schéma (utile en dev)

Exemples :
    # 3 users, 14 jours jusqu'à aujourd'hui
    python scripts/seed_local_data.py

    # 5 users, 30 jours, quelques trous de données
    python scripts/seed_local_data.py --users 5 --days 30 --gap-rate 0.15

    # Spécifier l'email et recommencer à zéro
    python scripts/seed_local_data.py --users 1 --email-prefix demo --domain example.org --wipe

    # Définir une date de fin (YYYY-MM-DD)
    python scripts/seed_local_data.py --end 2025-10-01
"""

from __future__ import annotations

import argparse
import datetime as dt
import os
import random
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from dailyledger.config import Settings, configure_logging
from dailyledger.domain.entries import ActivityType, AssignmentKind
from dailyledger.domain.rating import Rating
from dailyledger.schemas.assignments import AssignmentItem, CreateAssignmentsRequest
from dailyledger.schemas.entries import (
    CreateActivityEntriesRequest,
    CreateFoodEntriesRequest,
    CreateMoodEntriesRequest,
    NewActivityEntry,
    NewFoodEntry,
    NewMoodEntry,
)
from dailyledger.wiring import build_services

MEALS = [
    ("porridge + banane", 420, 70, 12, 9),
    ("salade de lentilles", 550, 60, 25, 18),
    ("poulet riz brocolis", 680, 75, 45, 16),
    ("yaourt + noix", 250, 15, 12, 16),
    ("pâtes bolognaise", 750, 95, 32, 24),
]

ACTIVITIES = [
    ("squat / développé couché", ActivityType.WEIGHT_LIFTING),
    ("marche rapide", ActivityType.WALKING),
]

LABELS = {
    AssignmentKind.MOOD: {0: "au plus bas", 5: "neutre", 10: "au top"},
    AssignmentKind.ENERGY: {0: "épuisé", 5: "correct", 10: "plein d'énergie"},
    AssignmentKind.SLEEP: {0: "nuit blanche", 5: "moyen", 10: "réparateur"},
}


# -------------------------------------------------------------------
# Utils
# -------------------------------------------------------------------

def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def sample_rating(mu: float, sigma: float) -> Rating | None:
    # ~5% de notes non renseignées
    if random.random() < 0.05:
        return None
    return Rating(int(round(clamp(random.gauss(mu, sigma), 0, 10))))


def at(day: dt.date, hour: int) -> dt.datetime:
    minute = random.randint(0, 59)
    return dt.datetime.combine(day, dt.time(hour, minute), tzinfo=dt.timezone.utc)


def daterange(end: dt.date, days: int):
    """Génère des dates [end - (days-1) .. end] incluses, en ordre croissant."""
    for i in range(days):
        yield end - dt.timedelta(days=(days - 1 - i))


def sample_meals(day: dt.date):
    entries = []
    for hour in (8, 13, 20):
        description, kcal, carbs, protein, fats = random.choice(MEALS)
        entries.append(NewFoodEntry(
            description=description,
            calories=round(kcal * random.uniform(0.85, 1.15)),
            carbs=float(carbs),
            protein=float(protein),
            # macros parfois non renseignées
            fats=None if random.random() < 0.1 else float(fats),
            logged_at=at(day, hour),
        ))
    return tuple(entries)


# -------------------------------------------------------------------
# Seeding
# -------------------------------------------------------------------

def seed(services, *, users: int, days: int, end_date: dt.date, email_prefix: str, domain: str, gap_rate: float) -> None:
    print(f"➡️  Seeding {users} user(s), {days} jour(s), fin au {end_date.isoformat()}"
          f" | gaps ~{int(gap_rate*100)}%")

    totals = {"mood": 0, "food": 0, "activity": 0}
    for i in range(1, users + 1):
        email = f"{email_prefix}{i}@{domain}".lower()
        u = services.users.get_or_create(email)
        print(f"   • User {u.id:>3}  {u.email:<30}")

        services.assignments.create_assignments(CreateAssignmentsRequest(
            user_id=u.id,
            **{
                f"{kind.value}_assignments": tuple(AssignmentItem(value=v, index=k) for k, v in labels.items())
                for kind, labels in LABELS.items()
            },
        ))

        for day in daterange(end=end_date, days=days):
            # Probabilité de "jour manquant" pour simuler des trous dans les séries
            if random.random() < gap_rate:
                continue

            totals["mood"] += services.mood.create_entries(CreateMoodEntriesRequest(
                user_id=u.id,
                mood_entries=(NewMoodEntry(
                    mood=sample_rating(6.5, 1.6),
                    energy=sample_rating(6.0, 1.8),
                    sleep=sample_rating(7.0, 1.5),
                    logged_at=at(day, 21),
                ),),
            ))
            totals["food"] += services.food.create_entries(
                CreateFoodEntriesRequest(user_id=u.id, food_entries=sample_meals(day))
            )
            if random.random() < 0.6:
                activity, activity_type = random.choice(ACTIVITIES)
                totals["activity"] += services.activity.create_entries(CreateActivityEntriesRequest(
                    user_id=u.id,
                    activity_entries=(NewActivityEntry(
                        activity=activity,
                        activity_type=activity_type,
                        activity_info={"duration_min": random.choice([20, 30, 45, 60])},
                        logged_at=at(day, 18),
                    ),),
                ))

    print(f"✅ Terminé : {users} user(s), "
          + ", ".join(f"{n} {kind}" for kind, n in totals.items()) + " entrée(s) créées.")


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Seed local data for DailyLedger")
    p.add_argument("--users", type=int, default=3, help="Nombre d'utilisateurs (défaut: 3)")
    p.add_argument("--days", type=int, default=14, help="Nombre de jours (défaut: 14)")
    p.add_argument("--end", type=str, default=None, help="Date de fin (YYYY-MM-DD). Défaut: aujourd'hui")
    p.add_argument("--email-prefix", type=str, default="user", help="Préfixe email (défaut: 'user')")
    p.add_argument("--domain", type=str, default="example.com", help="Domaine email (défaut: example.com)")
    p.add_argument("--gap-rate", type=float, default=0.1, help="Probabilité de sauter un jour (0..1, défaut: 0.1)")
    p.add_argument("--seed", type=int, default=None, help="Seed du générateur aléatoire pour reproductibilité")
    p.add_argument("--wipe", action="store_true", help="Drop + recreate la base avant seeding")
    return p.parse_args()


def main():
    args = parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    end_date = dt.date.fromisoformat(args.end) if args.end else dt.date.today()

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if args.wipe:
        print("⚠️  Wipe : drop & recreate le schéma…")
    services = build_services(settings, drop_and_recreate=bool(args.wipe))

    seed(
        services,
        users=max(1, args.users),
        days=max(1, args.days),
        end_date=end_date,
        email_prefix=args.email_prefix,
        domain=args.domain,
        gap_rate=clamp(args.gap_rate, 0.0, 0.9),
    )


if __name__ == "__main__":
    main()
