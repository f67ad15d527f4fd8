# dailyledger/domain/entries.py
# -*- coding: utf-8 -*-
"""
Enregistrements du ledger (Food / Mood / Activity) et assignations.

Règles communes :
- `record_id` vaut None tant que l'enregistrement n'a pas été persisté ;
  un enregistrement relu depuis la base a toujours un id.
- Les enregistrements ne sont jamais modifiés en place (dataclasses gelées) ;
  `dataclasses.replace` produit une copie complétée.
- Tous les horodatages du domaine sont en UTC "aware".
"""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass
from typing import Any

from dailyledger.domain.rating import Rating
from dailyledger.errors import ValidationError


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def to_utc(ts: dt.datetime | None) -> dt.datetime | None:
    """Un datetime naïf est interprété comme de l'UTC."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=dt.timezone.utc)
    return ts.astimezone(dt.timezone.utc)


class ActivityType(str, enum.Enum):
    WEIGHT_LIFTING = "weight_lifting"
    WALKING = "walking"

    @classmethod
    def parse(cls, value) -> "ActivityType":
        """Accepte la valeur ou le nom, sans tenir compte de la casse ni des séparateurs ("WeightLifting")."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "").replace(" ", "")
        for member in cls:
            if member.value.replace("_", "") == key:
                return member
        allowed = ", ".join(m.value for m in cls)
        raise ValidationError(f"unknown activity type {value!r} (expected one of: {allowed})")


class AssignmentKind(str, enum.Enum):
    MOOD = "mood"
    ENERGY = "energy"
    SLEEP = "sleep"


@dataclass(frozen=True)
class FoodEntry:
    user_id: int
    description: str
    calories: float | None = None
    carbs: float | None = None
    protein: float | None = None
    fats: float | None = None
    micronutrients: dict[str, Any] | None = None
    logged_at: dt.datetime | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    record_id: int | None = None


@dataclass(frozen=True)
class MoodEntry:
    user_id: int
    mood: Rating | None = None
    energy: Rating | None = None
    sleep: Rating | None = None
    notes: str | None = None
    logged_at: dt.datetime | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    record_id: int | None = None


@dataclass(frozen=True)
class ActivityEntry:
    user_id: int
    activity: str
    activity_type: ActivityType
    activity_info: dict[str, Any] | None = None
    logged_at: dt.datetime | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    record_id: int | None = None


@dataclass(frozen=True)
class Assignment:
    """Libellé d'un niveau de note pour un utilisateur (ex: humeur 7 = "serein")."""
    kind: AssignmentKind
    user_id: int
    index: Rating
    value: str
    assignment_id: int | None = None
