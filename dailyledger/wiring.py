# dailyledger/wiring.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass

from dailyledger.config import Settings
from dailyledger.domain.entries import AssignmentKind
from dailyledger.persistence.db import init_db, make_engine, make_session_factory
from dailyledger.persistence.models import Base
from dailyledger.persistence.repositories.assignments_repo import AssignmentRepository
from dailyledger.persistence.repositories.entries_repo import (
    ActivityEntryRepository,
    FoodEntryRepository,
    MoodEntryRepository,
)
from dailyledger.persistence.repositories.users_repo import UserRepository
from dailyledger.services.assignments_service import AssignmentReconciler
from dailyledger.services.entries_service import ActivityEntryService, FoodEntryService, MoodEntryService


@dataclass
class Services:
    engine: object
    users: UserRepository
    food: FoodEntryService
    mood: MoodEntryService
    activity: ActivityEntryService
    assignments: AssignmentReconciler


def build_services(settings: Settings, *, drop_and_recreate: bool = False) -> Services:
    """Assemble engine, repositories et services ; crée les tables si besoin."""
    engine = make_engine(settings.db_url, echo=settings.db_echo)
    init_db(engine, Base, drop_and_recreate=drop_and_recreate)
    sf = make_session_factory(engine)

    users = UserRepository(sf)
    limit = settings.default_limit
    return Services(
        engine=engine,
        users=users,
        food=FoodEntryService(users, FoodEntryRepository(sf), default_limit=limit),
        mood=MoodEntryService(users, MoodEntryRepository(sf), default_limit=limit),
        activity=ActivityEntryService(users, ActivityEntryRepository(sf), default_limit=limit),
        assignments=AssignmentReconciler(
            users, {kind: AssignmentRepository(sf, kind) for kind in AssignmentKind}
        ),
    )
