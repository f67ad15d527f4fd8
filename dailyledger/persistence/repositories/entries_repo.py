# dailyledger/persistence/repositories/entries_repo.py
# -*- coding: utf-8 -*-
"""
Repositories SQL du ledger (food / mood / activity).

Deux opérations :
- `create_batch` : insertion en masse, une seule instruction INSERT multi-lignes
  dans une seule transaction (tout ou rien) ;
- `read_range` : lecture filtrée sur `logged_at` (bornes incluses), triée du plus
  récent au plus ancien, paginée.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError

from dailyledger.domain.entries import ActivityEntry, ActivityType, FoodEntry, MoodEntry, utcnow
from dailyledger.domain.rating import Rating
from dailyledger.errors import ConversionError, DatabaseError, ValidationError
from dailyledger.persistence.db import session_scope
from dailyledger.persistence.models import ActivityRecord, FoodRecord, MoodRecord

logger = logging.getLogger(__name__)


class SqlLedgerRepository:
    """Squelette commun ; les sous-classes fournissent le modèle et les conversions."""

    kind = "ledger"
    model: Any = None

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    # --- conversions (à surcharger) ---------------------------------------
    def _to_row(self, record) -> dict[str, Any]:
        raise NotImplementedError

    def _to_entry(self, row):
        raise NotImplementedError

    # --- écriture ----------------------------------------------------------
    def create_batch(self, records: Sequence) -> None:
        records = list(records)
        if not records:
            # contrat : vérifié AVANT d'ouvrir la moindre transaction
            logger.error("create_batch received an empty %s batch", self.kind)
            raise ValidationError("cannot create zero entries")

        now = utcnow()
        rows = [self._to_row(_stamp(r, now)) for r in records]
        stmt = insert(self.model.__table__).values(rows)
        logger.debug("inserting %d %s entries in one statement", len(rows), self.kind)

        try:
            with session_scope(self._session_factory) as s:
                s.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("database error while creating %s entries: %s", self.kind, e)
            raise DatabaseError(f"failed to create {self.kind} entries", cause=e) from e

        logger.info("created %d %s entries", len(rows), self.kind)

    # --- lecture -----------------------------------------------------------
    def read_range(
        self,
        user_id: int,
        before: dt.datetime | None = None,
        after: dt.datetime | None = None,
        limit: int = 10000,
        offset: int = 0,
    ) -> list:
        if limit < 0 or offset < 0:
            raise ValidationError(f"limit and offset must be >= 0 (limit={limit}, offset={offset})")
        logger.debug(
            "reading %s entries user_id=%s before=%s after=%s limit=%s offset=%s",
            self.kind, user_id, before, after, limit, offset,
        )

        m = self.model
        stmt = select(m).where(m.user_id == user_id)
        if before is not None:
            stmt = stmt.where(m.logged_at <= before)
        if after is not None:
            stmt = stmt.where(m.logged_at >= after)
        # départage des ex-aequo : la dernière insertion d'abord
        stmt = stmt.order_by(m.logged_at.desc(), m.id.desc()).limit(limit).offset(offset)

        try:
            with session_scope(self._session_factory) as s:
                entries = [self._to_entry(row) for row in s.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("database error while reading %s entries: %s", self.kind, e)
            raise DatabaseError(f"failed to read {self.kind} entries", cause=e) from e

        logger.debug("found %d %s entries", len(entries), self.kind)
        return entries


def _stamp(record, now: dt.datetime):
    """Horodatages absents -> "now" (même instant pour tout le lot)."""
    changes = {}
    if record.created_at is None:
        changes["created_at"] = now
    if record.logged_at is None:
        changes["logged_at"] = now
    return dataclasses.replace(record, **changes) if changes else record


def _rating_column(r: Rating | None) -> int | None:
    return None if r is None else r.encode()


def _rating_field(value, name: str) -> Rating | None:
    return None if value is None else Rating.from_column(value, name)


class FoodEntryRepository(SqlLedgerRepository):
    kind = "food"
    model = FoodRecord

    def _to_row(self, e: FoodEntry) -> dict[str, Any]:
        return {
            "user_id": e.user_id,
            "description": e.description,
            "calories": e.calories,
            "carbs": e.carbs,
            "protein": e.protein,
            "fats": e.fats,
            "micronutrients": e.micronutrients,
            "logged_at": e.logged_at,
            "created_at": e.created_at,
            "updated_at": e.updated_at,
        }

    def _to_entry(self, r: FoodRecord) -> FoodEntry:
        return FoodEntry(
            record_id=r.id,
            user_id=r.user_id,
            description=r.description,
            calories=r.calories,
            carbs=r.carbs,
            protein=r.protein,
            fats=r.fats,
            micronutrients=r.micronutrients,
            logged_at=r.logged_at,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class MoodEntryRepository(SqlLedgerRepository):
    kind = "mood"
    model = MoodRecord

    def _to_row(self, e: MoodEntry) -> dict[str, Any]:
        return {
            "user_id": e.user_id,
            "mood": _rating_column(e.mood),
            "energy": _rating_column(e.energy),
            "sleep": _rating_column(e.sleep),
            "notes": e.notes,
            "logged_at": e.logged_at,
            "created_at": e.created_at,
            "updated_at": e.updated_at,
        }

    def _to_entry(self, r: MoodRecord) -> MoodEntry:
        return MoodEntry(
            record_id=r.id,
            user_id=r.user_id,
            mood=_rating_field(r.mood, "mood"),
            energy=_rating_field(r.energy, "energy"),
            sleep=_rating_field(r.sleep, "sleep"),
            notes=r.notes,
            logged_at=r.logged_at,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class ActivityEntryRepository(SqlLedgerRepository):
    kind = "activity"
    model = ActivityRecord

    def _to_row(self, e: ActivityEntry) -> dict[str, Any]:
        return {
            "user_id": e.user_id,
            "activity": e.activity,
            "activity_type": ActivityType.parse(e.activity_type).value,
            "activity_info": e.activity_info,
            "logged_at": e.logged_at,
            "created_at": e.created_at,
            "updated_at": e.updated_at,
        }

    def _to_entry(self, r: ActivityRecord) -> ActivityEntry:
        try:
            activity_type = ActivityType.parse(r.activity_type)
        except ValidationError as e:
            raise ConversionError(f"failed to parse activity_type - {e}") from e
        return ActivityEntry(
            record_id=r.id,
            user_id=r.user_id,
            activity=r.activity,
            activity_type=activity_type,
            activity_info=r.activity_info,
            logged_at=r.logged_at,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )
