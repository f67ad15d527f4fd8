# dailyledger/persistence/repositories/assignments_repo.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from dailyledger.domain.entries import Assignment, AssignmentKind, utcnow
from dailyledger.domain.rating import Rating
from dailyledger.errors import DatabaseError
from dailyledger.persistence.db import session_scope
from dailyledger.persistence.models import EnergyAssignmentRecord, MoodAssignmentRecord, SleepAssignmentRecord

logger = logging.getLogger(__name__)

ASSIGNMENT_MODELS = {
    AssignmentKind.MOOD: MoodAssignmentRecord,
    AssignmentKind.ENERGY: EnergyAssignmentRecord,
    AssignmentKind.SLEEP: SleepAssignmentRecord,
}

_UPSERT_DIALECTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


class AssignmentRepository:
    """
    Assignations d'un type donné (mood / energy / sleep), clé logique (user_id, rating_index).

    `upsert` :
    - id connu  -> UPDATE de la valeur ;
    - id absent -> INSERT ... ON CONFLICT (user_id, rating_index) DO UPDATE
      (SQLite / PostgreSQL), INSERT simple sur les autres dialectes.
    """

    def __init__(self, session_factory, kind: AssignmentKind) -> None:
        self._session_factory = session_factory
        self.kind = AssignmentKind(kind)
        self.model = ASSIGNMENT_MODELS[self.kind]

    def _to_assignment(self, row) -> Assignment:
        return Assignment(
            kind=self.kind,
            user_id=row.user_id,
            index=Rating.from_column(row.rating_index, f"{self.kind.value} assignment index"),
            value=row.value,
            assignment_id=row.id,
        )

    def find_by_index(self, user_id: int, index: Rating) -> Assignment | None:
        m = self.model
        stmt = select(m).where(m.user_id == user_id, m.rating_index == index.encode()).limit(1)
        try:
            with session_scope(self._session_factory) as s:
                row = s.scalar(stmt)
                return self._to_assignment(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error("database error while finding %s assignment: %s", self.kind.value, e)
            raise DatabaseError(f"failed to find {self.kind.value} assignment", cause=e) from e

    def upsert(self, assignment: Assignment) -> Assignment:
        m = self.model
        now = utcnow()
        try:
            with session_scope(self._session_factory) as s:
                if assignment.assignment_id is not None:
                    res = s.execute(
                        update(m)
                        .where(m.id == assignment.assignment_id)
                        .values(value=assignment.value, updated_at=now)
                    )
                    if res.rowcount:
                        logger.debug("updated %s assignment id=%s", self.kind.value, assignment.assignment_id)
                        return assignment
                    # ligne disparue entre la recherche et l'écriture : on retombe sur l'insert
                self._insert(s, assignment, now)
                row = s.scalar(
                    select(m).where(m.user_id == assignment.user_id, m.rating_index == assignment.index.encode())
                )
                logger.debug("inserted %s assignment id=%s", self.kind.value, row.id)
                return self._to_assignment(row)
        except SQLAlchemyError as e:
            logger.error("database error while upserting %s assignment: %s", self.kind.value, e)
            raise DatabaseError(f"failed to upsert {self.kind.value} assignment", cause=e) from e

    def _insert(self, s, assignment: Assignment, now) -> None:
        values = dict(
            user_id=assignment.user_id,
            rating_index=assignment.index.encode(),
            value=assignment.value,
            created_at=now,
        )
        dialect_insert = _UPSERT_DIALECTS.get(s.get_bind().dialect.name)
        if dialect_insert is None:
            s.execute(insert(self.model).values(**values))
            return
        stmt = dialect_insert(self.model).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "rating_index"],
            set_={"value": stmt.excluded["value"], "updated_at": now},
        )
        s.execute(stmt)

    def list_for_user(self, user_id: int) -> list[Assignment]:
        m = self.model
        stmt = select(m).where(m.user_id == user_id).order_by(m.rating_index.asc())
        try:
            with session_scope(self._session_factory) as s:
                return [self._to_assignment(row) for row in s.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("database error while listing %s assignments: %s", self.kind.value, e)
            raise DatabaseError(f"failed to list {self.kind.value} assignments", cause=e) from e
