# dailyledger/persistence/repositories/base.py
# -*- coding: utf-8 -*-
"""
Contrats des repositories.

Une implémentation SQLAlchemy pour la prod, une implémentation en mémoire
programmable pour les tests (voir memory.py). Les services ne dépendent que
de ces protocoles.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from typing import Protocol, TypeVar

from dailyledger.domain.entries import Assignment
from dailyledger.domain.rating import Rating

E = TypeVar("E")


class UserDirectory(Protocol):
    def exists(self, user_id: int) -> bool: ...


class LedgerRepository(Protocol[E]):
    def create_batch(self, records: Sequence[E]) -> None: ...

    def read_range(
        self,
        user_id: int,
        before: dt.datetime | None,
        after: dt.datetime | None,
        limit: int,
        offset: int,
    ) -> list[E]: ...


class AssignmentRepository(Protocol):
    def find_by_index(self, user_id: int, index: Rating) -> Assignment | None: ...

    def upsert(self, assignment: Assignment) -> Assignment: ...

    def list_for_user(self, user_id: int) -> list[Assignment]: ...
