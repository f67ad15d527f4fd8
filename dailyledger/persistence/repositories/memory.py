# dailyledger/persistence/repositories/memory.py
# -*- coding: utf-8 -*-
"""
Implémentations en mémoire des repositories, programmables pour les tests.

- Pas de stub qui "panique" : chaque fake se comporte comme le vrai stockage
  (atomicité d'un lot, tri, pagination, clé logique des assignations).
- On peut programmer une panne : `fail_on_call=N` fait échouer le N-ième appel
  d'écriture (1-indexé) avec `error` (DatabaseError par défaut).
  Pour les assignations, `fail_lookup_on_call=N` fait de même sur la recherche
  par index (`find_by_index`).
- `calls` compte les appels par opération, pour vérifier l'absence d'I/O.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import itertools
from collections import Counter
from collections.abc import Sequence

from dailyledger.domain.entries import Assignment, AssignmentKind, utcnow
from dailyledger.domain.rating import Rating
from dailyledger.errors import DatabaseError, ValidationError


def _programmed_error(message: str, error: BaseException | None) -> BaseException:
    return error if error is not None else DatabaseError(message, cause=RuntimeError("simulated failure"))


class InMemoryUserDirectory:
    def __init__(self, user_ids=()) -> None:
        self.user_ids = set(user_ids)
        self.calls = Counter()

    def exists(self, user_id: int) -> bool:
        self.calls["exists"] += 1
        return user_id in self.user_ids


class InMemoryLedgerRepository:
    def __init__(self, *, fail_on_call: int | None = None, error: BaseException | None = None) -> None:
        self.rows: list = []
        self.calls = Counter()
        self.fail_on_call = fail_on_call
        self.error = error
        self._ids = itertools.count(1)

    def create_batch(self, records: Sequence) -> None:
        records = list(records)
        if not records:
            raise ValidationError("cannot create zero entries")
        self.calls["create_batch"] += 1
        if self.calls["create_batch"] == self.fail_on_call:
            raise _programmed_error("failed to create entries", self.error)

        now = utcnow()
        staged = []
        for r in records:
            staged.append(dataclasses.replace(
                r,
                record_id=next(self._ids),
                created_at=r.created_at or now,
                logged_at=r.logged_at or now,
            ))
        # tout ou rien : on n'ajoute qu'une fois le lot entièrement préparé
        self.rows.extend(staged)

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
        self.calls["read_range"] += 1
        found = [
            r for r in self.rows
            if r.user_id == user_id
            and (before is None or r.logged_at <= before)
            and (after is None or r.logged_at >= after)
        ]
        found.sort(key=lambda r: (r.logged_at, r.record_id), reverse=True)
        return found[offset:offset + limit]


class InMemoryAssignmentRepository:
    def __init__(
        self,
        kind: AssignmentKind,
        *,
        fail_on_call: int | None = None,
        fail_lookup_on_call: int | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.kind = AssignmentKind(kind)
        self.rows: dict[tuple[int, int], Assignment] = {}
        self.calls = Counter()
        self.fail_on_call = fail_on_call
        self.fail_lookup_on_call = fail_lookup_on_call
        self.error = error
        self._ids = itertools.count(1)

    def find_by_index(self, user_id: int, index: Rating) -> Assignment | None:
        self.calls["find_by_index"] += 1
        if self.calls["find_by_index"] == self.fail_lookup_on_call:
            raise _programmed_error(f"failed to find {self.kind.value} assignment", self.error)
        return self.rows.get((user_id, index.encode()))

    def upsert(self, assignment: Assignment) -> Assignment:
        self.calls["upsert"] += 1
        if self.calls["upsert"] == self.fail_on_call:
            raise _programmed_error(f"failed to upsert {self.kind.value} assignment", self.error)

        key = (assignment.user_id, assignment.index.encode())
        existing = self.rows.get(key)
        assignment_id = existing.assignment_id if existing else assignment.assignment_id
        if assignment_id is None:
            assignment_id = next(self._ids)
        stored = dataclasses.replace(assignment, kind=self.kind, assignment_id=assignment_id)
        self.rows[key] = stored
        return stored

    def list_for_user(self, user_id: int) -> list[Assignment]:
        self.calls["list_for_user"] += 1
        return sorted((a for (uid, _), a in self.rows.items() if uid == user_id), key=lambda a: a.index)
