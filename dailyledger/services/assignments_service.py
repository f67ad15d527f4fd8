# dailyledger/services/assignments_service.py
# -*- coding: utf-8 -*-
"""
Réconciliation des assignations (mood / energy / sleep) par clé logique.

La clé est (user, type, index de note), pas l'id généré : resoumettre la même
requête converge toujours vers le même état. Les trois types sont traités
l'un après l'autre (mood, puis energy, puis sleep), sans transaction commune :
si energy échoue au 2e élément, mood reste appliqué, energy est partiel et
sleep n'est pas touché. La reprise documentée est "resoumettre toute la
requête d'origine".

Pour chaque élément :
    Validating -> Validated -> Lookup -> {Found -> Update, NotFound -> Insert} -> Done
    Validating -> Rejected  (index hors bornes : tout l'appel est rejeté)
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence

from dailyledger.domain.entries import Assignment, AssignmentKind
from dailyledger.domain.rating import Rating
from dailyledger.errors import ContextError, LedgerError, NotFound, RatingError, ValidationError
from dailyledger.persistence.repositories.base import AssignmentRepository, UserDirectory
from dailyledger.schemas.assignments import AssignmentItem, CreateAssignmentsRequest

logger = logging.getLogger(__name__)

KIND_ORDER = (AssignmentKind.MOOD, AssignmentKind.ENERGY, AssignmentKind.SLEEP)


class AssignmentReconciler:
    def __init__(self, users: UserDirectory, repositories: Mapping[AssignmentKind, AssignmentRepository]) -> None:
        missing = [k.value for k in KIND_ORDER if k not in repositories]
        if missing:
            raise ValueError(f"missing assignment repositories: {', '.join(missing)}")
        self._users = users
        self._repositories: dict[AssignmentKind, AssignmentRepository] = dict(repositories)

    def _ensure_user(self, user_id: int) -> None:
        if not self._users.exists(user_id):
            logger.error("failed to find user id=%s", user_id)
            raise NotFound("user not found")

    def reconcile(self, user_id: int, kind: AssignmentKind, items: Sequence[AssignmentItem]) -> list[Assignment]:
        """Upsert des éléments d'un type ; renvoie les assignations stockées, dans l'ordre."""
        kind = AssignmentKind(kind)
        repo = self._repositories[kind]

        # Validating : tout le type est validé avant la moindre I/O
        validated = []
        for item in items:
            try:
                rating = Rating.decode(item.index)
            except RatingError as e:
                logger.error("rejected %s assignment index=%r: %s", kind.value, item.index, e)
                raise ValidationError(f"{kind.value} rating out of range") from e
            validated.append(Assignment(kind=kind, user_id=user_id, index=rating, value=item.value))

        stored = []
        for assignment in validated:
            logger.debug("started processing %s assignment index=%s user_id=%s", kind.value, assignment.index, user_id)
            try:
                found = repo.find_by_index(user_id, assignment.index)
                if found is not None:
                    assignment = dataclasses.replace(assignment, assignment_id=found.assignment_id)
                stored.append(repo.upsert(assignment))
            except LedgerError as e:
                logger.error("failed to upsert %s assignment: %s", kind.value, e)
                raise ContextError(
                    f"failed processing {kind.value} assignment, please try again with all", error=e
                ) from e
            logger.debug("finished processing %s assignment", kind.value)
        return stored

    def create_assignments(self, request: CreateAssignmentsRequest) -> dict[AssignmentKind, list[Assignment]]:
        self._ensure_user(request.user_id)
        result = {}
        for kind in KIND_ORDER:
            result[kind] = self.reconcile(request.user_id, kind, request.items_for(kind))
        logger.info(
            "reconciled assignments for user id=%s (%s)",
            request.user_id,
            ", ".join(f"{k.value}={len(v)}" for k, v in result.items()),
        )
        return result

    def read_assignments(self, user_id: int) -> dict[AssignmentKind, list[Assignment]]:
        self._ensure_user(user_id)
        return {kind: self._repositories[kind].list_for_user(user_id) for kind in KIND_ORDER}
