# dailyledger/schemas/assignments.py
# -*- coding: utf-8 -*-
from typing import Any

from pydantic import Field

from dailyledger.domain.entries import AssignmentKind
from dailyledger.schemas.base import LedgerModel


class AssignmentItem(LedgerModel):
    value: str
    # borné au moment de la réconciliation ("<type> rating out of range")
    index: Any


class CreateAssignmentsRequest(LedgerModel):
    user_id: int = Field(strict=True)
    mood_assignments: tuple[AssignmentItem, ...] = ()
    energy_assignments: tuple[AssignmentItem, ...] = ()
    sleep_assignments: tuple[AssignmentItem, ...] = ()

    def items_for(self, kind: AssignmentKind) -> tuple[AssignmentItem, ...]:
        return getattr(self, f"{AssignmentKind(kind).value}_assignments")
