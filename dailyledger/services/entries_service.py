# dailyledger/services/entries_service.py
# -*- coding: utf-8 -*-
"""
Handlers d'écriture / lecture du ledger (food, mood, activity).

Écriture : payload -> requête validée par pydantic (décodage des notes ici)
-> garde utilisateur -> enregistrements du domaine -> `create_batch` (un seul
lot, tout ou rien).

Lecture : garde utilisateur -> bornes de pagination (offset=0, limit=10000 par
défaut) -> `read_range` -> agrégation en une passe -> page de réponse.
Une lecture sans résultat est un succès (page vide) ; seul un utilisateur
inconnu donne NotFound.

Usage:
    svc = FoodEntryService(users=UserRepository(sf), repository=FoodEntryRepository(sf))
    svc.create_entries(CreateFoodEntriesRequest.model_validate({...}))
    page = svc.read_entries(ReadEntriesRequest(user_id=1))
    page.model_dump(mode="json")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from dailyledger.domain.entries import ActivityEntry, FoodEntry, MoodEntry
from dailyledger.errors import NotFound, ValidationError
from dailyledger.persistence.repositories.base import LedgerRepository, UserDirectory
from dailyledger.schemas.entries import (
    ActivityEntriesPage,
    CaloriesResult,
    CreateActivityEntriesRequest,
    CreateFoodEntriesRequest,
    CreateMoodEntriesRequest,
    FoodEntriesPage,
    FoundActivityRecord,
    FoundFoodRecord,
    FoundMoodRecord,
    MacrosResult,
    MoodEntriesPage,
    RatingsResult,
    ReadEntriesRequest,
)
from dailyledger.services.aggregation import ACTIVITY_FIELDS, FOOD_FIELDS, MOOD_FIELDS, FoldResult, fold_entries

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10000
DEFAULT_OFFSET = 0


class EntryService:
    """Base commune : dépendances injectées au constructeur, aucun état global."""

    kind = "ledger"
    tracked_fields: Mapping[str, float] = {}

    def __init__(self, users: UserDirectory, repository: LedgerRepository, *, default_limit: int = DEFAULT_LIMIT) -> None:
        self._users = users
        self._repository = repository
        self._default_limit = default_limit

    def _ensure_user(self, user_id: int) -> None:
        if not self._users.exists(user_id):
            logger.error("failed to find user id=%s", user_id)
            raise NotFound("user not found")

    def _new_items(self, request) -> tuple:
        raise NotImplementedError

    def _project(self, entry):
        raise NotImplementedError

    def _page(self, folded: FoldResult):
        raise NotImplementedError

    def create_entries(self, request) -> int:
        """Crée toutes les entrées de la requête en un seul lot ; renvoie leur nombre."""
        items = self._new_items(request)
        if not items:
            raise ValidationError("cannot create zero entries")
        self._ensure_user(request.user_id)

        records = [item.to_entry(request.user_id) for item in items]
        self._repository.create_batch(records)
        logger.info("created %d %s entries for user id=%s", len(records), self.kind, request.user_id)
        return len(records)

    def read_entries(self, request: ReadEntriesRequest):
        self._ensure_user(request.user_id)

        offset = DEFAULT_OFFSET if request.offset is None else request.offset
        limit = self._default_limit if request.limit is None else request.limit
        logger.debug("reading %s entries offset=%s limit=%s", self.kind, offset, limit)

        records = self._repository.read_range(
            request.user_id,
            request.logged_before,
            request.logged_after,
            limit,
            offset,
        )
        return self._page(fold_entries(records, self.tracked_fields, self._project))


class FoodEntryService(EntryService):
    kind = "food"
    tracked_fields = FOOD_FIELDS

    def _new_items(self, request: CreateFoodEntriesRequest) -> tuple:
        return request.food_entries

    def _project(self, entry: FoodEntry) -> FoundFoodRecord:
        return FoundFoodRecord.model_validate(entry)

    def _page(self, folded: FoldResult) -> FoodEntriesPage:
        totals, missing = folded.totals, folded.missing
        return FoodEntriesPage(
            found_food_entries=len(folded.entries),
            food_entries=tuple(folded.entries),
            calories_result=CaloriesResult(
                total_calories=totals["calories"],
                food_entries_without_calories=missing["calories"],
            ),
            macros_result=MacrosResult(
                total_carbs=totals["carbs"],
                total_protein=totals["protein"],
                total_fats=totals["fats"],
                food_entries_without_carbs=missing["carbs"],
                food_entries_without_protein=missing["protein"],
                food_entries_without_fats=missing["fats"],
            ),
        )


class MoodEntryService(EntryService):
    kind = "mood"
    tracked_fields = MOOD_FIELDS

    def _new_items(self, request: CreateMoodEntriesRequest) -> tuple:
        return request.mood_entries

    def _project(self, entry: MoodEntry) -> FoundMoodRecord:
        return FoundMoodRecord.model_validate(entry)

    def _page(self, folded: FoldResult) -> MoodEntriesPage:
        totals, missing = folded.totals, folded.missing
        return MoodEntriesPage(
            found_mood_entries=len(folded.entries),
            mood_entries=tuple(folded.entries),
            ratings_result=RatingsResult(
                total_mood=totals["mood"],
                total_energy=totals["energy"],
                total_sleep=totals["sleep"],
                mood_entries_without_mood=missing["mood"],
                mood_entries_without_energy=missing["energy"],
                mood_entries_without_sleep=missing["sleep"],
            ),
        )


class ActivityEntryService(EntryService):
    kind = "activity"
    tracked_fields = ACTIVITY_FIELDS

    def _new_items(self, request: CreateActivityEntriesRequest) -> tuple:
        return request.activity_entries

    def _project(self, entry: ActivityEntry) -> FoundActivityRecord:
        return FoundActivityRecord.model_validate(entry)

    def _page(self, folded: FoldResult) -> ActivityEntriesPage:
        return ActivityEntriesPage(
            found_activity_entries=len(folded.entries),
            activity_entries=tuple(folded.entries),
        )
