# dailyledger/schemas/entries.py
# -*- coding: utf-8 -*-
"""
Schémas du ledger : requêtes d'écriture / lecture et pages de réponse.

Entrée : `CreateFoodEntriesRequest.model_validate(payload)` (notes décodées,
macros finies, horodatages ramenés en UTC). Sortie : `page.model_dump(mode="json")`.
"""

from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, FiniteFloat, field_validator

from dailyledger.domain.entries import ActivityEntry, ActivityType, FoodEntry, MoodEntry
from dailyledger.errors import ValidationError
from dailyledger.schemas.base import LedgerModel, RatingValue, Timestamp


def _required_text(value: str, name: str) -> str:
    if not value.strip():
        raise ValidationError(f"{name} is required")
    return value


# -----------------------------------------------------------------------------
# Écriture
# -----------------------------------------------------------------------------

class NewFoodEntry(LedgerModel):
    description: str
    calories: FiniteFloat | None = None
    carbs: FiniteFloat | None = None
    protein: FiniteFloat | None = None
    fats: FiniteFloat | None = None
    micronutrients: dict[str, Any] | None = None
    logged_at: Timestamp | None = None

    @field_validator("description")
    @classmethod
    def _description_required(cls, v: str) -> str:
        return _required_text(v, "description")

    def to_entry(self, user_id: int) -> FoodEntry:
        return FoodEntry(
            user_id=user_id,
            description=self.description,
            calories=self.calories,
            carbs=self.carbs,
            protein=self.protein,
            fats=self.fats,
            micronutrients=self.micronutrients,
            logged_at=self.logged_at,
        )


class NewMoodEntry(LedgerModel):
    mood: RatingValue | None = None
    energy: RatingValue | None = None
    sleep: RatingValue | None = None
    notes: str | None = None
    logged_at: Timestamp | None = None

    def to_entry(self, user_id: int) -> MoodEntry:
        return MoodEntry(
            user_id=user_id,
            mood=self.mood,
            energy=self.energy,
            sleep=self.sleep,
            notes=self.notes,
            logged_at=self.logged_at,
        )


class NewActivityEntry(LedgerModel):
    activity: str
    activity_type: ActivityType
    activity_info: dict[str, Any] | None = None
    logged_at: Timestamp | None = None

    @field_validator("activity")
    @classmethod
    def _activity_required(cls, v: str) -> str:
        return _required_text(v, "activity")

    @field_validator("activity_type", mode="before")
    @classmethod
    def _parse_type(cls, v):
        return ActivityType.parse(v)

    def to_entry(self, user_id: int) -> ActivityEntry:
        return ActivityEntry(
            user_id=user_id,
            activity=self.activity,
            activity_type=self.activity_type,
            activity_info=self.activity_info,
            logged_at=self.logged_at,
        )


class CreateFoodEntriesRequest(LedgerModel):
    user_id: int = Field(strict=True)
    food_entries: tuple[NewFoodEntry, ...]


class CreateMoodEntriesRequest(LedgerModel):
    user_id: int = Field(strict=True)
    mood_entries: tuple[NewMoodEntry, ...]


class CreateActivityEntriesRequest(LedgerModel):
    user_id: int = Field(strict=True)
    activity_entries: tuple[NewActivityEntry, ...]


# -----------------------------------------------------------------------------
# Lecture
# -----------------------------------------------------------------------------

class ReadEntriesRequest(LedgerModel):
    """Bornes incluses ; `*_date` est le nom des clés côté payload."""
    user_id: int = Field(strict=True)
    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
    logged_before: Timestamp | None = Field(
        default=None, validation_alias=AliasChoices("logged_before_date", "logged_before")
    )
    logged_after: Timestamp | None = Field(
        default=None, validation_alias=AliasChoices("logged_after_date", "logged_after")
    )


class FoundFoodRecord(LedgerModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    description: str
    calories: float | None
    carbs: float | None
    protein: float | None
    fats: float | None
    micronutrients: dict[str, Any] | None
    logged_at: Timestamp


class FoundMoodRecord(LedgerModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    mood: RatingValue | None
    energy: RatingValue | None
    sleep: RatingValue | None
    notes: str | None
    logged_at: Timestamp


class FoundActivityRecord(LedgerModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    activity: str
    activity_type: ActivityType
    activity_info: dict[str, Any] | None
    logged_at: Timestamp


class CaloriesResult(LedgerModel):
    total_calories: float
    food_entries_without_calories: int


class MacrosResult(LedgerModel):
    total_carbs: float
    total_protein: float
    total_fats: float
    food_entries_without_carbs: int
    food_entries_without_protein: int
    food_entries_without_fats: int


class RatingsResult(LedgerModel):
    total_mood: int
    total_energy: int
    total_sleep: int
    mood_entries_without_mood: int
    mood_entries_without_energy: int
    mood_entries_without_sleep: int


class FoodEntriesPage(LedgerModel):
    found_food_entries: int
    food_entries: tuple[FoundFoodRecord, ...]
    calories_result: CaloriesResult
    macros_result: MacrosResult


class MoodEntriesPage(LedgerModel):
    found_mood_entries: int
    mood_entries: tuple[FoundMoodRecord, ...]
    ratings_result: RatingsResult


class ActivityEntriesPage(LedgerModel):
    found_activity_entries: int
    activity_entries: tuple[FoundActivityRecord, ...]
