# tests/test_entries_service.py
# -*- coding: utf-8 -*-
"""
Tests des handlers d'écriture / lecture du ledger (dailyledger/services/entries_service.py)
et des schémas pydantic qu'ils consomment / produisent (dailyledger/schemas/entries.py).

Ce fichier couvre :
- validation des payloads (notes hors bornes, types invalides, macros non finies,
  type d'activité obligatoire, dates ISO),
- ordre des gardes à l'écriture : lot vide -> 400, utilisateur inconnu -> 404,
- lecture : pagination par défaut (offset=0, limit=10000), page vide = succès,
- agrégats renvoyés avec la page (calories_result / macros_result / ratings_result),
- forme sérialisée de la réponse (`model_dump(mode="json")`),
- propagation d'une panne de stockage (DatabaseError, rien d'écrit).

Les repositories sont des fakes en mémoire (dailyledger/persistence/repositories/memory.py).
"""

import datetime as dt

import pytest

from dailyledger.domain.entries import ActivityType
from dailyledger.domain.rating import Rating
from dailyledger.errors import DatabaseError, NotFound, RatingError, ValidationError
from dailyledger.persistence.repositories.memory import InMemoryLedgerRepository, InMemoryUserDirectory
from dailyledger.schemas.entries import (
    CreateActivityEntriesRequest,
    CreateFoodEntriesRequest,
    CreateMoodEntriesRequest,
    NewActivityEntry,
    NewFoodEntry,
    NewMoodEntry,
    ReadEntriesRequest,
)
from dailyledger.services.entries_service import (
    DEFAULT_LIMIT,
    ActivityEntryService,
    FoodEntryService,
    MoodEntryService,
)

USER = 1


class RecordingRepository(InMemoryLedgerRepository):
    """Fake qui garde la trace des arguments de lecture."""

    def read_range(self, user_id, before=None, after=None, limit=10000, offset=0):
        self.last_read = dict(user_id=user_id, before=before, after=after, limit=limit, offset=offset)
        return super().read_range(user_id, before, after, limit, offset)


@pytest.fixture
def users():
    return InMemoryUserDirectory([USER])


@pytest.fixture
def food_repo():
    return RecordingRepository()


@pytest.fixture
def food(users, food_repo):
    return FoodEntryService(users, food_repo)


# -----------------------------------------------------------------------------
# Validation des payloads
# -----------------------------------------------------------------------------

def test_food_payload_is_decoded():
    req = CreateFoodEntriesRequest.model_validate({
        "user_id": USER,
        "food_entries": [
            {"description": "omelette", "calories": 320, "protein": 21.5, "logged_at": "2025-03-10T08:30:00Z"},
        ],
    })
    (item,) = req.food_entries
    assert item.calories == 320.0
    assert item.carbs is None
    assert item.logged_at == dt.datetime(2025, 3, 10, 8, 30, tzinfo=dt.timezone.utc)


def test_mood_payload_with_out_of_range_rating_is_rejected():
    with pytest.raises(RatingError) as exc:
        CreateMoodEntriesRequest.model_validate({"user_id": USER, "mood_entries": [{"mood": 11}]})
    assert exc.value.bound == "too large"
    assert str(exc.value).startswith("invalid rating: rating too large")


def test_mood_payload_missing_ratings_stay_none():
    req = CreateMoodEntriesRequest.model_validate({"user_id": USER, "mood_entries": [{"mood": 4, "notes": "ok"}]})
    (item,) = req.mood_entries
    assert item.mood == Rating(4)
    assert item.energy is None and item.sleep is None


@pytest.mark.parametrize("payload", [
    {"user_id": "1", "food_entries": []},
    {"user_id": True, "food_entries": []},
    {"user_id": USER},
    {"user_id": USER, "food_entries": [{"calories": 10}]},
    {"user_id": USER, "food_entries": [{"description": "x", "calories": "beaucoup"}]},
    {"user_id": USER, "food_entries": [{"description": "x", "logged_at": "hier"}]},
])
def test_invalid_food_payloads(payload):
    with pytest.raises(ValidationError) as exc:
        CreateFoodEntriesRequest.model_validate(payload)
    assert exc.value.status_code == 400


@pytest.mark.parametrize("field", ["calories", "carbs", "protein", "fats"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_macros_are_rejected(field, value):
    with pytest.raises(ValidationError) as exc:
        CreateFoodEntriesRequest.model_validate({
            "user_id": USER,
            "food_entries": [{"description": "x", field: value}],
        })
    assert str(exc.value).startswith(f"food_entries.0.{field}: ")


def test_non_finite_macro_is_rejected_on_direct_construction():
    with pytest.raises(ValidationError):
        NewFoodEntry(description="x", calories=float("nan"))


def test_unknown_activity_type_is_rejected():
    with pytest.raises(ValidationError) as exc:
        CreateActivityEntriesRequest.model_validate({
            "user_id": USER,
            "activity_entries": [{"activity": "yoga", "activity_type": "levitation"}],
        })
    assert "unknown activity type 'levitation'" in str(exc.value)


def test_activity_type_is_required():
    with pytest.raises(ValidationError) as exc:
        CreateActivityEntriesRequest.model_validate({
            "user_id": USER,
            "activity_entries": [{"activity": "marche"}],
        })
    assert str(exc.value).startswith("activity_entries.0.activity_type: ")


@pytest.mark.parametrize("wire, expected", [
    ("WeightLifting", ActivityType.WEIGHT_LIFTING),
    ("weight_lifting", ActivityType.WEIGHT_LIFTING),
    ("Walking", ActivityType.WALKING),
    (ActivityType.WALKING, ActivityType.WALKING),
])
def test_activity_type_accepts_names_and_values(wire, expected):
    item = NewActivityEntry(activity="séance", activity_type=wire)
    assert item.activity_type is expected


def test_read_payload_keys():
    req = ReadEntriesRequest.model_validate({
        "user_id": USER,
        "limit": 20,
        "logged_before_date": "2025-03-10T00:00:00+00:00",
        "logged_after_date": "2025-03-01",
    })
    assert req.limit == 20
    assert req.offset is None
    assert req.logged_before == dt.datetime(2025, 3, 10, tzinfo=dt.timezone.utc)
    assert req.logged_after == dt.datetime(2025, 3, 1, tzinfo=dt.timezone.utc)


def test_read_request_dates_are_converted_to_utc():
    paris = dt.timezone(dt.timedelta(hours=1))
    req = ReadEntriesRequest(user_id=USER, logged_after=dt.datetime(2025, 3, 1, 1, tzinfo=paris))
    assert req.logged_after == dt.datetime(2025, 3, 1, tzinfo=dt.timezone.utc)
    assert req.logged_after.tzinfo is dt.timezone.utc


def test_requests_are_immutable():
    item = NewFoodEntry(description="a")
    with pytest.raises(Exception):
        item.description = "b"


# -----------------------------------------------------------------------------
# Écriture
# -----------------------------------------------------------------------------

def test_create_entries_returns_count(food, food_repo):
    req = CreateFoodEntriesRequest(
        user_id=USER,
        food_entries=(NewFoodEntry(description="a", calories=100.0), NewFoodEntry(description="b")),
    )
    assert food.create_entries(req) == 2
    assert len(food_repo.rows) == 2
    assert food_repo.calls["create_batch"] == 1


def test_empty_batch_is_rejected_before_any_io(users, food, food_repo):
    with pytest.raises(ValidationError) as exc:
        food.create_entries(CreateFoodEntriesRequest(user_id=USER, food_entries=()))
    assert str(exc.value) == "cannot create zero entries"
    assert exc.value.status_code == 400
    assert users.calls["exists"] == 0
    assert food_repo.calls["create_batch"] == 0


def test_unknown_user_is_not_found_and_nothing_is_written(food, food_repo):
    with pytest.raises(NotFound) as exc:
        food.create_entries(CreateFoodEntriesRequest(user_id=999, food_entries=(NewFoodEntry(description="a"),)))
    assert exc.value.status_code == 404
    assert food_repo.rows == []


def test_storage_failure_propagates_and_writes_nothing(users):
    repo = InMemoryLedgerRepository(fail_on_call=1)
    svc = MoodEntryService(users, repo)
    with pytest.raises(DatabaseError) as exc:
        svc.create_entries(CreateMoodEntriesRequest(user_id=USER, mood_entries=(NewMoodEntry(mood=Rating(5)),)))
    assert exc.value.status_code == 500
    assert repo.rows == []


def test_blank_description_is_rejected():
    with pytest.raises(ValidationError) as exc:
        NewFoodEntry(description="   ")
    assert str(exc.value) == "description is required"


# -----------------------------------------------------------------------------
# Lecture
# -----------------------------------------------------------------------------

def test_read_defaults(food, food_repo):
    food.read_entries(ReadEntriesRequest(user_id=USER))
    assert food_repo.last_read == dict(user_id=USER, before=None, after=None, limit=DEFAULT_LIMIT, offset=0)


def test_configured_default_limit(users, food_repo):
    svc = FoodEntryService(users, food_repo, default_limit=50)
    svc.read_entries(ReadEntriesRequest(user_id=USER))
    assert food_repo.last_read["limit"] == 50


def test_read_unknown_user_is_not_found(food):
    with pytest.raises(NotFound):
        food.read_entries(ReadEntriesRequest(user_id=42))


def test_empty_page_is_a_success(food):
    page = food.read_entries(ReadEntriesRequest(user_id=USER))
    assert page.found_food_entries == 0
    assert page.model_dump(mode="json") == {
        "found_food_entries": 0,
        "food_entries": [],
        "calories_result": {"total_calories": 0.0, "food_entries_without_calories": 0},
        "macros_result": {
            "total_carbs": 0.0,
            "total_protein": 0.0,
            "total_fats": 0.0,
            "food_entries_without_carbs": 0,
            "food_entries_without_protein": 0,
            "food_entries_without_fats": 0,
        },
    }
    assert type(page.calories_result.total_calories) is float


@pytest.mark.parametrize("field", ["limit", "offset"])
def test_negative_pagination_is_rejected(field):
    with pytest.raises(ValidationError) as exc:
        ReadEntriesRequest(user_id=USER, **{field: -1})
    assert str(exc.value).startswith(f"{field}: ")


def test_read_returns_page_with_totals(food):
    t = dt.datetime(2025, 3, 10, 12, tzinfo=dt.timezone.utc)
    food.create_entries(CreateFoodEntriesRequest(user_id=USER, food_entries=(
        NewFoodEntry(description="midi", calories=100.0, carbs=20.5, logged_at=t - dt.timedelta(hours=1)),
        NewFoodEntry(description="soir", calories=None, carbs=10.0, logged_at=t),
        NewFoodEntry(description="goûter", calories=100.0, logged_at=t - dt.timedelta(hours=2)),
    )))

    page = food.read_entries(ReadEntriesRequest(user_id=USER))
    assert page.found_food_entries == 3
    assert [e.description for e in page.food_entries] == ["soir", "midi", "goûter"]
    assert page.calories_result.total_calories == 200.0
    assert page.calories_result.food_entries_without_calories == 1
    assert page.macros_result.total_carbs == 30.5
    assert page.macros_result.food_entries_without_carbs == 1
    assert page.macros_result.food_entries_without_fats == 3

    out = page.model_dump(mode="json")
    assert out["found_food_entries"] == 3
    assert out["food_entries"][0]["logged_at"] == "2025-03-10T12:00:00Z"
    assert out["food_entries"][0]["micronutrients"] is None


def test_read_with_date_filters(food):
    t = dt.datetime(2025, 3, 10, 12, tzinfo=dt.timezone.utc)
    food.create_entries(CreateFoodEntriesRequest(user_id=USER, food_entries=tuple(
        NewFoodEntry(description=f"j-{i}", logged_at=t - dt.timedelta(days=i)) for i in range(5)
    )))
    page = food.read_entries(ReadEntriesRequest(
        user_id=USER,
        logged_before=t - dt.timedelta(days=1),
        logged_after=t - dt.timedelta(days=3),
    ))
    assert [e.description for e in page.food_entries] == ["j-1", "j-2", "j-3"]


def test_mood_page_serializes_ratings_as_ints(users):
    svc = MoodEntryService(users, InMemoryLedgerRepository())
    svc.create_entries(CreateMoodEntriesRequest(
        user_id=USER,
        mood_entries=(NewMoodEntry(mood=Rating(8), sleep=Rating(6)),),
    ))
    out = svc.read_entries(ReadEntriesRequest(user_id=USER)).model_dump(mode="json")
    (entry,) = out["mood_entries"]
    assert (entry["mood"], entry["energy"], entry["sleep"]) == (8, None, 6)
    assert out["ratings_result"] == {
        "total_mood": 8,
        "total_energy": 0,
        "total_sleep": 6,
        "mood_entries_without_mood": 0,
        "mood_entries_without_energy": 1,
        "mood_entries_without_sleep": 0,
    }


def test_activity_round_trip_through_service(users):
    svc = ActivityEntryService(users, InMemoryLedgerRepository())
    svc.create_entries(CreateActivityEntriesRequest.model_validate({
        "user_id": USER,
        "activity_entries": [{"activity": "marche", "activity_type": "Walking", "activity_info": {"km": 4}}],
    }))
    out = svc.read_entries(ReadEntriesRequest(user_id=USER)).model_dump(mode="json")
    assert out["found_activity_entries"] == 1
    (entry,) = out["activity_entries"]
    assert entry["activity_type"] == ActivityType.WALKING.value
    assert entry["activity_info"] == {"km": 4}
    assert set(out) == {"found_activity_entries", "activity_entries"}
