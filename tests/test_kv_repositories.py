"""Tests for key-value backed repositories."""

import json
from datetime import date

from food_diary.adapters.key_value_store import InMemoryKeyValueStore
from food_diary.adapters.kv_repositories import (
    KeyValueLedgerRepository,
    KeyValueProfileRepository,
    entry_from_row,
    entry_to_row,
)
from food_diary.domain.nutrition import MealType
from food_diary.domain.profile import (
    ActivityLevel,
    Gender,
    UserGoal,
    UserProfile,
    WeightRecord,
)
from tests.conftest import make_entry

DAY = date(2024, 6, 9)


def test_ledger_round_trip_uses_day_key() -> None:
    store = InMemoryKeyValueStore()
    repository = KeyValueLedgerRepository(store)
    entries = [
        make_entry("a", MealType.BREAKFAST, calories=310.5, protein=12, fiber=4),
        make_entry("b", "Brunch", calories=90, saturated_fat=1.25),
    ]

    repository.save_entries(DAY, entries)

    assert repository.list_entries(DAY) == entries
    row = json.loads(store.values["items_2024-06-09"])[0]
    assert row["mealType"] == "Breakfast"
    assert row["saturatedFat"] == 0.0


def test_ledger_prefix_applies_to_keys() -> None:
    store = InMemoryKeyValueStore()
    repository = KeyValueLedgerRepository(store, prefix="diary_")

    repository.save_entries(DAY, [make_entry("a", calories=1)])

    assert list(store.values) == ["diary_items_2024-06-09"]
    assert repository.list_days() == [DAY]


def test_list_days_reports_only_non_empty_arrays() -> None:
    store = InMemoryKeyValueStore()
    repository = KeyValueLedgerRepository(store)
    repository.save_entries(DAY, [make_entry("a", calories=1)])
    repository.save_entries(date(2024, 6, 10), [])
    store.set("items_not-a-date", "[]")
    store.set("profile", "{}")

    assert repository.list_days() == [DAY]


def test_unreadable_ledger_is_empty() -> None:
    store = InMemoryKeyValueStore({"items_2024-06-09": "{broken"})

    assert KeyValueLedgerRepository(store).list_entries(DAY) == []


def test_entry_missing_nutrients_default_to_zero() -> None:
    entry = entry_from_row(
        {
            "id": "x",
            "name": "Apple",
            "quantity": "1 piece",
            "mealType": "Snack",
            "timestamp": 1700000000000,
            "calories": 52,
            "protein": 0.3,
            "carbs": 14,
            "fat": 0.2,
        }
    )

    assert entry.meal_type == MealType.SNACK
    assert entry.nutrients.fiber == 0.0
    assert entry_to_row(entry)["calories"] == 52.0


def test_profile_round_trip() -> None:
    store = InMemoryKeyValueStore()
    repository = KeyValueProfileRepository(store)
    profile = UserProfile(
        age=34,
        weight=68.5,
        height=170.0,
        gender=Gender.FEMALE,
        activity=ActivityLevel.LIGHT,
        goal=UserGoal.LOSE_SLOW,
        is_configured=True,
        weight_history=(
            WeightRecord(date(2024, 1, 1), 70.0),
            WeightRecord(date(2024, 2, 1), 68.5),
        ),
    )

    repository.save_profile(profile)

    assert repository.get_profile() == profile
    stored = json.loads(store.values["profile"])
    assert stored["isConfigured"] is True
    assert stored["weightHistory"][0] == {"date": "2024-01-01", "weight": 70.0}


def test_invalid_profile_is_absent() -> None:
    store = InMemoryKeyValueStore({"profile": json.dumps({"age": 30})})

    assert KeyValueProfileRepository(store).get_profile() is None


def test_non_object_profile_is_absent() -> None:
    for raw in ("null", "[]", '"x"', "42"):
        store = InMemoryKeyValueStore({"profile": raw})

        assert KeyValueProfileRepository(store).get_profile() is None


def test_non_finite_profile_is_absent() -> None:
    row = {
        "age": 30,
        "weight": 75.0,
        "height": 175.0,
        "gender": "male",
        "activity": "moderate",
        "goal": "maintain",
        "isConfigured": True,
    }
    store = InMemoryKeyValueStore({"profile": json.dumps({**row, "weight": "inf"})})

    assert KeyValueProfileRepository(store).get_profile() is None


def test_malformed_weight_history_items_are_skipped() -> None:
    row = {
        "age": 30,
        "weight": 75.0,
        "height": 175.0,
        "gender": "male",
        "activity": "moderate",
        "goal": "maintain",
        "isConfigured": True,
        "weightHistory": [None, "x", {"date": "2024-01-01", "weight": 76}],
    }
    store = InMemoryKeyValueStore({"profile": json.dumps(row)})

    profile = KeyValueProfileRepository(store).get_profile()

    assert profile is not None
    assert profile.weight_history == (WeightRecord(date(2024, 1, 1), 76.0),)


def test_non_finite_stored_numbers_read_as_zero() -> None:
    raw = (
        '[{"id": "x", "name": "Bread", "mealType": "Lunch",'
        ' "timestamp": Infinity, "calories": NaN, "protein": "inf", "carbs": 20}]'
    )
    store = InMemoryKeyValueStore({"items_2024-06-09": raw})

    [entry] = KeyValueLedgerRepository(store).list_entries(DAY)

    assert entry.timestamp == 0
    assert entry.nutrients.calories == 0.0
    assert entry.nutrients.protein == 0.0
    assert entry.nutrients.carbs == 20.0
