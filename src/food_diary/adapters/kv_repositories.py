"""Ledger and profile repositories on top of a key-value store.

Keys are ``<prefix>items_<YYYY-MM-DD>`` for a day's entry array and
``<prefix>profile`` for the user profile. Values are JSON documents with
camelCase field names.
"""

import json
import logging
import math
from dataclasses import dataclass
from datetime import date

from food_diary.adapters.key_value_store import KeyValueStore
from food_diary.domain.nutrition import FoodEntry, MealType, Nutrients
from food_diary.domain.profile import (
    ActivityLevel,
    Gender,
    UserGoal,
    UserProfile,
    WeightRecord,
)
from food_diary.services.ledger import LedgerRepository
from food_diary.services.profile import ProfileRepository

ITEMS_KEY_PREFIX = "items_"
PROFILE_KEY = "profile"

_logger = logging.getLogger(__name__)


@dataclass
class KeyValueLedgerRepository(LedgerRepository):
    """Ledger repository storing one JSON array per day."""

    store: KeyValueStore
    prefix: str = ""

    def list_entries(self, day: date) -> list[FoodEntry]:
        """Return the entries stored for a day."""
        rows = self._load_rows(self._key(day))
        return [entry_from_row(row) for row in rows]

    def save_entries(self, day: date, entries: list[FoodEntry]) -> None:
        """Replace the stored entries for a day."""
        payload = [entry_to_row(entry) for entry in entries]
        self.store.set(self._key(day), json.dumps(payload, ensure_ascii=False))

    def list_days(self) -> list[date]:
        """Return days whose stored entry array is non-empty."""
        items_prefix = f"{self.prefix}{ITEMS_KEY_PREFIX}"
        days: list[date] = []
        for key in self.store.keys():
            if not key.startswith(items_prefix):
                continue
            try:
                day = date.fromisoformat(key[len(items_prefix) :])
            except ValueError:
                continue
            if self._load_rows(key):
                days.append(day)
        return days

    def _key(self, day: date) -> str:
        return f"{self.prefix}{ITEMS_KEY_PREFIX}{day.isoformat()}"

    def _load_rows(self, key: str) -> list[dict[str, object]]:
        raw = self.store.get(key)
        if not raw:
            return []
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Unreadable ledger %s, treating as empty", key)
            return []
        if not isinstance(rows, list):
            _logger.warning("Ledger %s is not a list, treating as empty", key)
            return []
        return [row for row in rows if isinstance(row, dict)]


@dataclass
class KeyValueProfileRepository(ProfileRepository):
    """Profile repository storing a single JSON object."""

    store: KeyValueStore
    prefix: str = ""

    def get_profile(self) -> UserProfile | None:
        """Return the stored profile, if readable."""
        key = f"{self.prefix}{PROFILE_KEY}"
        raw = self.store.get(key)
        if not raw:
            return None
        try:
            row = json.loads(raw)
            if not isinstance(row, dict):
                raise TypeError("profile is not an object")
            return profile_from_row(row)
        except (KeyError, TypeError, ValueError, OverflowError):
            _logger.warning("Unreadable profile %s, treating as absent", key)
            return None

    def save_profile(self, profile: UserProfile) -> None:
        """Replace the stored profile."""
        self.store.set(
            f"{self.prefix}{PROFILE_KEY}",
            json.dumps(profile_to_row(profile), ensure_ascii=False),
        )


def entry_to_row(entry: FoodEntry) -> dict[str, object]:
    """Serialize a food entry to its stored JSON shape."""
    meal_type = entry.meal_type
    return {
        "id": entry.id,
        "name": entry.name,
        "quantity": entry.quantity,
        "mealType": meal_type.value if isinstance(meal_type, MealType) else meal_type,
        "timestamp": entry.timestamp,
        "calories": entry.nutrients.calories,
        "protein": entry.nutrients.protein,
        "carbs": entry.nutrients.carbs,
        "fat": entry.nutrients.fat,
        "fiber": entry.nutrients.fiber,
        "sugar": entry.nutrients.sugar,
        "saturatedFat": entry.nutrients.saturated_fat,
    }


def entry_from_row(row: dict[str, object]) -> FoodEntry:
    """Parse a stored food entry. Missing nutrients default to zero."""
    return FoodEntry(
        id=str(row.get("id") or ""),
        name=str(row.get("name") or ""),
        quantity=str(row.get("quantity") or ""),
        meal_type=_parse_meal_type(row.get("mealType")),
        timestamp=int(_to_float(row.get("timestamp"))),
        nutrients=Nutrients(
            calories=_to_float(row.get("calories")),
            protein=_to_float(row.get("protein")),
            carbs=_to_float(row.get("carbs")),
            fat=_to_float(row.get("fat")),
            fiber=_to_float(row.get("fiber")),
            sugar=_to_float(row.get("sugar")),
            saturated_fat=_to_float(row.get("saturatedFat")),
        ),
    )


def profile_to_row(profile: UserProfile) -> dict[str, object]:
    """Serialize a profile to its stored JSON shape."""
    return {
        "age": profile.age,
        "weight": profile.weight,
        "height": profile.height,
        "gender": profile.gender.value,
        "activity": profile.activity.value,
        "goal": profile.goal.value,
        "isConfigured": profile.is_configured,
        "weightHistory": [
            {"date": record.day.isoformat(), "weight": record.weight}
            for record in profile.weight_history
        ],
    }


def profile_from_row(row: dict[str, object]) -> UserProfile:
    """Parse a stored profile. Raises on missing or invalid fields."""
    history_rows = row.get("weightHistory")
    if not isinstance(history_rows, list):
        history_rows = []
    history = sorted(
        (
            WeightRecord(
                day=date.fromisoformat(str(item["date"])),
                weight=_finite(item["weight"]),
            )
            for item in history_rows
            if isinstance(item, dict)
        ),
        key=lambda record: record.day,
    )
    return UserProfile(
        age=int(row["age"]),
        weight=_finite(row["weight"]),
        height=_finite(row["height"]),
        gender=Gender(row["gender"]),
        activity=ActivityLevel(row["activity"]),
        goal=UserGoal(row["goal"]),
        is_configured=bool(row.get("isConfigured", False)),
        weight_history=tuple(history),
    )


def _parse_meal_type(value: object) -> MealType | str:
    raw = str(value or "")
    try:
        return MealType(raw)
    except ValueError:
        _logger.warning("Unknown meal type %r kept as is", raw)
        return raw


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _finite(value: object) -> float:
    number = float(value)  # type: ignore[arg-type]
    if not math.isfinite(number):
        raise ValueError(f"Not a finite number: {value!r}")
    return number
