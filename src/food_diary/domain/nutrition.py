"""Nutrition domain models."""

import math
from dataclasses import dataclass
from enum import Enum


class MealType(str, Enum):
    """Meal a food entry belongs to."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


MEAL_DISPLAY_ORDER: tuple[MealType, ...] = (
    MealType.BREAKFAST,
    MealType.LUNCH,
    MealType.SNACK,
    MealType.DINNER,
)

NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sugar",
    "saturated_fat",
)


@dataclass(frozen=True)
class Nutrients:
    """Nutrient bundle. Calories in kcal, everything else in grams."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    saturated_fat: float = 0.0

    def plus(self, other: "Nutrients") -> "Nutrients":
        """Return the field-wise sum of two bundles."""
        return Nutrients(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
            sugar=self.sugar + other.sugar,
            saturated_fat=self.saturated_fat + other.saturated_fat,
        )

    def value_of(self, nutrient: str) -> float:
        """Return a single nutrient by field name."""
        if nutrient not in NUTRIENT_FIELDS:
            raise ValueError(f"Unknown nutrient: {nutrient}")
        return float(getattr(self, nutrient))

    def validate(self) -> None:
        """Raise ValueError when any field is negative or not finite."""
        for name in NUTRIENT_FIELDS:
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number")
            if value < 0:
                raise ValueError(f"{name} must not be negative")


@dataclass(frozen=True)
class EntryDraft:
    """User input for a new food entry, before id and timestamp exist."""

    name: str
    quantity: str
    meal_type: MealType
    nutrients: Nutrients


@dataclass(frozen=True)
class FoodEntry:
    """Food item recorded in a day's ledger.

    ``meal_type`` holds the raw stored string when it is not a known
    ``MealType`` so that such entries survive a load/save cycle.
    """

    id: str
    name: str
    quantity: str
    meal_type: MealType | str
    timestamp: int
    nutrients: Nutrients


@dataclass(frozen=True)
class DailyTargets:
    """Per-nutrient daily goals. Sugar and saturated fat are maximums."""

    calories: int
    protein: int
    carbs: int
    fat: int
    fiber: int
    sugar: int
    saturated_fat: int

    def value_of(self, nutrient: str) -> int:
        """Return a single goal by field name."""
        if nutrient not in NUTRIENT_FIELDS:
            raise ValueError(f"Unknown nutrient: {nutrient}")
        return int(getattr(self, nutrient))


@dataclass(frozen=True)
class DayStats:
    """Current totals for a day with the targets they are measured against."""

    totals: Nutrients
    targets: DailyTargets


@dataclass(frozen=True)
class CalorieRing:
    """Calorie ring segments in kcal for the daily overview chart."""

    protein_kcal: float
    carbs_kcal: float
    fat_kcal: float
    remaining_kcal: float


@dataclass(frozen=True)
class MealSection:
    """Entries of one meal type with their calorie subtotal."""

    meal_type: MealType
    entries: tuple[FoodEntry, ...]
    total_calories: float


@dataclass(frozen=True)
class MealSections:
    """Entries partitioned by meal type in display order."""

    sections: tuple[MealSection, ...]
    unassigned: tuple[FoodEntry, ...]
