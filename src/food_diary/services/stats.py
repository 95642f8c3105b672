"""Daily aggregation and derived display quantities."""

from collections.abc import Iterable

from food_diary.domain.nutrition import (
    MEAL_DISPLAY_ORDER,
    CalorieRing,
    DailyTargets,
    DayStats,
    FoodEntry,
    MealSection,
    MealSections,
    MealType,
    Nutrients,
)
from food_diary.services.goals import (
    KCAL_PER_GRAM_CARBS,
    KCAL_PER_GRAM_FAT,
    KCAL_PER_GRAM_PROTEIN,
)


def aggregate(entries: Iterable[FoodEntry], targets: DailyTargets) -> DayStats:
    """Sum every nutrient across entries and attach the targets unchanged.

    Entries are trusted as stored: no filtering by meal type or date and no
    re-validation of values.
    """
    totals = Nutrients()
    for entry in entries:
        totals = totals.plus(entry.nutrients)
    return DayStats(totals=totals, targets=targets)


def remaining_calories(stats: DayStats) -> float:
    """Calories left for the day, never negative."""
    return max(0.0, stats.targets.calories - stats.totals.calories)


def macro_calories(totals: Nutrients) -> tuple[float, float, float]:
    """Return kcal from protein, carbs and fat."""
    return (
        totals.protein * KCAL_PER_GRAM_PROTEIN,
        totals.carbs * KCAL_PER_GRAM_CARBS,
        totals.fat * KCAL_PER_GRAM_FAT,
    )


def calorie_ring(stats: DayStats) -> CalorieRing:
    """Split the calorie goal into macro segments and the unused remainder."""
    protein_kcal, carbs_kcal, fat_kcal = macro_calories(stats.totals)
    used = protein_kcal + carbs_kcal + fat_kcal
    return CalorieRing(
        protein_kcal=protein_kcal,
        carbs_kcal=carbs_kcal,
        fat_kcal=fat_kcal,
        remaining_kcal=max(0.0, stats.targets.calories - used),
    )


def progress_percent(current: float, goal: float) -> float:
    """Percent of a goal reached, clamped to 0..100."""
    if goal <= 0:
        return 0.0
    return min(100.0, max(0.0, current / goal * 100))


def partition_by_meal(entries: Iterable[FoodEntry]) -> MealSections:
    """Group entries into meal sections in display order.

    Entries with a meal type outside the enumeration land in ``unassigned``.
    Insertion order is kept inside every group.
    """
    grouped: dict[MealType, list[FoodEntry]] = {meal: [] for meal in MealType}
    unassigned: list[FoodEntry] = []
    for entry in entries:
        if isinstance(entry.meal_type, MealType):
            grouped[entry.meal_type].append(entry)
        else:
            unassigned.append(entry)
    sections = tuple(
        MealSection(
            meal_type=meal,
            entries=tuple(grouped[meal]),
            total_calories=sum(item.nutrients.calories for item in grouped[meal]),
        )
        for meal in MEAL_DISPLAY_ORDER
    )
    return MealSections(sections=sections, unassigned=tuple(unassigned))


def nutrient_by_meal(
    entries: Iterable[FoodEntry], nutrient: str
) -> dict[MealType, float]:
    """Sum one nutrient per meal type, omitting meals with nothing recorded."""
    totals: dict[MealType, float] = {}
    for entry in entries:
        if not isinstance(entry.meal_type, MealType):
            continue
        value = entry.nutrients.value_of(nutrient)
        totals[entry.meal_type] = totals.get(entry.meal_type, 0.0) + value
    return {meal: totals[meal] for meal in MealType if totals.get(meal, 0.0) > 0}
