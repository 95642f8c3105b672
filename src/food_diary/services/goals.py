"""Daily goal calculation from a user profile."""

import math

from food_diary.domain.nutrition import DailyTargets
from food_diary.domain.profile import (
    ActivityLevel,
    Configured,
    Gender,
    ProfileState,
    Unconfigured,
    UserGoal,
    UserProfile,
)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

GOAL_ADJUSTMENTS: dict[UserGoal, int] = {
    UserGoal.LOSE_FAST: -500,
    UserGoal.LOSE_SLOW: -250,
    UserGoal.MAINTAIN: 0,
    UserGoal.GAIN: 250,
}

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

PROTEIN_SHARE = 0.3
CARBS_SHARE = 0.4
FAT_SHARE = 0.3
SUGAR_MAX_SHARE = 0.1
SATURATED_FAT_MAX_SHARE = 0.1
FIBER_TARGET_G = 30

DEFAULT_TARGETS = DailyTargets(
    calories=2000,
    protein=150,
    carbs=200,
    fat=70,
    fiber=30,
    sugar=50,
    saturated_fat=20,
)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def basal_metabolic_rate(profile: UserProfile) -> float:
    """Mifflin-St Jeor BMR in kcal/day."""
    bmr = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    return bmr + (5 if profile.gender == Gender.MALE else -161)


def calculate_goals(profile: UserProfile) -> DailyTargets:
    """Return daily targets for a profile.

    Total over any structurally valid profile: ranges are not checked, so a
    degenerate profile yields degenerate but finite targets.
    """
    tdee = basal_metabolic_rate(profile) * ACTIVITY_MULTIPLIERS[profile.activity]
    calories = round_half_away(tdee + GOAL_ADJUSTMENTS[profile.goal])
    return DailyTargets(
        calories=calories,
        protein=round_half_away(calories * PROTEIN_SHARE / KCAL_PER_GRAM_PROTEIN),
        carbs=round_half_away(calories * CARBS_SHARE / KCAL_PER_GRAM_CARBS),
        fat=round_half_away(calories * FAT_SHARE / KCAL_PER_GRAM_FAT),
        fiber=FIBER_TARGET_G,
        sugar=round_half_away(calories * SUGAR_MAX_SHARE / KCAL_PER_GRAM_CARBS),
        saturated_fat=round_half_away(
            calories * SATURATED_FAT_MAX_SHARE / KCAL_PER_GRAM_FAT
        ),
    )


def targets_for(state: ProfileState) -> DailyTargets:
    """Return targets for a profile state, falling back to the defaults."""
    if isinstance(state, Configured):
        return calculate_goals(state.profile)
    if isinstance(state, Unconfigured):
        return DEFAULT_TARGETS
    raise TypeError(f"Unsupported profile state: {state!r}")
