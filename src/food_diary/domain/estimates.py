"""Models for AI nutrient estimates and meal suggestions."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from food_diary.domain.nutrition import Nutrients


class NutrientEstimate(BaseModel):
    """Structured nutrient estimate for a described or photographed food."""

    food_name: str = Field(min_length=1)
    quantity_description: str = ""
    calories: int = Field(ge=0)
    protein_g: float = Field(ge=0.0)
    carbs_g: float = Field(ge=0.0)
    fat_g: float = Field(ge=0.0)
    fiber_g: float | None = Field(default=None, ge=0.0)
    sugar_g: float | None = Field(default=None, ge=0.0)
    saturated_fat_g: float | None = Field(default=None, ge=0.0)
    confidence_score: float = Field(ge=0.0, le=1.0)

    def to_nutrients(self) -> Nutrients:
        """Convert the estimate into a nutrient bundle."""
        return Nutrients(
            calories=float(self.calories),
            protein=self.protein_g,
            carbs=self.carbs_g,
            fat=self.fat_g,
            fiber=self.fiber_g or 0.0,
            sugar=self.sugar_g or 0.0,
            saturated_fat=self.saturated_fat_g or 0.0,
        )


class MealSuggestion(BaseModel):
    """Meal idea that fits into the remaining calorie budget."""

    name: str
    description: str
    calories: int = Field(ge=0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    reason: str

    def to_nutrients(self) -> Nutrients:
        """Convert the suggestion into a nutrient bundle."""
        return Nutrients(
            calories=float(self.calories),
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


class MealSuggestionList(BaseModel):
    """Structured output wrapper for meal suggestions."""

    suggestions: list[MealSuggestion]


@dataclass(frozen=True)
class Estimate:
    """Successful estimate."""

    value: NutrientEstimate


@dataclass(frozen=True)
class Unavailable:
    """The estimation service produced nothing usable."""

    reason: str


EstimateResult = Estimate | Unavailable
