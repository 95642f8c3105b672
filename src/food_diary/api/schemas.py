"""Pydantic request models for the diary API."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from food_diary.domain.nutrition import EntryDraft, MealType, Nutrients
from food_diary.domain.profile import (
    ActivityLevel,
    Gender,
    UserGoal,
    UserProfile,
    WeightRecord,
)
from food_diary.services.profile import upsert_weight


class EntryCreate(BaseModel):
    """Manual or AI-confirmed food entry."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: str = ""
    quantity: str = ""
    meal_type: MealType
    calories: float = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    saturated_fat: float = Field(default=0.0, ge=0)

    def to_draft(self) -> EntryDraft:
        return EntryDraft(
            name=self.name,
            quantity=self.quantity,
            meal_type=self.meal_type,
            nutrients=Nutrients(
                calories=self.calories,
                protein=self.protein,
                carbs=self.carbs,
                fat=self.fat,
                fiber=self.fiber,
                sugar=self.sugar,
                saturated_fat=self.saturated_fat,
            ),
        )


class WeightLog(BaseModel):
    """Body weight measured on a day."""

    model_config = ConfigDict(allow_inf_nan=False)

    date: date
    weight: float = Field(gt=0)


class ProfileUpdate(BaseModel):
    """Full profile replacement."""

    model_config = ConfigDict(allow_inf_nan=False)

    age: int = Field(gt=0)
    weight: float = Field(gt=0)
    height: float = Field(gt=0)
    gender: Gender
    activity: ActivityLevel
    goal: UserGoal
    weight_history: list[WeightLog] = Field(default_factory=list)

    def to_profile(self) -> UserProfile:
        history: tuple[WeightRecord, ...] = ()
        for item in self.weight_history:
            record = WeightRecord(day=item.date, weight=item.weight)
            history = upsert_weight(history, record)
        return UserProfile(
            age=self.age,
            weight=self.weight,
            height=self.height,
            gender=self.gender,
            activity=self.activity,
            goal=self.goal,
            is_configured=True,
            weight_history=history,
        )


class TextEstimateRequest(BaseModel):
    description: str = Field(min_length=1)


class SuggestionRequest(BaseModel):
    meal_type: MealType = MealType.SNACK
