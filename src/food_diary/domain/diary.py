"""Diary application state and the events that update it."""

from dataclasses import dataclass
from datetime import date

from food_diary.domain.estimates import MealSuggestion
from food_diary.domain.nutrition import FoodEntry, MealType
from food_diary.domain.profile import ProfileState


@dataclass(frozen=True)
class DiaryState:
    """Everything the presentation layer renders for a session."""

    selected_day: date
    entries: tuple[FoodEntry, ...]
    profile: ProfileState
    suggestion_meal_type: MealType = MealType.SNACK
    suggestions: tuple[MealSuggestion, ...] = ()
    pending_request_id: int | None = None


@dataclass(frozen=True)
class DayLoaded:
    day: date
    entries: tuple[FoodEntry, ...]


@dataclass(frozen=True)
class EntryAdded:
    entry: FoodEntry


@dataclass(frozen=True)
class EntryDeleted:
    entry_id: str


@dataclass(frozen=True)
class ProfileChanged:
    profile: ProfileState


@dataclass(frozen=True)
class SuggestionsRequested:
    request_id: int
    meal_type: MealType


@dataclass(frozen=True)
class SuggestionsReceived:
    request_id: int
    suggestions: tuple[MealSuggestion, ...]


@dataclass(frozen=True)
class SuggestionsCleared:
    pass


DiaryEvent = (
    DayLoaded
    | EntryAdded
    | EntryDeleted
    | ProfileChanged
    | SuggestionsRequested
    | SuggestionsReceived
    | SuggestionsCleared
)
