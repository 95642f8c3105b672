"""User profile domain models."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Gender(str, Enum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Daily activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    EXTRA_ACTIVE = "extra"


class UserGoal(str, Enum):
    """Weight goal."""

    LOSE_FAST = "lose_fast"
    LOSE_SLOW = "lose_slow"
    MAINTAIN = "maintain"
    GAIN = "gain"


@dataclass(frozen=True)
class WeightRecord:
    """Body weight measured on a given day."""

    day: date
    weight: float


@dataclass(frozen=True)
class UserProfile:
    """Biometric profile of the single diary user."""

    age: int
    weight: float
    height: float
    gender: Gender
    activity: ActivityLevel
    goal: UserGoal
    is_configured: bool = False
    weight_history: tuple[WeightRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Unconfigured:
    """No saved profile yet. ``draft`` pre-fills the settings form."""

    draft: UserProfile


@dataclass(frozen=True)
class Configured:
    """A saved, configured profile."""

    profile: UserProfile


ProfileState = Unconfigured | Configured


DEFAULT_PROFILE = UserProfile(
    age=30,
    weight=75.0,
    height=175.0,
    gender=Gender.MALE,
    activity=ActivityLevel.MODERATE,
    goal=UserGoal.MAINTAIN,
)
