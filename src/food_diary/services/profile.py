"""User profile service."""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol

from food_diary.domain.nutrition import DailyTargets
from food_diary.domain.profile import (
    DEFAULT_PROFILE,
    Configured,
    ProfileState,
    Unconfigured,
    UserProfile,
    WeightRecord,
)
from food_diary.services.goals import targets_for

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for the singleton user profile."""

    def get_profile(self) -> UserProfile | None:
        """Return the stored profile, if any."""

    def save_profile(self, profile: UserProfile) -> None:
        """Replace the stored profile."""


@dataclass
class ProfileService:
    """Service for loading and editing the user profile."""

    repository: ProfileRepository

    def load(self) -> ProfileState:
        """Return the current profile state."""
        stored = self.repository.get_profile()
        if stored is None:
            return Unconfigured(draft=DEFAULT_PROFILE)
        if not stored.is_configured:
            return Unconfigured(draft=stored)
        return Configured(profile=stored)

    def targets(self) -> DailyTargets:
        """Return daily targets for the current profile state."""
        return targets_for(self.load())

    def save(self, profile: UserProfile) -> UserProfile:
        """Validate and store a profile wholesale, marking it configured."""
        validate_profile(profile)
        saved = replace(profile, is_configured=True)
        self.repository.save_profile(saved)
        _logger.info("Saved profile (goal=%s)", saved.goal.value)
        return saved

    def log_weight(self, day: date, weight: float) -> UserProfile:
        """Record a weight for a day, replacing any record for that day.

        When the record is the latest one, the profile weight follows it.
        """
        _require_positive("weight", weight)
        state = self.load()
        profile = state.profile if isinstance(state, Configured) else state.draft
        history = upsert_weight(profile.weight_history, WeightRecord(day, weight))
        current = weight if history[-1].day == day else profile.weight
        updated = replace(profile, weight=current, weight_history=history)
        self.repository.save_profile(updated)
        return updated


def upsert_weight(
    history: tuple[WeightRecord, ...], record: WeightRecord
) -> tuple[WeightRecord, ...]:
    """Insert or replace the record for its day, keeping days ascending."""
    kept = [item for item in history if item.day != record.day]
    kept.append(record)
    return tuple(sorted(kept, key=lambda item: item.day))


def validate_profile(profile: UserProfile) -> None:
    """Raise ValueError for non-positive or non-finite biometrics."""
    _require_positive("age", profile.age)
    _require_positive("weight", profile.weight)
    _require_positive("height", profile.height)
    for record in profile.weight_history:
        _require_positive("weight", record.weight)


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive number")
