"""Tests for the profile service."""

import math
from dataclasses import replace
from datetime import date

import pytest

from food_diary.domain.profile import (
    DEFAULT_PROFILE,
    Configured,
    Unconfigured,
    UserGoal,
    WeightRecord,
)
from food_diary.services.goals import DEFAULT_TARGETS
from food_diary.services.profile import ProfileService, upsert_weight
from tests.conftest import InMemoryProfileRepository


def test_load_without_profile_is_unconfigured() -> None:
    service = ProfileService(InMemoryProfileRepository())

    state = service.load()

    assert state == Unconfigured(draft=DEFAULT_PROFILE)
    assert service.targets() == DEFAULT_TARGETS


def test_save_marks_profile_configured() -> None:
    repository = InMemoryProfileRepository()
    service = ProfileService(repository)

    saved = service.save(replace(DEFAULT_PROFILE, goal=UserGoal.LOSE_SLOW))

    assert saved.is_configured is True
    assert service.load() == Configured(saved)
    assert service.targets().calories == 2633 - 250


def test_save_rejects_invalid_biometrics() -> None:
    repository = InMemoryProfileRepository()
    service = ProfileService(repository)

    with pytest.raises(ValueError, match="age"):
        service.save(replace(DEFAULT_PROFILE, age=0))
    with pytest.raises(ValueError, match="height"):
        service.save(replace(DEFAULT_PROFILE, height=-3.0))
    with pytest.raises(ValueError, match="weight"):
        service.save(replace(DEFAULT_PROFILE, weight=math.inf))
    with pytest.raises(ValueError, match="height"):
        service.save(replace(DEFAULT_PROFILE, height=math.nan))

    assert repository.saves == 0


def test_stored_but_unconfigured_profile_is_draft() -> None:
    draft = replace(DEFAULT_PROFILE, age=41)
    service = ProfileService(InMemoryProfileRepository(profile=draft))

    assert service.load() == Unconfigured(draft=draft)


def test_upsert_weight_replaces_same_day_and_sorts() -> None:
    history = (
        WeightRecord(date(2024, 1, 1), 80.0),
        WeightRecord(date(2024, 1, 10), 79.0),
    )

    updated = upsert_weight(history, WeightRecord(date(2024, 1, 5), 79.5))
    replaced = upsert_weight(updated, WeightRecord(date(2024, 1, 1), 81.0))

    assert [record.day.day for record in updated] == [1, 5, 10]
    assert len(replaced) == 3
    assert replaced[0] == WeightRecord(date(2024, 1, 1), 81.0)


def test_log_weight_updates_current_weight_for_latest_record() -> None:
    repository = InMemoryProfileRepository()
    service = ProfileService(repository)
    service.save(DEFAULT_PROFILE)

    latest = service.log_weight(date(2024, 2, 1), 74.0)
    backfilled = service.log_weight(date(2024, 1, 1), 77.0)

    assert latest.weight == 74.0
    assert backfilled.weight == 74.0
    assert [record.day for record in backfilled.weight_history] == [
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]
    assert backfilled.is_configured is True


def test_log_weight_rejects_non_positive() -> None:
    repository = InMemoryProfileRepository()
    service = ProfileService(repository)

    with pytest.raises(ValueError):
        service.log_weight(date(2024, 1, 1), 0)
    with pytest.raises(ValueError):
        service.log_weight(date(2024, 1, 1), math.inf)
    with pytest.raises(ValueError):
        service.log_weight(date(2024, 1, 1), math.nan)

    assert repository.saves == 0
