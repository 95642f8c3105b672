"""Tests for container wiring."""

import asyncio

import pytest

from food_diary.adapters.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from food_diary.containers import build_container, build_store
from food_diary.domain.profile import Unconfigured


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.diary_session.state.profile, Unconfigured)
    assert container.estimation_service.model == settings.openai_model
    asyncio.run(container.close_resources())


def test_build_store_selects_backend(settings, tmp_path) -> None:
    assert isinstance(build_store(settings), InMemoryKeyValueStore)

    file_settings = settings.model_copy(
        update={"storage_backend": "file", "data_dir": tmp_path / "diary"}
    )
    store = build_store(file_settings)

    assert isinstance(store, JsonFileKeyValueStore)
    assert store.root == tmp_path / "diary"


def test_build_store_requires_supabase_credentials(settings) -> None:
    supabase_settings = settings.model_copy(update={"storage_backend": "supabase"})

    with pytest.raises(ValueError):
        build_store(supabase_settings)
