"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_diary.adapters.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from food_diary.adapters.kv_repositories import (
    KeyValueLedgerRepository,
    KeyValueProfileRepository,
)
from food_diary.adapters.openai_estimation_client import OpenAIEstimationClient
from food_diary.adapters.supabase_key_value_store import SupabaseKeyValueStore
from food_diary.config import Settings, parse_reasoning_effort
from food_diary.services.diary import DiarySession
from food_diary.services.estimation import EstimationService
from food_diary.services.ledger import LedgerService
from food_diary.services.profile import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger_service: LedgerService
    profile_service: ProfileService
    estimation_service: EstimationService
    diary_session: DiarySession
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by the settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.storage_backend == "file":
        return JsonFileKeyValueStore(settings.data_dir)
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError("Supabase storage requires supabase_url and service key")
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return SupabaseKeyValueStore(client=client, table=settings.supabase_table)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    ledger_service = LedgerService(
        KeyValueLedgerRepository(store, prefix=resolved_settings.storage_prefix)
    )
    profile_service = ProfileService(
        KeyValueProfileRepository(store, prefix=resolved_settings.storage_prefix)
    )
    openai_client = OpenAIEstimationClient.create(
        resolved_settings.openai_api_key,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    estimation_service = EstimationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=parse_reasoning_effort(
            resolved_settings.openai_reasoning_effort
        ),
        store=resolved_settings.openai_store,
        language=resolved_settings.estimate_language,
    )
    diary_session = DiarySession(
        ledger_service=ledger_service,
        profile_service=profile_service,
        estimation_service=estimation_service,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        ledger_service=ledger_service,
        profile_service=profile_service,
        estimation_service=estimation_service,
        diary_session=diary_session,
        close_resources=close_resources,
    )
