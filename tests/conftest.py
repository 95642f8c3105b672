"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from food_diary.adapters.key_value_store import InMemoryKeyValueStore
from food_diary.adapters.kv_repositories import (
    KeyValueLedgerRepository,
    KeyValueProfileRepository,
)
from food_diary.config import Settings
from food_diary.containers import AppContainer
from food_diary.domain.nutrition import FoodEntry, MealType, Nutrients
from food_diary.domain.profile import UserProfile
from food_diary.services.diary import DiarySession
from food_diary.services.estimation import EstimationClient, EstimationService
from food_diary.services.ledger import LedgerRepository, LedgerService
from food_diary.services.profile import ProfileRepository, ProfileService


@dataclass
class InMemoryLedgerRepository(LedgerRepository):
    """In-memory ledger repository for tests."""

    days: dict[date, list[FoodEntry]] = field(default_factory=dict)

    def list_entries(self, day: date) -> list[FoodEntry]:
        return list(self.days.get(day, []))

    def save_entries(self, day: date, entries: list[FoodEntry]) -> None:
        self.days[day] = list(entries)

    def list_days(self) -> list[date]:
        return [day for day, entries in self.days.items() if entries]


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profile: UserProfile | None = None
    saves: int = 0

    def get_profile(self) -> UserProfile | None:
        return self.profile

    def save_profile(self, profile: UserProfile) -> None:
        self.profile = profile
        self.saves += 1


@dataclass
class FakeEstimationClient(EstimationClient):
    """Fake estimation client returning fixed payloads per schema."""

    estimate_payload: dict[str, object] = field(
        default_factory=lambda: {
            "food_name": "Oatmeal with banana",
            "quantity_description": "1 bowl",
            "calories": 350,
            "protein_g": 10.0,
            "carbs_g": 60.0,
            "fat_g": 7.0,
            "fiber_g": 8.0,
            "sugar_g": 15.0,
            "saturated_fat_g": 1.5,
            "confidence_score": 0.8,
        }
    )
    suggestions_payload: dict[str, object] = field(
        default_factory=lambda: {
            "suggestions": [
                {
                    "name": f"Meal {index}",
                    "description": "Greek yogurt with berries",
                    "calories": 200 + index,
                    "protein": 15.0,
                    "carbs": 20.0,
                    "fat": 5.0,
                    "reason": "High in protein",
                }
                for index in range(4)
            ]
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "schema_name": schema_name,
                "prompt": prompt,
                "image_data_url": image_data_url,
            }
        )
        if self.error is not None:
            raise self.error
        if schema_name == "meal_suggestions":
            return self.suggestions_payload
        return self.estimate_payload


def make_entry(
    entry_id: str,
    meal_type: MealType | str = MealType.LUNCH,
    **nutrients: float,
) -> FoodEntry:
    """Build a food entry with the given nutrient values."""
    return FoodEntry(
        id=entry_id,
        name=f"food {entry_id}",
        quantity="1 portion",
        meal_type=meal_type,
        timestamp=1_700_000_000_000,
        nutrients=Nutrients(**nutrients),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        storage_backend="memory",
        data_dir=tmp_path,
    )


@pytest.fixture
def estimation_client() -> FakeEstimationClient:
    return FakeEstimationClient()


@pytest.fixture
def estimation_service(estimation_client: FakeEstimationClient) -> EstimationService:
    return EstimationService(
        client=estimation_client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryKeyValueStore,
    estimation_service: EstimationService,
) -> AppContainer:
    ledger_service = LedgerService(KeyValueLedgerRepository(store))
    profile_service = ProfileService(KeyValueProfileRepository(store))
    diary_session = DiarySession(
        ledger_service=ledger_service,
        profile_service=profile_service,
        estimation_service=estimation_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ledger_service=ledger_service,
        profile_service=profile_service,
        estimation_service=estimation_service,
        diary_session=diary_session,
        close_resources=close_resources,
    )
