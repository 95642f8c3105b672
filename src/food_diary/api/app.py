"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from food_diary.api.schemas import (
    EntryCreate,
    ProfileUpdate,
    SuggestionRequest,
    TextEstimateRequest,
    WeightLog,
)
from food_diary.app_logging import configure_logging
from food_diary.containers import AppContainer
from food_diary.domain.diary import DiaryState
from food_diary.domain.estimates import Estimate, EstimateResult, MealSuggestion
from food_diary.domain.nutrition import (
    NUTRIENT_FIELDS,
    DailyTargets,
    FoodEntry,
    MealType,
    Nutrients,
)
from food_diary.domain.profile import Configured, ProfileState, UserProfile
from food_diary.services.diary import stats_of
from food_diary.services.goals import targets_for
from food_diary.services.stats import (
    calorie_ring,
    nutrient_by_meal,
    partition_by_meal,
    progress_percent,
    remaining_calories,
)

TEXT_NOT_UNDERSTOOD = "Could not understand the description. Please try again."
IMAGE_NOT_RECOGNIZED = "Could not recognize any food in the image."

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report invalid fields without echoing the rejected values."""
        errors = [
            {key: value for key, value in error.items() if key != "input"}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=_UNPROCESSABLE, content={"detail": jsonable_encoder(errors)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the profile state and the targets it produces."""
        profile_state = _container(request).profile_service.load()
        return _format_profile_state(profile_state, targets_for(profile_state))

    @app.put("/profile")
    async def put_profile(
        payload: ProfileUpdate, request: Request
    ) -> dict[str, object]:
        """Replace the profile wholesale."""
        session = _container(request).diary_session
        try:
            session.save_profile(payload.to_profile())
        except ValueError as exc:
            raise HTTPException(_UNPROCESSABLE, detail=str(exc)) from exc
        return _format_profile_state(
            session.state.profile, stats_of(session.state).targets
        )

    @app.post("/profile/weight")
    async def log_weight(payload: WeightLog, request: Request) -> dict[str, object]:
        """Record a body weight for a day."""
        session = _container(request).diary_session
        try:
            profile = session.log_weight(payload.date, payload.weight)
        except ValueError as exc:
            raise HTTPException(_UNPROCESSABLE, detail=str(exc)) from exc
        return {"profile": _format_profile(profile)}

    @app.get("/calendar")
    async def calendar(request: Request) -> dict[str, object]:
        """Return days that have recorded entries."""
        days = _container(request).ledger_service.days_with_data()
        return {"days": [day.isoformat() for day in days]}

    @app.get("/days/{day}")
    async def get_day(day: date, request: Request) -> dict[str, object]:
        """Return a day's ledger, sections and stats."""
        state = _container(request).diary_session.view_day(day)
        return _format_day(state)

    @app.post("/days/{day}/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(
        day: date, payload: EntryCreate, request: Request
    ) -> dict[str, object]:
        """Add a food entry to a day."""
        session = _container(request).diary_session
        if session.state.selected_day != day:
            session.select_day(day)
        try:
            entry = session.add_entry(payload.to_draft())
        except ValueError as exc:
            raise HTTPException(_UNPROCESSABLE, detail=str(exc)) from exc
        return {"entry": _format_entry(entry), "day": _format_day(session.state)}

    @app.delete("/days/{day}/entries/{entry_id}")
    async def delete_entry(
        day: date, entry_id: str, request: Request
    ) -> dict[str, object]:
        """Delete a food entry by id."""
        session = _container(request).diary_session
        if session.state.selected_day != day:
            session.select_day(day)
        if not session.delete_entry(entry_id):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Entry not found")
        return {"day": _format_day(session.state)}

    @app.get("/days/{day}/nutrients/{nutrient}")
    async def nutrient_detail(
        day: date, nutrient: str, request: Request
    ) -> dict[str, object]:
        """Return one nutrient's progress and per-meal breakdown for a day."""
        if nutrient not in NUTRIENT_FIELDS:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Unknown nutrient")
        state = _container(request).diary_session.view_day(day)
        stats = stats_of(state)
        current = stats.totals.value_of(nutrient)
        goal = stats.targets.value_of(nutrient)
        breakdown = nutrient_by_meal(state.entries, nutrient)
        return {
            "nutrient": nutrient,
            "current": current,
            "goal": goal,
            "percent": progress_percent(current, goal),
            "by_meal": {meal.value: value for meal, value in breakdown.items()},
        }

    @app.post("/days/{day}/suggestions")
    async def suggest_meals(
        day: date, payload: SuggestionRequest, request: Request
    ) -> dict[str, object]:
        """Ask the AI for meals fitting the day's remaining calories."""
        session = _container(request).diary_session
        if session.state.selected_day != day:
            session.select_day(day)
        suggestions = await session.request_suggestions(payload.meal_type)
        return {
            "meal_type": session.state.suggestion_meal_type.value,
            "remaining_calories": remaining_calories(session.stats),
            "suggestions": [_format_suggestion(item) for item in suggestions],
        }

    @app.post(
        "/days/{day}/suggestions/{index}/accept",
        status_code=status.HTTP_201_CREATED,
    )
    async def accept_suggestion(
        day: date, index: int, request: Request
    ) -> dict[str, object]:
        """Add a pending suggestion to the day."""
        session = _container(request).diary_session
        if session.state.selected_day != day:
            raise HTTPException(status.HTTP_409_CONFLICT, "No suggestions for day")
        try:
            entry = session.accept_suggestion(index)
        except ValueError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        return {"entry": _format_entry(entry), "day": _format_day(session.state)}

    @app.post("/estimates/text")
    async def estimate_text(
        payload: TextEstimateRequest, request: Request
    ) -> dict[str, object]:
        """Estimate nutrients from a food description."""
        result = await _container(request).diary_session.estimate_text(
            payload.description
        )
        return _estimate_or_422(result, TEXT_NOT_UNDERSTOOD)

    @app.post("/estimates/image")
    async def estimate_image(request: Request) -> dict[str, object]:
        """Estimate nutrients from a raw image request body."""
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(_UNPROCESSABLE, "Empty image")
        logger.info("Image estimate requested (%s bytes)", len(image_bytes))
        result = await _container(request).diary_session.estimate_image(image_bytes)
        return _estimate_or_422(result, IMAGE_NOT_RECOGNIZED)

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _estimate_or_422(result: EstimateResult, message: str) -> dict[str, object]:
    if isinstance(result, Estimate):
        return {"estimate": result.value.model_dump()}
    raise HTTPException(_UNPROCESSABLE, message)


def _format_nutrients(nutrients: Nutrients) -> dict[str, float]:
    return {name: nutrients.value_of(name) for name in NUTRIENT_FIELDS}


def _format_targets(targets: DailyTargets) -> dict[str, int]:
    return {name: targets.value_of(name) for name in NUTRIENT_FIELDS}


def _format_entry(entry: FoodEntry) -> dict[str, object]:
    meal_type = entry.meal_type
    return {
        "id": entry.id,
        "name": entry.name,
        "quantity": entry.quantity,
        "meal_type": meal_type.value if isinstance(meal_type, MealType) else meal_type,
        "timestamp": entry.timestamp,
        **_format_nutrients(entry.nutrients),
    }


def _format_suggestion(suggestion: MealSuggestion) -> dict[str, object]:
    return suggestion.model_dump()


def _format_profile(profile: UserProfile) -> dict[str, object]:
    return {
        "age": profile.age,
        "weight": profile.weight,
        "height": profile.height,
        "gender": profile.gender.value,
        "activity": profile.activity.value,
        "goal": profile.goal.value,
        "is_configured": profile.is_configured,
        "weight_history": [
            {"date": record.day.isoformat(), "weight": record.weight}
            for record in profile.weight_history
        ],
    }


def _format_profile_state(
    profile_state: ProfileState, targets: DailyTargets
) -> dict[str, object]:
    configured = isinstance(profile_state, Configured)
    profile = profile_state.profile if configured else profile_state.draft
    return {
        "configured": configured,
        "profile": _format_profile(profile),
        "targets": _format_targets(targets),
    }


def _format_day(state: DiaryState) -> dict[str, object]:
    stats = stats_of(state)
    sections = partition_by_meal(state.entries)
    ring = calorie_ring(stats)
    return {
        "date": state.selected_day.isoformat(),
        "is_today": state.selected_day == date.today(),
        "profile_configured": isinstance(state.profile, Configured),
        "entries": [_format_entry(entry) for entry in state.entries],
        "sections": [
            {
                "meal_type": section.meal_type.value,
                "total_calories": section.total_calories,
                "entries": [entry.id for entry in section.entries],
            }
            for section in sections.sections
        ],
        "unassigned": [entry.id for entry in sections.unassigned],
        "totals": _format_nutrients(stats.totals),
        "targets": _format_targets(stats.targets),
        "remaining_calories": remaining_calories(stats),
        "ring": {
            "protein_kcal": ring.protein_kcal,
            "carbs_kcal": ring.carbs_kcal,
            "fat_kcal": ring.fat_kcal,
            "remaining_kcal": ring.remaining_kcal,
        },
    }
