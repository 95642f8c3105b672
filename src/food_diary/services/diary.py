"""Diary session: a pure reducer plus the service that performs effects."""

import itertools
import logging
from dataclasses import dataclass, field, replace
from datetime import date

from food_diary.domain.diary import (
    DayLoaded,
    DiaryEvent,
    DiaryState,
    EntryAdded,
    EntryDeleted,
    ProfileChanged,
    SuggestionsCleared,
    SuggestionsReceived,
    SuggestionsRequested,
)
from food_diary.domain.estimates import EstimateResult, MealSuggestion
from food_diary.domain.nutrition import (
    DailyTargets,
    DayStats,
    EntryDraft,
    FoodEntry,
    MealType,
)
from food_diary.domain.profile import UserProfile
from food_diary.services.estimation import EstimationService
from food_diary.services.goals import targets_for
from food_diary.services.ledger import LedgerService
from food_diary.services.profile import ProfileService
from food_diary.services.stats import aggregate, remaining_calories

SUGGESTION_QUANTITY = "1 portion"

_logger = logging.getLogger(__name__)


def reduce(state: DiaryState, event: DiaryEvent) -> DiaryState:  # noqa: PLR0911
    """Return the state that results from applying an event."""
    if isinstance(event, DayLoaded):
        if event.day == state.selected_day:
            return replace(state, entries=event.entries)
        return replace(
            state,
            selected_day=event.day,
            entries=event.entries,
            suggestions=(),
            pending_request_id=None,
        )
    if isinstance(event, EntryAdded):
        return replace(state, entries=(*state.entries, event.entry))
    if isinstance(event, EntryDeleted):
        return replace(
            state,
            entries=tuple(e for e in state.entries if e.id != event.entry_id),
        )
    if isinstance(event, ProfileChanged):
        return replace(state, profile=event.profile)
    if isinstance(event, SuggestionsRequested):
        return replace(
            state,
            suggestion_meal_type=event.meal_type,
            pending_request_id=event.request_id,
        )
    if isinstance(event, SuggestionsReceived):
        if event.request_id != state.pending_request_id:
            return state
        return replace(state, suggestions=event.suggestions, pending_request_id=None)
    if isinstance(event, SuggestionsCleared):
        return replace(state, suggestions=())
    raise TypeError(f"Unsupported diary event: {event!r}")


def targets_of(state: DiaryState) -> DailyTargets:
    """Targets for the state's profile, recomputed on every call."""
    return targets_for(state.profile)


def stats_of(state: DiaryState) -> DayStats:
    """Aggregated stats for the selected day."""
    return aggregate(state.entries, targets_of(state))


@dataclass
class DiarySession:
    """Drives the diary state from user actions.

    Effects (persistence, AI calls) run here; every state change goes
    through ``reduce``.
    """

    ledger_service: LedgerService
    profile_service: ProfileService
    estimation_service: EstimationService
    state: DiaryState = field(init=False)
    _request_ids: itertools.count = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._request_ids = itertools.count(1)
        today = date.today()
        self.state = DiaryState(
            selected_day=today,
            entries=tuple(self.ledger_service.entries_for(today)),
            profile=self.profile_service.load(),
        )

    @property
    def stats(self) -> DayStats:
        """Stats for the selected day."""
        return stats_of(self.state)

    def dispatch(self, event: DiaryEvent) -> DiaryState:
        """Apply an event and return the new state."""
        self.state = reduce(self.state, event)
        return self.state

    def select_day(self, day: date) -> DiaryState:
        """Load a day's ledger and make it the selected day."""
        entries = tuple(self.ledger_service.entries_for(day))
        return self.dispatch(DayLoaded(day=day, entries=entries))

    def view_day(self, day: date) -> DiaryState:
        """Return the state the day would have if selected, without selecting it."""
        entries = tuple(self.ledger_service.entries_for(day))
        return reduce(self.state, DayLoaded(day=day, entries=entries))

    def refresh_profile(self) -> DiaryState:
        """Reload the profile state from storage."""
        return self.dispatch(ProfileChanged(self.profile_service.load()))

    def add_entry(self, draft: EntryDraft) -> FoodEntry:
        """Persist a new entry for the selected day."""
        entry = self.ledger_service.add_entry(self.state.selected_day, draft)
        self.dispatch(EntryAdded(entry))
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        """Delete an entry of the selected day by id."""
        deleted = self.ledger_service.delete_entry(self.state.selected_day, entry_id)
        if deleted:
            self.dispatch(EntryDeleted(entry_id))
        return deleted

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Replace the profile and recompute targets."""
        saved = self.profile_service.save(profile)
        self.refresh_profile()
        return saved

    def log_weight(self, day: date, weight: float) -> UserProfile:
        """Record a body weight measurement."""
        updated = self.profile_service.log_weight(day, weight)
        self.refresh_profile()
        return updated

    async def request_suggestions(
        self, meal_type: MealType
    ) -> tuple[MealSuggestion, ...]:
        """Ask for meal ideas fitting the remaining calories of the day.

        Only the most recent request may update the state; responses to
        earlier requests are dropped.
        """
        request_id = next(self._request_ids)
        self.dispatch(SuggestionsRequested(request_id=request_id, meal_type=meal_type))
        remaining = remaining_calories(self.stats)
        suggestions = await self.estimation_service.suggest_meals(remaining, meal_type)
        if request_id != self.state.pending_request_id:
            _logger.info("Discarding stale suggestion response %s", request_id)
        self.dispatch(
            SuggestionsReceived(request_id=request_id, suggestions=tuple(suggestions))
        )
        return self.state.suggestions

    def accept_suggestion(self, index: int) -> FoodEntry:
        """Add a current suggestion as an entry and clear the suggestions."""
        if not 0 <= index < len(self.state.suggestions):
            raise ValueError(f"No suggestion at index {index}")
        suggestion = self.state.suggestions[index]
        entry = self.add_entry(
            EntryDraft(
                name=suggestion.name,
                quantity=SUGGESTION_QUANTITY,
                meal_type=self.state.suggestion_meal_type,
                nutrients=suggestion.to_nutrients(),
            )
        )
        self.dispatch(SuggestionsCleared())
        return entry

    async def estimate_text(self, description: str) -> EstimateResult:
        """Estimate nutrients for a food description."""
        return await self.estimation_service.analyze_text(description)

    async def estimate_image(self, image_bytes: bytes) -> EstimateResult:
        """Estimate nutrients for a food photo."""
        return await self.estimation_service.analyze_image(image_bytes)
