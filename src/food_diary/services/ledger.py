"""Food ledger service: entries recorded per calendar day."""

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from uuid import uuid4

from food_diary.domain.nutrition import EntryDraft, FoodEntry

UNKNOWN_FOOD_NAME = "Unknown food"

_logger = logging.getLogger(__name__)


class LedgerRepository(Protocol):
    """Persistence interface for daily ledgers."""

    def list_entries(self, day: date) -> list[FoodEntry]:
        """Return the entries stored for a day, in insertion order."""

    def save_entries(self, day: date, entries: list[FoodEntry]) -> None:
        """Replace the stored entries for a day."""

    def list_days(self) -> list[date]:
        """Return days that have at least one stored entry."""


@dataclass
class LedgerService:
    """Application service for adding and removing food entries."""

    repository: LedgerRepository

    def entries_for(self, day: date) -> list[FoodEntry]:
        """Return a day's entries."""
        return self.repository.list_entries(day)

    def add_entry(self, day: date, draft: EntryDraft) -> FoodEntry:
        """Append a new entry with a fresh id and return it."""
        draft.nutrients.validate()
        entry = FoodEntry(
            id=str(uuid4()),
            name=draft.name.strip() or UNKNOWN_FOOD_NAME,
            quantity=draft.quantity.strip(),
            meal_type=draft.meal_type,
            timestamp=int(time.time() * 1000),
            nutrients=draft.nutrients,
        )
        entries = self.repository.list_entries(day)
        self.repository.save_entries(day, [*entries, entry])
        _logger.info("Added entry %s to %s", entry.id, day.isoformat())
        return entry

    def delete_entry(self, day: date, entry_id: str) -> bool:
        """Remove an entry by id. Returns False when it does not exist."""
        entries = self.repository.list_entries(day)
        kept = [entry for entry in entries if entry.id != entry_id]
        if len(kept) == len(entries):
            return False
        self.repository.save_entries(day, kept)
        _logger.info("Deleted entry %s from %s", entry_id, day.isoformat())
        return True

    def days_with_data(self) -> list[date]:
        """Return days with recorded entries, oldest first."""
        return sorted(self.repository.list_days())


def normalize_day(value: date | datetime | str) -> date:
    """Normalize a selected date to the calendar day used as ledger key."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])
