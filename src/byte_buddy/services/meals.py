"""Meal log store mirrored from the remote meal entries collection."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from typing import Protocol
from uuid import uuid4

from byte_buddy.domain.errors import RemoteReadError, RemoteWriteError
from byte_buddy.domain.foods import DailyTotals, Food, FoodDraft, MealEntry, MealSlot
from byte_buddy.services import aggregation
from byte_buddy.services.feeds import ErrorHandler, SnapshotHandler, Subscription
from byte_buddy.services.foods import NOT_SIGNED_IN

_logger = logging.getLogger(__name__)


class MealEntryRepository(Protocol):
    """Persistence interface for meal entries."""

    def create_entry(self, entry: MealEntry) -> None:
        """Write a new meal entry document."""

    def delete_entry(self, entry_id: str) -> None:
        """Delete a meal entry document by id."""

    def watch_entries(
        self,
        owner_id: str,
        on_snapshot: SnapshotHandler[MealEntry],
        on_error: ErrorHandler,
    ) -> Subscription:
        """Open a feed of the owner's entries, latest consumption first."""


@dataclass
class MealLogStore:
    """Logged meals with calendar-day queries over the mirror."""

    repository: MealEntryRepository
    timezone: tzinfo = UTC
    owner_id: str | None = None
    entries: list[MealEntry] = field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None
    _subscription: Subscription | None = field(default=None, repr=False)
    _generation: int = field(default=0, repr=False)

    def add_entry(
        self,
        food: Food | FoodDraft,
        quantity: float,
        meal_slot: MealSlot,
        date_consumed: datetime | None = None,
    ) -> MealEntry | None:
        """Log a quantity of a food, copying its current nutrients.

        A naive timestamp is taken to be in the store timezone.
        """
        if self.owner_id is None:
            self.error_message = NOT_SIGNED_IN
            return None
        consumed = date_consumed or datetime.now(tz=UTC)
        if consumed.tzinfo is None:
            consumed = consumed.replace(tzinfo=self.timezone)
        entry = MealEntry(
            id=str(uuid4()),
            owner_id=self.owner_id,
            food_id=food.id if isinstance(food, Food) else "",
            food_name=food.name,
            calories=food.calories,
            protein_g=food.protein_g,
            carbs_g=food.carbs_g,
            fat_g=food.fat_g,
            quantity=quantity,
            meal_slot=meal_slot,
            date_consumed=consumed,
        )
        self.is_loading = True
        try:
            self.repository.create_entry(entry)
        except RemoteWriteError as exc:
            _logger.warning("Adding meal entry failed: %s", exc)
            self.error_message = f"Error adding meal entry: {exc}"
            return None
        finally:
            self.is_loading = False
        self.entries = [entry] + [item for item in self.entries if item.id != entry.id]
        self.error_message = None
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        """Delete remotely, then drop the entry from the mirror."""
        self.is_loading = True
        try:
            self.repository.delete_entry(entry_id)
        except RemoteWriteError as exc:
            _logger.warning("Deleting meal entry %s failed: %s", entry_id, exc)
            self.error_message = f"Error deleting meal entry: {exc}"
            return False
        finally:
            self.is_loading = False
        self.entries = [item for item in self.entries if item.id != entry_id]
        self.error_message = None
        return True

    def entries_on(self, day: date | datetime) -> list[MealEntry]:
        """Return entries logged on a calendar day."""
        return aggregation.entries_on(self.entries, day, self.timezone)

    def entries_for(self, meal_slot: MealSlot, day: date | datetime) -> list[MealEntry]:
        """Return entries of one meal slot on a calendar day."""
        return aggregation.entries_for(self.entries, meal_slot, day, self.timezone)

    def daily_totals(self, day: date | datetime) -> DailyTotals:
        """Return summed nutrients for a calendar day."""
        return aggregation.daily_totals(self.entries, day, self.timezone)

    def subscribe(self, owner_id: str) -> None:
        """Bind to an owner and mirror their entries from a live feed."""
        self.unsubscribe()
        self.owner_id = owner_id
        generation = self._generation

        def on_snapshot(entries: list[MealEntry]) -> None:
            if generation != self._generation:
                return
            self.entries = entries

        def on_error(exc: RemoteReadError) -> None:
            if generation != self._generation:
                return
            _logger.warning("Loading meal entries failed: %s", exc)
            self.error_message = f"Error loading meal entries: {exc}"

        self._subscription = self.repository.watch_entries(
            owner_id, on_snapshot, on_error
        )

    def unsubscribe(self) -> None:
        """Release the live feed."""
        self._generation += 1
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def reset(self) -> None:
        """Drop the owner binding and all mirrored state."""
        self.unsubscribe()
        self.owner_id = None
        self.entries = []
        self.error_message = None
