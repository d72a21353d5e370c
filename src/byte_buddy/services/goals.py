"""Goal and reminder settings store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import time
from typing import Protocol

from byte_buddy.domain.errors import RemoteReadError, RemoteWriteError
from byte_buddy.domain.goals import (
    GoalProfile,
    ReminderSettings,
    format_time,
    merge_profile_document,
)
from byte_buddy.services.feeds import ErrorHandler, Subscription
from byte_buddy.services.foods import NOT_SIGNED_IN

ProfileHandler = Callable[[dict[str, object] | None], None]

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for per-user profile documents."""

    def merge_profile(self, owner_id: str, fields: dict[str, object]) -> None:
        """Upsert the given fields, leaving other stored fields untouched."""

    def watch_profile(
        self,
        owner_id: str,
        on_document: ProfileHandler,
        on_error: ErrorHandler,
    ) -> Subscription:
        """Open a feed of the owner's profile document."""


@dataclass
class GoalSettingsStore:
    """Daily targets and reminder settings for the signed-in user."""

    repository: ProfileRepository
    owner_id: str | None = None
    profile: GoalProfile = field(default_factory=GoalProfile)
    error_message: str | None = None
    _subscription: Subscription | None = field(default=None, repr=False)
    _generation: int = field(default=0, repr=False)

    def save_goals(  # noqa: PLR0913
        self,
        calorie: float,
        protein: float,
        carb: float,
        sugar: float,
        fat: float,
        weight: float | None = None,
    ) -> bool:
        """Merge-write the daily targets; weight only when given."""
        fields: dict[str, object] = {
            "daily_calorie_goal": calorie,
            "daily_protein_goal": protein,
            "daily_carb_goal": carb,
            "daily_sugar_goal": sugar,
            "daily_fat_goal": fat,
        }
        if weight is not None:
            fields["weight"] = weight
        return self._merge(fields, "goals")

    def save_reminder(self, enabled: bool, at: time, message: str) -> bool:
        """Merge-write the reminder settings."""
        fields: dict[str, object] = {
            "reminder_enabled": enabled,
            "reminder_time": format_time(at),
            "reminder_message": message,
        }
        return self._merge(fields, "reminder")

    @property
    def reminder(self) -> ReminderSettings:
        return self.profile.reminder

    def subscribe(self, owner_id: str) -> None:
        """Bind to an owner and follow their profile document."""
        self.unsubscribe()
        self.owner_id = owner_id
        generation = self._generation

        def on_document(document: dict[str, object] | None) -> None:
            if generation != self._generation or document is None:
                return
            self.profile = merge_profile_document(self.profile, document)

        def on_error(exc: RemoteReadError) -> None:
            if generation != self._generation:
                return
            _logger.warning("Loading profile failed: %s", exc)
            self.error_message = f"Error loading goals: {exc}"

        self._subscription = self.repository.watch_profile(
            owner_id, on_document, on_error
        )

    def unsubscribe(self) -> None:
        """Release the live feed."""
        self._generation += 1
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def reset(self) -> None:
        """Drop the owner binding and restore default targets."""
        self.unsubscribe()
        self.owner_id = None
        self.profile = GoalProfile()
        self.error_message = None

    def _merge(self, fields: dict[str, object], label: str) -> bool:
        if self.owner_id is None:
            self.error_message = NOT_SIGNED_IN
            return False
        try:
            self.repository.merge_profile(self.owner_id, fields)
        except RemoteWriteError as exc:
            _logger.warning("Saving %s failed: %s", label, exc)
            self.error_message = f"Error saving {label}: {exc}"
            return False
        self.profile = merge_profile_document(self.profile, fields)
        self.error_message = None
        return True
