"""Daily reminder scheduling."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from byte_buddy.domain.goals import ReminderSettings

REMINDER_ID = "daily_reminder"
REMINDER_TITLE = "Byte Buddy Reminder"

_logger = logging.getLogger(__name__)


class NotificationCenter(Protocol):
    """Interface for a local notification service."""

    def request_permission(self) -> bool:
        """Ask to deliver notifications; return whether it was granted."""

    def schedule_repeating(  # noqa: PLR0913
        self, hour: int, minute: int, title: str, body: str, identifier: str
    ) -> None:
        """Register a daily notification, replacing one with the same id."""

    def cancel(self, identifier: str) -> None:
        """Remove a registered notification by id."""


@dataclass
class ReminderScheduler:
    """Keeps the single daily reminder in line with the saved settings."""

    center: NotificationCenter
    _permission: bool = field(default=False, repr=False)

    def apply(self, reminder: ReminderSettings) -> bool:
        """Schedule or remove the reminder.

        Returns False when the reminder is enabled but permission was denied.
        """
        if not reminder.enabled:
            self.center.cancel(REMINDER_ID)
            _logger.info("Daily reminder removed")
            return True
        if not self._permission:
            self._permission = self.center.request_permission()
        if not self._permission:
            _logger.info("Notification permission denied; reminder not scheduled")
            return False
        self.center.schedule_repeating(
            hour=reminder.time_of_day.hour,
            minute=reminder.time_of_day.minute,
            title=REMINDER_TITLE,
            body=reminder.message,
            identifier=REMINDER_ID,
        )
        _logger.info(
            "Daily reminder scheduled at %02d:%02d",
            reminder.time_of_day.hour,
            reminder.time_of_day.minute,
        )
        return True
