"""In-process notification center driven by the ``schedule`` library."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import schedule

from byte_buddy.services.reminders import NotificationCenter

NotificationSink = Callable[[str, str], None]

_logger = logging.getLogger(__name__)


def _log_notification(title: str, body: str) -> None:
    _logger.info("Notification: %s: %s", title, body)


@dataclass
class ScheduleNotificationCenter(NotificationCenter):
    """Runs repeating daily notifications on a private scheduler."""

    permission_granted: bool = True
    sink: NotificationSink = _log_notification
    scheduler: schedule.Scheduler = field(default_factory=schedule.Scheduler)

    def request_permission(self) -> bool:
        """Return the configured permission."""
        return self.permission_granted

    def schedule_repeating(  # noqa: PLR0913
        self, hour: int, minute: int, title: str, body: str, identifier: str
    ) -> None:
        """Register a daily job, replacing any job tagged with the same id."""
        self.scheduler.clear(identifier)
        self.scheduler.every().day.at(f"{hour:02d}:{minute:02d}").do(
            self.sink, title, body
        ).tag(identifier)

    def cancel(self, identifier: str) -> None:
        """Remove jobs tagged with the id."""
        self.scheduler.clear(identifier)

    def scheduled(self, identifier: str) -> list[schedule.Job]:
        """Return the jobs registered under an id."""
        return self.scheduler.get_jobs(identifier)

    def run_pending(self) -> None:
        """Deliver any notifications that are due."""
        self.scheduler.run_pending()
