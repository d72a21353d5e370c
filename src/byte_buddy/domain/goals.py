"""Goal profile and reminder settings."""

import logging
from dataclasses import dataclass, field, replace
from datetime import time

from byte_buddy.domain.errors import DecodeError

DEFAULT_REMINDER_MESSAGE = "Don't forget to Feed your Buddy!"

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderSettings:
    """Daily reminder toggle, time of day and message."""

    enabled: bool = False
    time_of_day: time = time(hour=8, minute=0)
    message: str = DEFAULT_REMINDER_MESSAGE


@dataclass(frozen=True)
class GoalProfile:
    """Per-user daily targets."""

    daily_calorie_goal: float = 2000.0
    daily_protein_goal: float = 150.0
    daily_carb_goal: float = 250.0
    daily_sugar_goal: float = 40.0
    daily_fat_goal: float = 70.0
    weight: float | None = None
    reminder: ReminderSettings = field(default_factory=ReminderSettings)


_NUMERIC_FIELDS = (
    "daily_calorie_goal",
    "daily_protein_goal",
    "daily_carb_goal",
    "daily_sugar_goal",
    "daily_fat_goal",
    "weight",
)


def format_time(value: time) -> str:
    """Serialize a time of day as a 24-hour "HH:MM" string."""
    return f"{value.hour:02d}:{value.minute:02d}"


def parse_time(raw: str) -> time:
    """Parse a 24-hour "HH:MM" string."""
    hour_text, sep, minute_text = raw.partition(":")
    if not sep or not hour_text.isdigit() or not minute_text.isdigit():
        raise DecodeError(f"Invalid reminder time: {raw!r}")
    try:
        return time(hour=int(hour_text), minute=int(minute_text))
    except ValueError as exc:
        raise DecodeError(f"Invalid reminder time: {raw!r}") from exc


def merge_profile_document(
    profile: GoalProfile, document: dict[str, object]
) -> GoalProfile:
    """Apply each well-typed field of a stored document onto a profile.

    Missing or malformed fields keep their current value.
    """
    updates: dict[str, object] = {}
    for name in _NUMERIC_FIELDS:
        value = document.get(name)
        if isinstance(value, int | float) and not isinstance(value, bool):
            updates[name] = float(value)

    reminder = profile.reminder
    enabled = document.get("reminder_enabled")
    if isinstance(enabled, bool):
        reminder = replace(reminder, enabled=enabled)
    raw_time = document.get("reminder_time")
    if isinstance(raw_time, str):
        try:
            reminder = replace(reminder, time_of_day=parse_time(raw_time))
        except DecodeError as exc:
            _logger.warning("Ignoring stored reminder time: %s", exc)
    message = document.get("reminder_message")
    if isinstance(message, str):
        reminder = replace(reminder, message=message)

    return replace(profile, reminder=reminder, **updates)
