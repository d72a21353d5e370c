"""Pure aggregation helpers over logged meal entries."""

from datetime import date, datetime, tzinfo

from byte_buddy.domain.foods import DailyTotals, MealEntry, MealSlot


def calendar_day(value: date | datetime, tz: tzinfo) -> date:
    """Return the calendar day of a date or timestamp in a timezone.

    Naive timestamps are taken to be in that timezone already.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    return value


def entries_on(
    entries: list[MealEntry], day: date | datetime, tz: tzinfo
) -> list[MealEntry]:
    """Return entries consumed on the same calendar day as ``day``."""
    target = calendar_day(day, tz)
    return [
        entry for entry in entries if calendar_day(entry.date_consumed, tz) == target
    ]


def entries_for(
    entries: list[MealEntry], meal_slot: MealSlot, day: date | datetime, tz: tzinfo
) -> list[MealEntry]:
    """Return one meal slot's entries for a calendar day."""
    return [
        entry for entry in entries_on(entries, day, tz) if entry.meal_slot == meal_slot
    ]


def daily_totals(
    entries: list[MealEntry], day: date | datetime, tz: tzinfo
) -> DailyTotals:
    """Sum scaled nutrients of the entries on a calendar day."""
    target = calendar_day(day, tz)
    total = DailyTotals(day=target, calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0)
    for entry in entries_on(entries, target, tz):
        total = DailyTotals(
            day=target,
            calories=total.calories + entry.total_calories,
            protein_g=total.protein_g + entry.total_protein_g,
            carbs_g=total.carbs_g + entry.total_carbs_g,
            fat_g=total.fat_g + entry.total_fat_g,
        )
    return total


def calories_remaining(goal: float, totals: DailyTotals) -> float:
    """Calories left for the day; negative once over budget."""
    return goal - totals.calories


def calorie_progress(goal: float, totals: DailyTotals) -> float:
    """Fraction of the calorie goal consumed, capped at 1.0."""
    if goal <= 0:
        return 0.0
    return min(totals.calories / goal, 1.0)
