"""Tests for the meal log store."""

from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from byte_buddy.domain.foods import Food, FoodDraft, MealSlot
from byte_buddy.services.foods import FoodCatalogStore
from byte_buddy.services.meals import MealLogStore
from tests.conftest import InMemoryFoodRepository, InMemoryMealEntryRepository

NEW_YEAR = datetime(2024, 1, 1, 8, 30, tzinfo=UTC)


def _banana(food_id: str = "banana-1") -> Food:
    return Food(
        id=food_id,
        owner_id="user-1",
        name="Banana",
        calories=105,
        protein_g=1.3,
        carbs_g=27,
        fat_g=0.4,
        serving_size="1 medium",
        date_added=NEW_YEAR,
    )


def _store(repository: InMemoryMealEntryRepository | None = None) -> MealLogStore:
    store = MealLogStore(repository or InMemoryMealEntryRepository(), timezone=UTC)
    store.subscribe("user-1")
    return store


def test_add_entry_snapshots_food_nutrients() -> None:
    store = _store()

    entry = store.add_entry(_banana(), 2, MealSlot.BREAKFAST, NEW_YEAR)

    assert entry is not None
    assert entry.food_id == "banana-1"
    assert entry.food_name == "Banana"
    assert entry.calories == 105
    assert entry.total_calories == 210
    assert store.entries == [entry]


def test_add_entry_from_draft_has_empty_food_id() -> None:
    store = _store()
    draft = FoodDraft(name="Apple", calories=95, carbs_g=25)

    entry = store.add_entry(draft, 1, MealSlot.SNACK)

    assert entry is not None
    assert entry.food_id == ""
    assert entry.date_consumed.tzinfo is not None


def test_banana_scenario_daily_totals() -> None:
    store = _store()
    store.add_entry(_banana(), 2, MealSlot.BREAKFAST, NEW_YEAR)

    totals = store.daily_totals(date(2024, 1, 1))

    assert totals.calories == pytest.approx(210)
    assert totals.protein_g == pytest.approx(2.6)
    assert totals.carbs_g == pytest.approx(54)
    assert totals.fat_g == pytest.approx(0.8)


def test_entries_match_by_calendar_day() -> None:
    store = _store()
    early = store.add_entry(
        _banana(), 1, MealSlot.BREAKFAST, datetime(2024, 1, 1, 0, 1, tzinfo=UTC)
    )
    late = store.add_entry(
        _banana(), 1, MealSlot.DINNER, datetime(2024, 1, 1, 23, 59, tzinfo=UTC)
    )
    next_day = store.add_entry(
        _banana(), 1, MealSlot.BREAKFAST, datetime(2024, 1, 2, 0, 1, tzinfo=UTC)
    )

    on_first = store.entries_on(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))

    assert {entry.id for entry in on_first} == {early.id, late.id}
    assert store.entries_on(date(2024, 1, 2)) == [next_day]


def test_entries_for_filters_by_meal_slot() -> None:
    store = _store()
    breakfast = store.add_entry(_banana(), 1, MealSlot.BREAKFAST, NEW_YEAR)
    store.add_entry(_banana(), 1, MealSlot.LUNCH, NEW_YEAR + timedelta(hours=4))

    assert store.entries_for(MealSlot.BREAKFAST, date(2024, 1, 1)) == [breakfast]
    assert store.entries_for(MealSlot.SNACK, date(2024, 1, 1)) == []


def test_calendar_day_uses_store_timezone() -> None:
    store = MealLogStore(
        InMemoryMealEntryRepository(), timezone=ZoneInfo("America/Los_Angeles")
    )
    store.subscribe("user-1")
    # 2024-01-02 03:00 UTC is still Jan 1 in Los Angeles.
    entry = store.add_entry(
        _banana(), 1, MealSlot.DINNER, datetime(2024, 1, 2, 3, 0, tzinfo=UTC)
    )

    assert store.entries_on(date(2024, 1, 1)) == [entry]
    assert store.entries_on(date(2024, 1, 2)) == []


def test_delete_entry_remote_first() -> None:
    repository = InMemoryMealEntryRepository()
    store = _store(repository)
    entry = store.add_entry(_banana(), 1, MealSlot.LUNCH, NEW_YEAR)
    assert entry is not None

    repository.fail_writes = True
    assert store.delete_entry(entry.id) is False
    assert store.entries == [entry]
    assert store.error_message is not None

    repository.fail_writes = False
    assert store.delete_entry(entry.id) is True
    assert store.entries == []


def test_add_entry_failure_keeps_mirror() -> None:
    repository = InMemoryMealEntryRepository(fail_writes=True)
    store = _store(repository)

    assert store.add_entry(_banana(), 1, MealSlot.LUNCH, NEW_YEAR) is None
    assert store.entries == []
    assert store.error_message is not None
    assert store.error_message.startswith("Error adding meal entry")


def test_deleting_food_keeps_entry_snapshot() -> None:
    catalog = FoodCatalogStore(InMemoryFoodRepository())
    catalog.subscribe("user-1")
    food = catalog.add_food(
        FoodDraft(name="Banana", calories=105, protein_g=1.3, carbs_g=27, fat_g=0.4)
    )
    assert food is not None
    store = _store()
    entry = store.add_entry(food, 2, MealSlot.BREAKFAST, NEW_YEAR)

    assert catalog.delete_food(food.id) is True

    assert store.entries == [entry]
    assert store.daily_totals(NEW_YEAR).calories == pytest.approx(210)


def test_snapshot_replaces_entries_in_consumption_order() -> None:
    repository = InMemoryMealEntryRepository()
    store = _store(repository)
    later = store.add_entry(
        _banana(), 1, MealSlot.DINNER, NEW_YEAR + timedelta(hours=10)
    )
    earlier = store.add_entry(_banana(), 1, MealSlot.BREAKFAST, NEW_YEAR)
    assert store.entries == [earlier, later]

    repository.push()

    assert store.entries == [later, earlier]


def test_unsubscribe_blocks_further_snapshots() -> None:
    repository = InMemoryMealEntryRepository()
    store = _store(repository)
    store.add_entry(_banana(), 1, MealSlot.LUNCH, NEW_YEAR)

    store.reset()
    repository.push()

    assert store.entries == []
    assert store.owner_id is None


def test_naive_timestamp_is_pinned_to_store_timezone() -> None:
    new_york = ZoneInfo("America/New_York")
    repository = InMemoryMealEntryRepository()
    store = MealLogStore(repository, timezone=new_york)
    store.subscribe("user-1")

    entry = store.add_entry(_banana(), 1, MealSlot.SNACK, datetime(2024, 1, 2, 1, 0))

    assert entry is not None
    assert entry.date_consumed == datetime(2024, 1, 2, 1, 0, tzinfo=new_york)
    assert store.daily_totals(date(2024, 1, 2)).calories == pytest.approx(105)

    # The stored row comes back as the same instant expressed in UTC.
    stored = repository.entries[entry.id]
    repository.entries[entry.id] = replace(
        stored, date_consumed=stored.date_consumed.astimezone(UTC)
    )
    repository.push()

    assert store.daily_totals(date(2024, 1, 2)).calories == pytest.approx(105)
    assert store.daily_totals(date(2024, 1, 1)).calories == 0


def test_successful_write_clears_previous_error() -> None:
    repository = InMemoryMealEntryRepository(fail_writes=True)
    store = _store(repository)
    store.add_entry(_banana(), 1, MealSlot.LUNCH, NEW_YEAR)
    assert store.error_message is not None

    repository.fail_writes = False
    entry = store.add_entry(_banana(), 1, MealSlot.LUNCH, NEW_YEAR)
    assert entry is not None
    assert store.error_message is None

    repository.fail_writes = True
    store.delete_entry(entry.id)
    repository.fail_writes = False
    assert store.delete_entry(entry.id) is True
    assert store.error_message is None
