"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from supabase import create_client

from byte_buddy.adapters.nutritionix_client import HttpxNutritionixClient
from byte_buddy.adapters.schedule_notification_center import (
    ScheduleNotificationCenter,
)
from byte_buddy.adapters.supabase_auth_provider import SupabaseAuthProvider
from byte_buddy.adapters.supabase_food_repository import SupabaseFoodRepository
from byte_buddy.adapters.supabase_live_query import LiveQueryHub
from byte_buddy.adapters.supabase_meal_entry_repository import (
    SupabaseMealEntryRepository,
)
from byte_buddy.adapters.supabase_profile_repository import SupabaseProfileRepository
from byte_buddy.config import Settings
from byte_buddy.services.auth import AuthService
from byte_buddy.services.foods import FoodCatalogStore
from byte_buddy.services.goals import GoalSettingsStore
from byte_buddy.services.lookup import FoodLookupService
from byte_buddy.services.meals import MealLogStore
from byte_buddy.services.reminders import ReminderScheduler
from byte_buddy.services.session import SessionManager


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    session_manager: SessionManager
    food_catalog: FoodCatalogStore
    meal_log: MealLogStore
    goals: GoalSettingsStore
    lookup_service: FoodLookupService
    reminder_scheduler: ReminderScheduler
    refresh_feeds: Callable[[], None]
    run_pending_notifications: Callable[[], None]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    hub = LiveQueryHub()
    food_catalog = FoodCatalogStore(SupabaseFoodRepository(supabase_client, hub))
    meal_log = MealLogStore(
        SupabaseMealEntryRepository(supabase_client, hub),
        timezone=ZoneInfo(resolved_settings.timezone),
    )
    goals = GoalSettingsStore(SupabaseProfileRepository(supabase_client, hub))
    session_manager = SessionManager(
        food_catalog=food_catalog,
        meal_log=meal_log,
        goals=goals,
    )
    auth_service = AuthService(SupabaseAuthProvider(supabase_client))
    auth_service.bind(session_manager)
    nutritionix_client = HttpxNutritionixClient.create(
        app_id=resolved_settings.nutritionix_app_id,
        app_key=resolved_settings.nutritionix_app_key,
        base_url=resolved_settings.nutritionix_base_url,
        timeout_seconds=resolved_settings.search_timeout_seconds,
    )
    notification_center = ScheduleNotificationCenter(
        permission_granted=resolved_settings.notifications_enabled
    )

    async def close_resources() -> None:
        auth_service.unbind()
        session_manager.close()
        await nutritionix_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        session_manager=session_manager,
        food_catalog=food_catalog,
        meal_log=meal_log,
        goals=goals,
        lookup_service=FoodLookupService(nutritionix_client),
        reminder_scheduler=ReminderScheduler(notification_center),
        refresh_feeds=hub.refresh_all,
        run_pending_notifications=notification_center.run_pending,
        close_resources=close_resources,
    )
