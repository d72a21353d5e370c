"""Binds the mirrored stores to the signed-in user."""

import logging
from dataclasses import dataclass

from byte_buddy.services.foods import FoodCatalogStore
from byte_buddy.services.goals import GoalSettingsStore
from byte_buddy.services.meals import MealLogStore

_logger = logging.getLogger(__name__)


@dataclass
class SessionManager:
    """Rebinds every store when the authenticated session changes."""

    food_catalog: FoodCatalogStore
    meal_log: MealLogStore
    goals: GoalSettingsStore
    current_user_id: str | None = None

    def on_session_changed(self, user_id: str | None) -> None:
        """Handle a session change; repeated events for one user are ignored."""
        if user_id == self.current_user_id:
            return
        self._reset_stores()
        self.current_user_id = user_id
        if user_id is None:
            _logger.info("Session ended; stores cleared")
            return
        _logger.info("Session started for user %s", user_id)
        self._subscribe_stores(user_id)

    def refresh(self) -> None:
        """Re-open every feed for the current user."""
        if self.current_user_id is not None:
            self._subscribe_stores(self.current_user_id)

    def close(self) -> None:
        """Release every feed without forgetting the user."""
        self.food_catalog.unsubscribe()
        self.meal_log.unsubscribe()
        self.goals.unsubscribe()

    def _subscribe_stores(self, user_id: str) -> None:
        self.food_catalog.subscribe(user_id)
        self.meal_log.subscribe(user_id)
        self.goals.subscribe(user_id)

    def _reset_stores(self) -> None:
        self.food_catalog.reset()
        self.meal_log.reset()
        self.goals.reset()
