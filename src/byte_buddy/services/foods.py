"""Food catalog store mirrored from the remote foods collection."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from byte_buddy.domain.errors import RemoteReadError, RemoteWriteError
from byte_buddy.domain.foods import Food, FoodDraft
from byte_buddy.services.feeds import ErrorHandler, SnapshotHandler, Subscription

_logger = logging.getLogger(__name__)

NOT_SIGNED_IN = "Not signed in"


class FoodRepository(Protocol):
    """Persistence interface for catalog foods."""

    def create_food(self, food: Food) -> None:
        """Write a new food document."""

    def update_food(self, food_id: str, draft: FoodDraft) -> None:
        """Merge editable fields into an existing food document."""

    def delete_food(self, food_id: str) -> None:
        """Delete a food document by id."""

    def watch_foods(
        self,
        owner_id: str,
        on_snapshot: SnapshotHandler[Food],
        on_error: ErrorHandler,
    ) -> Subscription:
        """Open a feed of the owner's foods, newest first."""


@dataclass
class FoodCatalogStore:
    """Catalog of a user's custom foods with an in-memory mirror."""

    repository: FoodRepository
    owner_id: str | None = None
    foods: list[Food] = field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None
    _subscription: Subscription | None = field(default=None, repr=False)
    _generation: int = field(default=0, repr=False)

    def add_food(self, draft: FoodDraft) -> Food | None:
        """Persist a validated draft and put it at the front of the mirror."""
        if self.owner_id is None:
            self.error_message = NOT_SIGNED_IN
            return None
        food = Food(
            id=str(uuid4()),
            owner_id=self.owner_id,
            name=draft.name,
            calories=draft.calories,
            protein_g=draft.protein_g,
            carbs_g=draft.carbs_g,
            fat_g=draft.fat_g,
            serving_size=draft.serving_size,
            date_added=datetime.now(tz=UTC),
        )
        self.is_loading = True
        try:
            self.repository.create_food(food)
        except RemoteWriteError as exc:
            _logger.warning("Adding food failed: %s", exc)
            self.error_message = f"Error adding food: {exc}"
            return None
        finally:
            self.is_loading = False
        # A snapshot may already carry the new row.
        self.foods = [food] + [item for item in self.foods if item.id != food.id]
        self.error_message = None
        _logger.info("Food added: id=%s", food.id)
        return food

    def update_food(self, food_id: str, draft: FoodDraft) -> Food | None:
        """Persist edits to a food, keeping its id and creation date."""
        current = self.get_food(food_id)
        if current is None:
            self.error_message = "Food not found"
            return None
        self.is_loading = True
        try:
            self.repository.update_food(food_id, draft)
        except RemoteWriteError as exc:
            _logger.warning("Updating food %s failed: %s", food_id, exc)
            self.error_message = f"Error updating food: {exc}"
            return None
        finally:
            self.is_loading = False
        updated = Food(
            id=current.id,
            owner_id=current.owner_id,
            name=draft.name,
            calories=draft.calories,
            protein_g=draft.protein_g,
            carbs_g=draft.carbs_g,
            fat_g=draft.fat_g,
            serving_size=draft.serving_size,
            date_added=current.date_added,
        )
        self.foods = [updated if item.id == food_id else item for item in self.foods]
        self.error_message = None
        return updated

    def delete_food(self, food_id: str) -> bool:
        """Delete remotely, then drop the food from the mirror."""
        self.is_loading = True
        try:
            self.repository.delete_food(food_id)
        except RemoteWriteError as exc:
            _logger.warning("Deleting food %s failed: %s", food_id, exc)
            self.error_message = f"Delete failed: {exc}"
            return False
        finally:
            self.is_loading = False
        self.foods = [item for item in self.foods if item.id != food_id]
        self.error_message = None
        return True

    def get_food(self, food_id: str) -> Food | None:
        """Return a mirrored food by id."""
        return next((item for item in self.foods if item.id == food_id), None)

    def subscribe(self, owner_id: str) -> None:
        """Bind to an owner and mirror their foods from a live feed."""
        self.unsubscribe()
        self.owner_id = owner_id
        generation = self._generation

        def on_snapshot(foods: list[Food]) -> None:
            if generation != self._generation:
                return
            _logger.info("Food snapshot received: count=%s", len(foods))
            self.foods = foods

        def on_error(exc: RemoteReadError) -> None:
            if generation != self._generation:
                return
            _logger.warning("Loading foods failed: %s", exc)
            self.error_message = f"Error loading foods: {exc}"

        self._subscription = self.repository.watch_foods(
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
        self.foods = []
        self.error_message = None
