"""Supabase repository for catalog foods."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from byte_buddy.adapters.supabase_live_query import SUPABASE_ERRORS, LiveQueryHub
from byte_buddy.domain.errors import DecodeError, RemoteWriteError
from byte_buddy.domain.foods import DEFAULT_SERVING_SIZE, Food, FoodDraft
from byte_buddy.services.feeds import (
    ErrorHandler,
    SnapshotHandler,
    Subscription,
    decode_rows,
)
from byte_buddy.services.foods import FoodRepository

TABLE = "foods"


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for catalog foods."""

    client: Client
    hub: LiveQueryHub

    def create_food(self, food: Food) -> None:
        """Insert a food row with its client-generated id."""
        try:
            response = (
                self.client.table(TABLE)
                .insert(
                    {
                        "id": food.id,
                        "user_id": food.owner_id,
                        "date_added": food.date_added.isoformat(),
                        **_draft_columns(food),
                    }
                )
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise RemoteWriteError(str(exc) or type(exc).__name__) from exc
        if not response.data:
            raise RemoteWriteError("Failed to create food")
        self.hub.notify(TABLE)

    def update_food(self, food_id: str, draft: FoodDraft) -> None:
        """Update editable columns; date_added is never written."""
        try:
            response = (
                self.client.table(TABLE)
                .update(_draft_columns(draft))
                .eq("id", food_id)
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise RemoteWriteError(str(exc) or type(exc).__name__) from exc
        if not response.data:
            raise RemoteWriteError("Failed to update food")
        self.hub.notify(TABLE)

    def delete_food(self, food_id: str) -> None:
        """Delete a food row."""
        try:
            self.client.table(TABLE).delete().eq("id", food_id).execute()
        except SUPABASE_ERRORS as exc:
            raise RemoteWriteError(str(exc) or type(exc).__name__) from exc
        self.hub.notify(TABLE)

    def watch_foods(
        self,
        owner_id: str,
        on_snapshot: SnapshotHandler[Food],
        on_error: ErrorHandler,
    ) -> Subscription:
        """Follow the owner's foods, newest first."""

        def fetch() -> list[dict[str, object]]:
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("user_id", owner_id)
                .order("date_added", desc=True)
                .execute()
            )
            return response.data or []

        return self.hub.open(
            TABLE,
            fetch,
            lambda rows: on_snapshot(decode_rows(rows, parse_food, "food")),
            on_error,
        )


def _draft_columns(food: Food | FoodDraft) -> dict[str, object]:
    return {
        "name": food.name,
        "calories": food.calories,
        "protein_g": food.protein_g,
        "carbs_g": food.carbs_g,
        "fat_g": food.fat_g,
        "serving_size": food.serving_size,
    }


def parse_food(row: dict[str, object]) -> Food:
    """Parse a food row into a domain model."""
    try:
        name = str(row["name"])
        if not name:
            raise DecodeError("Food name is empty")
        return Food(
            id=str(row["id"]),
            owner_id=str(row["user_id"]),
            name=name,
            calories=float(row["calories"]),
            protein_g=float(row.get("protein_g") or 0.0),
            carbs_g=float(row.get("carbs_g") or 0.0),
            fat_g=float(row.get("fat_g") or 0.0),
            serving_size=str(row.get("serving_size") or DEFAULT_SERVING_SIZE),
            date_added=datetime.fromisoformat(str(row["date_added"])),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"Invalid food row: {exc}") from exc
