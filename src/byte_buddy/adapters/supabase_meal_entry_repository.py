"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from byte_buddy.adapters.supabase_live_query import SUPABASE_ERRORS, LiveQueryHub
from byte_buddy.domain.errors import DecodeError, RemoteWriteError
from byte_buddy.domain.foods import MealEntry, MealSlot
from byte_buddy.services.feeds import (
    ErrorHandler,
    SnapshotHandler,
    Subscription,
    decode_rows,
)
from byte_buddy.services.meals import MealEntryRepository

TABLE = "meal_entries"


@dataclass
class SupabaseMealEntryRepository(MealEntryRepository):
    """Supabase implementation for meal entries."""

    client: Client
    hub: LiveQueryHub

    def create_entry(self, entry: MealEntry) -> None:
        """Insert a meal entry row with its nutrient snapshot."""
        try:
            response = (
                self.client.table(TABLE)
                .insert(
                    {
                        "id": entry.id,
                        "user_id": entry.owner_id,
                        "food_id": entry.food_id,
                        "food_name": entry.food_name,
                        "calories": entry.calories,
                        "protein_g": entry.protein_g,
                        "carbs_g": entry.carbs_g,
                        "fat_g": entry.fat_g,
                        "quantity": entry.quantity,
                        "meal_type": entry.meal_slot.value,
                        "date_consumed": entry.date_consumed.isoformat(),
                    }
                )
                .execute()
            )
        except SUPABASE_ERRORS as exc:
            raise RemoteWriteError(str(exc) or type(exc).__name__) from exc
        if not response.data:
            raise RemoteWriteError("Failed to create meal entry")
        self.hub.notify(TABLE)

    def delete_entry(self, entry_id: str) -> None:
        """Delete a meal entry row."""
        try:
            self.client.table(TABLE).delete().eq("id", entry_id).execute()
        except SUPABASE_ERRORS as exc:
            raise RemoteWriteError(str(exc) or type(exc).__name__) from exc
        self.hub.notify(TABLE)

    def watch_entries(
        self,
        owner_id: str,
        on_snapshot: SnapshotHandler[MealEntry],
        on_error: ErrorHandler,
    ) -> Subscription:
        """Follow the owner's entries, latest consumption first."""

        def fetch() -> list[dict[str, object]]:
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("user_id", owner_id)
                .order("date_consumed", desc=True)
                .execute()
            )
            return response.data or []

        return self.hub.open(
            TABLE,
            fetch,
            lambda rows: on_snapshot(decode_rows(rows, parse_entry, "meal entry")),
            on_error,
        )


def parse_entry(row: dict[str, object]) -> MealEntry:
    """Parse a meal entry row into a domain model."""
    try:
        return MealEntry(
            id=str(row["id"]),
            owner_id=str(row["user_id"]),
            food_id=str(row.get("food_id") or ""),
            food_name=str(row["food_name"]),
            calories=float(row["calories"]),
            protein_g=float(row["protein_g"]),
            carbs_g=float(row["carbs_g"]),
            fat_g=float(row["fat_g"]),
            quantity=float(row["quantity"]),
            meal_slot=MealSlot(row["meal_type"]),
            date_consumed=datetime.fromisoformat(str(row["date_consumed"])),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"Invalid meal entry row: {exc}") from exc
