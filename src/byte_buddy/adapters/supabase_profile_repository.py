"""Supabase repository for goal profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from byte_buddy.adapters.supabase_live_query import SUPABASE_ERRORS, LiveQueryHub
from byte_buddy.domain.errors import RemoteWriteError
from byte_buddy.services.feeds import ErrorHandler, Subscription
from byte_buddy.services.goals import ProfileHandler, ProfileRepository

TABLE = "user_profiles"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for per-user profile rows."""

    client: Client
    hub: LiveQueryHub

    def merge_profile(self, owner_id: str, fields: dict[str, object]) -> None:
        """Upsert the given columns on user_id, leaving the rest as stored."""
        try:
            self.client.table(TABLE).upsert(
                {
                    "user_id": owner_id,
                    **fields,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            ).execute()
        except SUPABASE_ERRORS as exc:
            raise RemoteWriteError(str(exc) or type(exc).__name__) from exc
        self.hub.notify(TABLE)

    def watch_profile(
        self,
        owner_id: str,
        on_document: ProfileHandler,
        on_error: ErrorHandler,
    ) -> Subscription:
        """Follow the owner's profile row."""

        def fetch() -> list[dict[str, object]]:
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("user_id", owner_id)
                .limit(1)
                .execute()
            )
            return response.data or []

        return self.hub.open(
            TABLE,
            fetch,
            lambda rows: on_document(rows[0] if rows else None),
            on_error,
        )
