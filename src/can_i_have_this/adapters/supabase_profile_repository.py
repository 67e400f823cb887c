"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from can_i_have_this.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile records."""

    client: Client
    table: str = "profiles"

    def get(self, key: str) -> dict[str, object] | None:
        """Return the stored profile payload for a key, if present."""
        response = (
            self.client.table(self.table)
            .select("payload")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("payload")

    def put(self, key: str, payload: dict[str, object]) -> None:
        """Insert or replace the profile payload for a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "payload": payload,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()

    def delete(self, key: str) -> None:
        """Delete the profile row for a key."""
        self.client.table(self.table).delete().eq("key", key).execute()
