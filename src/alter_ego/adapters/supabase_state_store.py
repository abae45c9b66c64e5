"""Supabase-backed key/value store for app state."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from alter_ego.services.storage import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase implementation of the key/value persistence store."""

    client: Client
    owner_id: str

    def get(self, key: str) -> object | None:
        """Return the stored value for a key."""
        response = (
            self.client.table("app_state")
            .select("value_json")
            .eq("owner_id", self.owner_id)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value_json")

    def set(self, key: str, value: object) -> None:
        """Insert or replace the value for a key."""
        self.client.table("app_state").upsert(
            {
                "owner_id": self.owner_id,
                "key": key,
                "value_json": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="owner_id,key",
        ).execute()
