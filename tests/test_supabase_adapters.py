"""Tests for the Supabase key/value adapter."""

from dataclasses import dataclass, field

from alter_ego.adapters.supabase_state_store import SupabaseKeyValueStore


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_state_store_get_returns_value() -> None:
    client = FakeSupabaseClient()
    client.table("app_state").queue("select", [{"value_json": 12}])
    store = SupabaseKeyValueStore(client, owner_id="device-1")

    assert store.get("credits") == 12
    assert client.table("app_state").last_filters == [
        ("owner_id", "device-1"),
        ("key", "credits"),
    ]


def test_state_store_get_missing_returns_none() -> None:
    client = FakeSupabaseClient()
    store = SupabaseKeyValueStore(client, owner_id="device-1")

    assert store.get("history") is None


def test_state_store_set_upserts_by_owner_and_key() -> None:
    client = FakeSupabaseClient()
    store = SupabaseKeyValueStore(client, owner_id="device-1")

    store.set("favorites", {"img": {"caption": "Anime"}})

    table = client.table("app_state")
    payload = table.last_payload
    assert isinstance(payload, dict)
    assert payload["owner_id"] == "device-1"
    assert payload["key"] == "favorites"
    assert payload["value_json"] == {"img": {"caption": "Anime"}}
    assert "updated_at" in payload
    assert table.last_on_conflict == "owner_id,key"
