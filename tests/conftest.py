"""Shared test fixtures."""

import base64
import json
import random
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from alter_ego.config import Settings
from alter_ego.containers import AppContainer
from alter_ego.services.credits import CreditLedger
from alter_ego.services.favorites import FavoritesStore
from alter_ego.services.generation import GenerationOrchestrator
from alter_ego.services.history import HistoryStore
from alter_ego.services.notifications import Notifier
from alter_ego.services.storage import KeyValueStore
from alter_ego.services.styles import StylePicker
from alter_ego.services.transform import (
    TransformClient,
    TransformError,
    TransformService,
)

SOURCE_IMAGE = "data:image/jpeg;base64,c291cmNl"


def styled_url(style_label: str) -> str:
    encoded = base64.b64encode(style_label.encode()).decode()
    return f"data:image/png;base64,{encoded}"


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key/value store that round-trips values through JSON."""

    values: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> object | None:
        return self.values.get(key)

    def set(self, key: str, value: object) -> None:
        self.values[key] = json.loads(json.dumps(value))
        self.writes.append(key)


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose reads and writes always fail."""

    def get(self, key: str) -> object | None:
        raise RuntimeError("storage offline")

    def set(self, key: str, value: object) -> None:
        raise RuntimeError("storage offline")


@dataclass
class FakeTransformClient(TransformClient):
    """Fake transform client returning a data URL per style."""

    failures: dict[str, str] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    on_call: Callable[[str], None] | None = None

    async def transform(
        self, *, source_image: str, prompt: str, style_label: str
    ) -> str:
        self.calls.append(style_label)
        self.prompts.append(prompt)
        if self.on_call is not None:
            self.on_call(style_label)
        if style_label in self.failures:
            raise TransformError(self.failures[style_label])
        return styled_url(style_label)


@dataclass
class Harness:
    """Orchestrator wired to in-memory collaborators."""

    orchestrator: GenerationOrchestrator
    client: FakeTransformClient
    store: InMemoryKeyValueStore
    notifier: Notifier

    @property
    def ledger(self) -> CreditLedger:
        return self.orchestrator.ledger

    @property
    def history(self) -> HistoryStore:
        return self.orchestrator.history


def make_harness(
    credits: int = 18,
    is_unlimited: bool = False,
    client: FakeTransformClient | None = None,
    seed: int = 7,
) -> Harness:
    store = InMemoryKeyValueStore(values={"credits": credits, "is_pro": is_unlimited})
    notifier = Notifier()
    ledger = CreditLedger(
        store=store,
        notifier=notifier,
        credit_packs={"com.alterego.credits30": 30},
        pro_sku="com.alterego.pro.monthly",
    )
    history = HistoryStore(store=store, notifier=notifier)
    favorites = FavoritesStore(store=store, notifier=notifier)
    ledger.hydrate()
    history.hydrate()
    favorites.hydrate()
    resolved_client = client or FakeTransformClient()
    rng = random.Random(seed)
    orchestrator = GenerationOrchestrator(
        transform_service=TransformService(resolved_client),
        ledger=ledger,
        history=history,
        favorites=favorites,
        notifier=notifier,
        picker=StylePicker(rng=rng),
        rng=rng,
    )
    return Harness(
        orchestrator=orchestrator,
        client=resolved_client,
        store=store,
        notifier=notifier,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        transform_backend="http",
        openai_api_key=None,
    )


@pytest.fixture
def harness() -> Harness:
    return make_harness()


@pytest.fixture
def container(settings: Settings, harness: Harness) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        notifier=harness.notifier,
        ledger=harness.orchestrator.ledger,
        history=harness.orchestrator.history,
        favorites=harness.orchestrator.favorites,
        orchestrator=harness.orchestrator,
        close_resources=close_resources,
    )
