"""Dependency container wiring for the application."""

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from alter_ego.adapters.openai_image_client import OpenAIImageClient
from alter_ego.adapters.supabase_state_store import SupabaseKeyValueStore
from alter_ego.adapters.transform_http_client import HttpxTransformClient
from alter_ego.config import Settings, parse_credit_packs
from alter_ego.services.credits import CreditLedger
from alter_ego.services.favorites import FavoritesStore
from alter_ego.services.generation import GenerationOrchestrator
from alter_ego.services.history import HistoryStore
from alter_ego.services.notifications import Notifier
from alter_ego.services.storage import KeyValueStore
from alter_ego.services.styles import StylePicker
from alter_ego.services.transform import TransformService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    notifier: Notifier
    ledger: CreditLedger
    history: HistoryStore
    favorites: FavoritesStore
    orchestrator: GenerationOrchestrator
    close_resources: Callable[[], Awaitable[None]]


def build_stores(
    settings: Settings, store: KeyValueStore, notifier: Notifier
) -> tuple[CreditLedger, HistoryStore, FavoritesStore]:
    """Create and hydrate the persisted stores."""
    ledger = CreditLedger(
        store=store,
        notifier=notifier,
        default_credits=settings.default_credits,
        credit_packs=parse_credit_packs(settings.credit_packs),
        pro_sku=settings.pro_sku,
    )
    history = HistoryStore(store=store, notifier=notifier)
    favorites = FavoritesStore(store=store, notifier=notifier)
    ledger.hydrate()
    history.hydrate()
    favorites.hydrate()
    return ledger, history, favorites


def build_container(
    settings: Settings | None = None, store: KeyValueStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    if store is None:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        store = SupabaseKeyValueStore(
            supabase_client, owner_id=resolved_settings.device_id
        )
    notifier = Notifier()
    ledger, history, favorites = build_stores(resolved_settings, store, notifier)

    transform_client: HttpxTransformClient | OpenAIImageClient
    if resolved_settings.transform_backend == "openai":
        if not resolved_settings.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is required for the openai backend")
        transform_client = OpenAIImageClient.create(
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_image_model,
        )
    else:
        transform_client = HttpxTransformClient.create(
            endpoint=resolved_settings.transform_api_url,
            timeout=resolved_settings.transform_timeout_seconds,
        )

    rng = random.Random()
    orchestrator = GenerationOrchestrator(
        transform_service=TransformService(transform_client),
        ledger=ledger,
        history=history,
        favorites=favorites,
        notifier=notifier,
        picker=StylePicker(rng=rng),
        rng=rng,
    )

    async def close_resources() -> None:
        await transform_client.close()

    return AppContainer(
        settings=resolved_settings,
        notifier=notifier,
        ledger=ledger,
        history=history,
        favorites=favorites,
        orchestrator=orchestrator,
        close_resources=close_resources,
    )
