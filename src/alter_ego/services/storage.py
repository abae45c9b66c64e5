"""Key/value persistence interface and guarded load/save helpers."""

import logging
from typing import Protocol

from alter_ego.services.notifications import Notifier

CREDITS_KEY = "credits"
UNLIMITED_KEY = "is_pro"
FAVORITES_KEY = "favorites"
HISTORY_KEY = "history"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface for JSON-compatible blobs."""

    def get(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a value under a key, replacing any previous one."""


def load_value(store: KeyValueStore, key: str) -> object | None:
    """Read a key, returning None when the read fails."""
    try:
        return store.get(key)
    except Exception:
        _logger.warning("Failed to read %s from storage", key, exc_info=True)
        return None


def save_value(
    store: KeyValueStore,
    key: str,
    value: object,
    notifier: Notifier,
    failure_message: str,
) -> bool:
    """Write a key, reporting failures to the user instead of raising."""
    try:
        store.set(key, value)
    except Exception:
        _logger.exception("Failed to save %s to storage", key)
        notifier.error(failure_message)
        return False
    return True
