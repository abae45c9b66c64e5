"""Favorited images keyed by image handle."""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from alter_ego.domain.records import FavoriteRecord
from alter_ego.domain.sessions import FavoriteEntry
from alter_ego.services.notifications import Notifier
from alter_ego.services.storage import (
    FAVORITES_KEY,
    KeyValueStore,
    load_value,
    save_value,
)

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesStore:
    """Set of favorites with toggle semantics."""

    store: KeyValueStore
    notifier: Notifier
    _entries: dict[str, FavoriteEntry] = field(init=False, default_factory=dict)

    def hydrate(self) -> None:
        raw = load_value(self.store, FAVORITES_KEY)
        if not isinstance(raw, dict):
            if raw is not None:
                _logger.warning("Ignoring invalid stored favorites")
            self._entries = {}
            return
        entries: dict[str, FavoriteEntry] = {}
        for key, value in raw.items():
            try:
                entry = FavoriteRecord.model_validate(value).to_entry()
            except ValidationError:
                _logger.warning("Dropping invalid favorite %s", key)
                continue
            entries[entry.image] = entry
        self._entries = entries

    def toggle(self, image: str, caption: str, source_image: str) -> bool:
        """Flip the favorite state of an image and return the new state."""
        if image in self._entries:
            del self._entries[image]
            favorited = False
        else:
            self._entries[image] = FavoriteEntry(
                image=image, caption=caption, source_image=source_image
            )
            favorited = True
        self._persist()
        return favorited

    def is_favorite(self, image: str) -> bool:
        return image in self._entries

    def list(self) -> list[FavoriteEntry]:
        return list(self._entries.values())

    def _persist(self) -> None:
        payload = {
            image: FavoriteRecord.from_entry(entry).model_dump(mode="json")
            for image, entry in self._entries.items()
        }
        save_value(
            self.store,
            FAVORITES_KEY,
            payload,
            self.notifier,
            "Could not save your favorites.",
        )
