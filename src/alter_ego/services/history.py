"""Capacity-bounded history of completed sessions."""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from alter_ego.domain.records import HistoryRecord
from alter_ego.domain.sessions import HistorySession
from alter_ego.services.notifications import Notifier
from alter_ego.services.storage import (
    HISTORY_KEY,
    KeyValueStore,
    load_value,
    save_value,
)

HISTORY_LIMIT = 5

_logger = logging.getLogger(__name__)


@dataclass
class HistoryStore:
    """Newest-first log of archived sessions."""

    store: KeyValueStore
    notifier: Notifier
    limit: int = HISTORY_LIMIT
    _sessions: list[HistorySession] = field(init=False, default_factory=list)

    def hydrate(self) -> None:
        """Load stored sessions, dropping entries that fail validation."""
        raw = load_value(self.store, HISTORY_KEY)
        if not isinstance(raw, list):
            if raw is not None:
                _logger.warning("Ignoring invalid stored history")
            self._sessions = []
            return
        sessions: list[HistorySession] = []
        for entry in raw:
            try:
                sessions.append(HistoryRecord.model_validate(entry).to_session())
            except ValidationError:
                _logger.warning("Dropping invalid history entry", exc_info=True)
        self._sessions = sessions[: self.limit]

    def append(self, session: HistorySession) -> None:
        """Prepend a session and evict the oldest beyond the limit."""
        self._sessions = [session, *self._sessions][: self.limit]
        _logger.info("History appended: size=%s", len(self._sessions))
        self._persist()

    def list(self) -> list[HistorySession]:
        return list(self._sessions)

    def latest(self) -> HistorySession | None:
        return self._sessions[0] if self._sessions else None

    def get(self, index: int) -> HistorySession | None:
        if 0 <= index < len(self._sessions):
            return self._sessions[index]
        return None

    def clear(self) -> None:
        self._sessions = []
        self._persist()

    def _persist(self) -> None:
        payload = [
            HistoryRecord.from_session(session).model_dump(mode="json")
            for session in self._sessions
        ]
        save_value(
            self.store,
            HISTORY_KEY,
            payload,
            self.notifier,
            "Could not save session to history.",
        )
