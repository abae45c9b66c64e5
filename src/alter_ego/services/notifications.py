"""User-facing notification queue."""

from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum

NOTICE_LIMIT = 50


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A short message for the UI to surface as a toast."""

    message: str
    level: NoticeLevel


@dataclass
class Notifier:
    """Collects notices until the UI drains them.

    Only the newest ``NOTICE_LIMIT`` notices are kept, so an undrained queue
    in a long-running process stays bounded.
    """

    notices: deque[Notice] = field(
        default_factory=lambda: deque(maxlen=NOTICE_LIMIT)
    )

    def success(self, message: str) -> None:
        self.notices.append(Notice(message=message, level=NoticeLevel.SUCCESS))

    def error(self, message: str) -> None:
        self.notices.append(Notice(message=message, level=NoticeLevel.ERROR))

    def drain(self) -> list[Notice]:
        """Return pending notices and clear the queue."""
        drained = list(self.notices)
        self.notices.clear()
        return drained
