"""Per-style generation results."""

from dataclasses import dataclass
from enum import StrEnum


class ImageStatus(StrEnum):
    """Lifecycle of a single generated image."""

    PENDING = "pending"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class PendingImage:
    """A result that has not resolved yet."""

    caption: str

    @property
    def status(self) -> ImageStatus:
        return ImageStatus.PENDING


@dataclass(frozen=True)
class DoneImage:
    """A successfully generated image."""

    caption: str
    url: str

    @property
    def status(self) -> ImageStatus:
        return ImageStatus.DONE


@dataclass(frozen=True)
class ErrorImage:
    """A generation that failed with a message."""

    caption: str
    error: str

    @property
    def status(self) -> ImageStatus:
        return ImageStatus.ERROR


GeneratedImage = PendingImage | DoneImage | ErrorImage


def is_terminal(image: GeneratedImage) -> bool:
    """Return True once an image has either succeeded or failed."""
    return not isinstance(image, PendingImage)
