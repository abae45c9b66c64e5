"""Domain models for generation sessions."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from alter_ego.domain.images import GeneratedImage


class AppState(StrEnum):
    """Top-level lifecycle of the working session."""

    IDLE = "idle"
    IMAGE_UPLOADED = "image-uploaded"
    GENERATING = "generating"
    RESULTS_SHOWN = "results-shown"


@dataclass
class Session:
    """Working set owned by the orchestrator."""

    source_image: str
    selected_captions: list[str] = field(default_factory=list)
    images: dict[str, GeneratedImage] = field(default_factory=dict)
    restored: bool = False


@dataclass(frozen=True)
class HistorySession:
    """Archived snapshot of a completed session."""

    source_image: str
    images: Mapping[str, GeneratedImage]
    timestamp: datetime


@dataclass(frozen=True)
class FavoriteEntry:
    """A generated image the user marked as a favorite."""

    image: str
    caption: str
    source_image: str


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the orchestrator published to subscribers."""

    state: AppState
    source_image: str | None
    selected_captions: tuple[str, ...]
    images: Mapping[str, GeneratedImage]
    generating_index: int | None
    restored: bool
    credits: int
    is_unlimited: bool
