"""Persisted payload models for the key/value store."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from alter_ego.domain.images import DoneImage, ErrorImage, GeneratedImage, PendingImage
from alter_ego.domain.sessions import FavoriteEntry, HistorySession


class ImageRecord(BaseModel):
    """Stored form of a generated image."""

    status: Literal["pending", "done", "error"]
    caption: str
    url: str | None = None
    error: str | None = None

    @classmethod
    def from_image(cls, image: GeneratedImage) -> "ImageRecord":
        if isinstance(image, DoneImage):
            return cls(status="done", caption=image.caption, url=image.url)
        if isinstance(image, ErrorImage):
            return cls(status="error", caption=image.caption, error=image.error)
        return cls(status="pending", caption=image.caption)

    def to_image(self) -> GeneratedImage:
        """Rebuild the tagged variant, degrading malformed rows to errors."""
        if self.status == "done":
            if self.url:
                return DoneImage(caption=self.caption, url=self.url)
            return ErrorImage(caption=self.caption, error="Stored image is missing.")
        if self.status == "error":
            return ErrorImage(
                caption=self.caption,
                error=self.error or "An unknown error occurred.",
            )
        return PendingImage(caption=self.caption)


class HistoryRecord(BaseModel):
    """Stored form of an archived session."""

    source_image: str
    images: dict[str, ImageRecord]
    timestamp: datetime

    @classmethod
    def from_session(cls, session: HistorySession) -> "HistoryRecord":
        return cls(
            source_image=session.source_image,
            images={
                caption: ImageRecord.from_image(image)
                for caption, image in session.images.items()
            },
            timestamp=session.timestamp,
        )

    def to_session(self) -> HistorySession:
        return HistorySession(
            source_image=self.source_image,
            images={
                caption: record.to_image() for caption, record in self.images.items()
            },
            timestamp=self.timestamp,
        )


class FavoriteRecord(BaseModel):
    """Stored form of a favorite."""

    image: str
    caption: str
    source_image: str

    @classmethod
    def from_entry(cls, entry: FavoriteEntry) -> "FavoriteRecord":
        return cls(
            image=entry.image, caption=entry.caption, source_image=entry.source_image
        )

    def to_entry(self) -> FavoriteEntry:
        return FavoriteEntry(
            image=self.image, caption=self.caption, source_image=self.source_image
        )
