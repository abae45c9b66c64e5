"""Image transform service and data URL helpers."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Protocol

_DATA_URL_PATTERN = re.compile(r"^data:(image/[\w.+-]+);base64,(.*)$", re.DOTALL)

_logger = logging.getLogger(__name__)


class TransformError(RuntimeError):
    """Raised when the transform backend cannot produce an image."""


class TransformClient(Protocol):
    """Interface for a remote image-to-image backend."""

    async def transform(
        self, *, source_image: str, prompt: str, style_label: str
    ) -> str:
        """Return a handle to the styled image, raising on failure."""


def build_prompt(caption: str) -> str:
    """Build the transform prompt for a concrete style caption."""
    return (
        f"Reimagine the person in this photo in the style of {caption}. "
        "This includes clothing, hairstyle, photo quality, and the overall "
        "aesthetic of that style. The output must be a photorealistic image "
        "showing the person clearly."
    )


@dataclass
class TransformService:
    """Service that prompts the transform backend for one style."""

    client: TransformClient

    async def render(self, source_image: str, caption: str) -> str:
        """Render the source image in a style and return the result handle."""
        _logger.info("Transform requested: style=%s", caption)
        return await self.client.transform(
            source_image=source_image,
            prompt=build_prompt(caption),
            style_label=caption,
        )


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL."""
    resolved = mime_type or detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split an image data URL into its MIME type and decoded bytes."""
    match = _DATA_URL_PATTERN.match(data_url)
    if not match:
        raise ValueError("Invalid image data URL format.")
    mime_type, encoded = match.groups()
    try:
        return mime_type, base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError("Invalid base64 payload in image data URL.") from exc


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
