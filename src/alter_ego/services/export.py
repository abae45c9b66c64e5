"""Export helpers for generated images."""

import io
import logging
import re
import zipfile
from collections.abc import Mapping

from alter_ego.domain.images import DoneImage, GeneratedImage
from alter_ego.domain.styles import WILDCARD_CAPTION
from alter_ego.services.transform import parse_data_url

_WHITESPACE = re.compile(r"\s+")

_logger = logging.getLogger(__name__)


def download_filename(caption: str) -> str:
    """Return the download file name for a style caption."""
    slug = _WHITESPACE.sub("-", caption.strip().lower())
    return f"alterego-{slug}.png"


def share_caption(original_caption: str, image: GeneratedImage) -> str:
    """Name a shared image after the style the user actually got."""
    if original_caption == WILDCARD_CAPTION:
        return image.caption
    return original_caption


def build_archive(images: Mapping[str, GeneratedImage]) -> bytes:
    """Zip every finished image into an in-memory archive."""
    buffer = io.BytesIO()
    used: set[str] = set()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for original_caption, image in images.items():
            if not isinstance(image, DoneImage):
                continue
            try:
                _, content = parse_data_url(image.url)
            except ValueError:
                _logger.warning("Skipping non-data-url export: %s", original_caption)
                continue
            name = _unique_name(download_filename(image.caption), used)
            archive.writestr(name, content)
    return buffer.getvalue()


def _unique_name(name: str, used: set[str]) -> str:
    candidate = name
    stem = name.removesuffix(".png")
    counter = 2
    while candidate in used:
        candidate = f"{stem}-{counter}.png"
        counter += 1
    used.add(candidate)
    return candidate
