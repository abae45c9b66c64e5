"""Tests for the transform service and data URL helpers."""

import asyncio

import pytest

from alter_ego.services.transform import (
    TransformService,
    build_prompt,
    detect_mime_type,
    parse_data_url,
    to_data_url,
)
from tests.conftest import SOURCE_IMAGE, FakeTransformClient, styled_url


def test_render_sends_prompt_for_style() -> None:
    client = FakeTransformClient()
    service = TransformService(client)

    result = asyncio.run(service.render(SOURCE_IMAGE, "Anime"))

    assert result == styled_url("Anime")
    assert client.calls == ["Anime"]
    assert client.prompts[0] == build_prompt("Anime")
    assert "in the style of Anime." in client.prompts[0]
    assert "photorealistic" in client.prompts[0]


def test_data_url_helpers() -> None:
    png = b"\x89PNG\r\n\x1a\nrest"
    url = to_data_url(png)

    assert url.startswith("data:image/png;base64,")
    assert parse_data_url(url) == ("image/png", png)
    assert detect_mime_type(b"\xff\xd8\xffdata") == "image/jpeg"
    assert detect_mime_type(b"RIFF1234WEBPdata") == "image/webp"


def test_parse_data_url_rejects_invalid_input() -> None:
    with pytest.raises(ValueError):
        parse_data_url("https://example.com/image.png")
    with pytest.raises(ValueError):
        parse_data_url("data:image/png;base64,!!!")
