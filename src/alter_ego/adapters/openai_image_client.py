"""OpenAI Images API client for style transforms."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from alter_ego.services.transform import (
    TransformClient,
    TransformError,
    parse_data_url,
)

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


@dataclass
class OpenAIImageClient(TransformClient):
    """Transform client backed by the OpenAI image edit endpoint."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAIImageClient":
        """Create an OpenAI image client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def transform(
        self, *, source_image: str, prompt: str, style_label: str
    ) -> str:
        """Edit the source image with the prompt and return a PNG data URL."""
        try:
            mime_type, content = parse_data_url(source_image)
        except ValueError as exc:
            raise TransformError(str(exc)) from exc
        extension = _EXTENSIONS.get(mime_type, "png")
        response = await self.client.images.edit(
            model=self.model,
            image=(f"source.{extension}", content, mime_type),
            prompt=prompt,
        )
        encoded = response.data[0].b64_json if response.data else None
        if not encoded:
            raise TransformError(
                "The AI model did not return an image. The prompt may have been "
                "blocked."
            )
        return f"data:image/png;base64,{encoded}"

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
