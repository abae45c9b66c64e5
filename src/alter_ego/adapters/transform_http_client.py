"""HTTP client for the image transform backend."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from alter_ego.domain.transform import TransformRequest, TransformResponse
from alter_ego.services.transform import TransformClient, TransformError


@dataclass
class HttpxTransformClient(TransformClient):
    """HTTPX-backed transform client."""

    endpoint: str
    timeout: float
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, endpoint: str, timeout: float) -> "HttpxTransformClient":
        """Create a transform client with a managed httpx session."""
        return cls(endpoint=endpoint, timeout=timeout, http_client=httpx.AsyncClient())

    async def transform(
        self, *, source_image: str, prompt: str, style_label: str
    ) -> str:
        """Post the source image and prompt, returning the styled data URL."""
        request = TransformRequest(
            image_data_url=source_image, prompt=prompt, caption=style_label
        )
        response = await self.http_client.post(
            self.endpoint,
            json=request.model_dump(by_alias=True),
            timeout=self.timeout,
        )
        result = _parse_response(response)
        if response.is_error:
            raise TransformError(
                result.error or f"Request failed with status {response.status_code}"
            )
        if not result.success or not result.image_data_url:
            raise TransformError(
                result.error or "The backend service did not return a valid image."
            )
        return result.image_data_url

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _parse_response(response: httpx.Response) -> TransformResponse:
    try:
        return TransformResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return TransformResponse()
