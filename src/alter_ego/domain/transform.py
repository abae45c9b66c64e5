"""Models for the image transform backend."""

from pydantic import BaseModel, ConfigDict, Field


class TransformRequest(BaseModel):
    """JSON body sent to the transform backend."""

    model_config = ConfigDict(populate_by_name=True)

    image_data_url: str = Field(alias="imageDataUrl")
    prompt: str
    caption: str


class TransformResponse(BaseModel):
    """JSON body returned by the transform backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = False
    image_data_url: str | None = Field(default=None, alias="imageDataUrl")
    error: str | None = None
