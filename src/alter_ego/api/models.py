"""Request bodies for the HTTP API."""

from pydantic import BaseModel, Field


class UploadImageRequest(BaseModel):
    """Photo uploaded or captured by the user."""

    image_data_url: str = Field(min_length=1)


class StartBatchRequest(BaseModel):
    """Styles to generate; omitted means the current grid selection."""

    styles: list[str] | None = None


class FavoriteToggleRequest(BaseModel):
    image: str
    caption: str
    source_image: str


class PurchaseRequest(BaseModel):
    sku: str


class ProStatusRequest(BaseModel):
    is_unlimited: bool
