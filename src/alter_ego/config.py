"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    device_id: str = "default"
    transform_backend: str = "http"
    transform_api_url: str = "http://localhost:5001/api/transform"
    transform_timeout_seconds: float = 120.0
    openai_api_key: str | None = None
    openai_image_model: str = "gpt-image-1"
    default_credits: int = 18
    credit_packs: str = (
        "com.alterego.credits30:30,"
        "com.alterego.credits100:100,"
        "com.alterego.credits500:500"
    )
    pro_sku: str = "com.alterego.pro.monthly"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_credit_packs(raw: str | None) -> dict[str, int]:
    """Parse credit pack SKUs from env as ``sku:amount`` pairs."""
    if raw is None:
        return {}
    packs: dict[str, int] = {}
    for chunk in raw.split(","):
        sku, _, amount = chunk.strip().partition(":")
        sku = sku.strip()
        amount = amount.strip()
        if not sku or not amount.isdigit():
            continue
        packs[sku] = int(amount)
    return packs
