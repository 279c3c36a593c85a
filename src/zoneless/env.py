from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

DEFAULT_TIMEOUT = 30.0
DEFAULT_WEBHOOK_TOLERANCE = 300


class Settings(BaseModel):
    """Typed client settings built from environment variables."""

    api_key: str
    base_url: str
    timeout: float = DEFAULT_TIMEOUT

    # Webhook verification
    webhook_secret: Optional[str] = None
    webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v:
            raise ValueError("Zoneless API key cannot be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("Zoneless API base URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("Zoneless API base URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("Zoneless API base URL must include a host")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @field_validator("webhook_tolerance")
    @classmethod
    def validate_webhook_tolerance(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Webhook tolerance cannot be negative")
        return v


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    api_key = os.environ.get("ZONELESS_API_KEY")
    base_url = os.environ.get("ZONELESS_BASE_URL")
    if not (api_key and base_url):
        raise ValueError("ZONELESS_API_KEY and ZONELESS_BASE_URL are required")
    return Settings(
        api_key=api_key,
        base_url=base_url,
        timeout=float(os.environ.get("ZONELESS_TIMEOUT", str(DEFAULT_TIMEOUT))),
        webhook_secret=os.environ.get("ZONELESS_WEBHOOK_SECRET") or None,
        webhook_tolerance=int(
            os.environ.get("ZONELESS_WEBHOOK_TOLERANCE", str(DEFAULT_WEBHOOK_TOLERANCE))
        ),
    )
