from __future__ import annotations

from pydantic import Field, field_validator

from core.settings.base_settings import OrderServiceBaseSettings


class KitchenApiSettings(OrderServiceBaseSettings):
    """
    Remote fulfillment (kitchen) API settings.
    Loaded from .env file with exact variable name matching.
    """

    base_url: str = Field("http://localhost:3000", alias="KITCHEN_API_URL")
    timeout_seconds: float = Field(30.0, alias="KITCHEN_API_TIMEOUT_SECONDS", gt=0)

    @field_validator("base_url")
    @classmethod
    def _check_scheme(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"KITCHEN_API_URL must start with http:// or https://, got: {v!r}")
        return v
