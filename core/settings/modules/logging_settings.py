from __future__ import annotations

from pydantic import Field, field_validator

from core.settings.base_settings import OrderServiceBaseSettings

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingSettings(OrderServiceBaseSettings):
    """Logging bootstrap settings."""

    level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in _LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LEVELS)}, got: {v!r}")
        return v
