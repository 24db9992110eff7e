from __future__ import annotations

from pydantic import Field

from core.settings.base_settings import OrderServiceBaseSettings


class WorkerSettings(OrderServiceBaseSettings):
    """
    Background queue worker settings.
    Loaded from .env file with exact variable name matching.
    """

    enabled: bool = Field(True, alias="WORKER_ENABLED")
    drain_interval_seconds: float = Field(30.0, alias="WORKER_DRAIN_INTERVAL_SECONDS", ge=0)
    reconnect_cooldown_seconds: float = Field(10.0, alias="WORKER_RECONNECT_COOLDOWN_SECONDS", ge=0)
    max_occurrences: int = Field(3, alias="WORKER_MAX_OCCURRENCES", gt=0)
