from __future__ import annotations

from pydantic import Field, field_validator

from core.settings.base_settings import OrderServiceBaseSettings


class QueueSettings(OrderServiceBaseSettings):
    """
    Redis Streams queue settings.
    Loaded from .env file with exact variable name matching.
    """

    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")
    stream_name: str = Field("orders:events:stream", alias="QUEUE_STREAM_NAME")
    consumer_group: str = Field("orders:events:orchestrators", alias="QUEUE_CONSUMER_GROUP")
    consumer_name: str = Field("order-worker-1", alias="QUEUE_CONSUMER_NAME")

    # Entries fetched per non-blocking XREADGROUP call while draining
    read_count: int = Field(100, alias="QUEUE_READ_COUNT", gt=0)
    max_length: int = Field(10000, alias="QUEUE_MAX_LENGTH", gt=0)

    # True: consumed the instant it is drained (XREADGROUP NOACK).
    # False: XACK after the orchestrator has handled it.
    acknowledge_on_receive: bool = Field(True, alias="QUEUE_ACKNOWLEDGE_ON_RECEIVE")

    @field_validator("stream_name", "consumer_group", "consumer_name")
    @classmethod
    def _strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v
