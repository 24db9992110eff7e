"""
Redis Streams Publisher for the order event queue.

Publishes order events (fresh workflow steps and retries) to Redis Streams.
"""
import logging
import uuid
from typing import Any, Callable, Dict, Optional

import redis.asyncio as aioredis

from core.application.interfaces import IOrderPublisher
from core.settings import QueueSettings
from orchestration.events import OrderEvent


logger = logging.getLogger(__name__)


class RedisStreamPublisher(IOrderPublisher):
    """
    Publishes order events to Redis Streams.

    Every publish opens its own short-lived connection, so concurrent
    publishes never share transport state with each other or with the
    worker's long-lived consumer connection.

    Stream entry format: {
        "body": str,            # {"eventName", "payload", "occurrences"} as JSON
        "correlation_id": str,  # fresh per message, never propagated
    }
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_name: str = "orders:events:stream",
        max_length: int = 10000,
        correlation_id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize Redis Stream Publisher.

        Args:
            redis_url: Redis connection URL
            stream_name: Redis Stream name
            max_length: Approximate cap on stream length (XADD MAXLEN)
            correlation_id_factory: Source of correlation ids (uuid4 by default)
        """
        self.redis_url = redis_url
        self.stream_name = stream_name
        self.max_length = max_length
        self._new_correlation_id = correlation_id_factory or (lambda: str(uuid.uuid4()))

    @classmethod
    def from_settings(cls, settings: QueueSettings) -> "RedisStreamPublisher":
        return cls(
            redis_url=settings.redis_url,
            stream_name=settings.stream_name,
            max_length=settings.max_length,
        )

    async def publish(self, event_name: str, payload: Any, occurrences: int = 1) -> bool:
        """
        Publish an order event to the Redis Stream.

        Args:
            event_name: Routing key (MAKE_LEMONADE, MAKE_PIZZA, DELIVER_BILL)
            payload: Pydantic model or mapping
            occurrences: Attempt counter for the new message

        Returns:
            True on success, False on any error (never raises)

        Example:
            >>> publisher = RedisStreamPublisher()
            >>> ok = await publisher.publish("MAKE_LEMONADE", {"sugarSpoons": 2})
        """
        correlation_id = self._new_correlation_id()

        try:
            event = OrderEvent.build(event_name, payload, occurrences)
            message: Dict[str, Any] = {
                "body": event.encode(),
                "correlation_id": correlation_id,
            }

            client = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            try:
                msg_id = await client.xadd(
                    self.stream_name,
                    message,
                    maxlen=self.max_length,
                    approximate=True,
                )
            finally:
                await client.aclose()

        except Exception as e:
            logger.error(
                f"[{correlation_id}] Failed to publish {event_name} to Redis Stream: {e}",
                exc_info=True,
            )
            return False

        logger.info(
            f"[{correlation_id}] ✅ Published {event.event_name} "
            f"(occurrences={event.occurrences}, msg_id={msg_id})"
        )
        return True
