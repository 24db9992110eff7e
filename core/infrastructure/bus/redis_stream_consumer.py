"""
Redis Streams Consumer for the order event queue.

Owns the worker's long-lived connection and hands out messages one at a
time without blocking, so the worker can drain the stream into batches.
"""
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError

from core.errors import QueueConnectionError
from core.settings import QueueSettings
from orchestration.bus import QueueMessage


logger = logging.getLogger(__name__)


class RedisStreamConsumer:
    """
    Consumes order events from Redis Streams.

    Features:
    - Consumer group, created on connect if missing
    - Non-blocking reads (XREADGROUP without BLOCK)
    - Acknowledge-on-receive (NOACK) by default, or explicit XACK after
      the message was handled

    Stream: orders:events:stream
    Consumer Group: orders:events:orchestrators
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_name: str = "orders:events:stream",
        consumer_group: str = "orders:events:orchestrators",
        consumer_name: str = "order-worker-1",
        read_count: int = 100,
        acknowledge_on_receive: bool = True,
    ):
        """
        Initialize Redis Stream Consumer.

        Args:
            redis_url: Redis connection URL
            stream_name: Redis Stream name
            consumer_group: Consumer group name
            consumer_name: Unique consumer name within the group
            read_count: Entries fetched per XREADGROUP call
            acknowledge_on_receive: Read with NOACK instead of XACK after handling
        """
        self.redis_url = redis_url
        self.stream_name = stream_name
        self.consumer_group = consumer_group
        self.consumer_name = consumer_name
        self.read_count = read_count
        self._acknowledge_on_receive = acknowledge_on_receive
        self._redis_client: Optional[aioredis.Redis] = None
        self._buffer: Deque[QueueMessage] = deque()

    @classmethod
    def from_settings(cls, settings: QueueSettings) -> "RedisStreamConsumer":
        return cls(
            redis_url=settings.redis_url,
            stream_name=settings.stream_name,
            consumer_group=settings.consumer_group,
            consumer_name=settings.consumer_name,
            read_count=settings.read_count,
            acknowledge_on_receive=settings.acknowledge_on_receive,
        )

    @property
    def acknowledge_on_receive(self) -> bool:
        return self._acknowledge_on_receive

    @property
    def is_connected(self) -> bool:
        return self._redis_client is not None

    async def connect(self) -> None:
        """
        Establish Redis connection and create consumer group.

        Raises:
            QueueConnectionError: If Redis is unreachable or rejects the group
        """
        if self._redis_client is not None:
            return

        client = aioredis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        try:
            await client.ping()
            logger.info(f"✅ Connected to Redis: {self.redis_url}")

            try:
                await client.xgroup_create(
                    name=self.stream_name,
                    groupname=self.consumer_group,
                    id="0",
                    mkstream=True,
                )
                logger.info(f"✅ Created consumer group: {self.consumer_group}")
            except ResponseError as e:
                if "BUSYGROUP" not in str(e):
                    raise
                logger.info(f"Consumer group {self.consumer_group} already exists")

        except (RedisError, OSError) as e:
            await client.aclose()
            raise QueueConnectionError(f"Failed to connect to Redis at {self.redis_url}: {e}") from e

        self._redis_client = client

    async def disconnect(self) -> None:
        """Close Redis connection and forget buffered messages."""
        self._buffer.clear()
        if self._redis_client is not None:
            client, self._redis_client = self._redis_client, None
            await client.aclose()
            logger.info("✅ Disconnected from Redis")

    async def receive_no_wait(self) -> Optional[QueueMessage]:
        """
        Return the next message already in the stream, or None.

        Raises:
            QueueConnectionError: If not connected or the read fails
        """
        if not self._buffer:
            self._buffer.extend(await self._read())
        return self._buffer.popleft() if self._buffer else None

    async def acknowledge(self, message: QueueMessage) -> None:
        """
        Acknowledge message processing (XACK).

        No-op when messages are acknowledged on receive.

        Raises:
            QueueConnectionError: If the XACK fails
        """
        if self._acknowledge_on_receive:
            return

        client = self._require_client()
        try:
            await client.xack(self.stream_name, self.consumer_group, message.message_id)
        except (RedisError, OSError) as e:
            raise QueueConnectionError(f"Failed to ACK message {message.message_id}: {e}") from e
        logger.debug(f"✅ Acknowledged message: {message.message_id}")

    async def _read(self) -> List[QueueMessage]:
        client = self._require_client()
        try:
            # No block argument: returns immediately when nothing is waiting
            response = await client.xreadgroup(
                groupname=self.consumer_group,
                consumername=self.consumer_name,
                streams={self.stream_name: ">"},
                count=self.read_count,
                noack=self._acknowledge_on_receive,
            )
        except (RedisError, OSError) as e:
            raise QueueConnectionError(f"Failed to read from Redis Stream: {e}") from e

        if not response:
            return []

        messages: List[QueueMessage] = []
        for _stream, entries in response:
            for msg_id, fields in entries:
                messages.append(self._to_message(msg_id, fields))
        return messages

    @staticmethod
    def _to_message(msg_id: str, fields: Optional[Dict[str, Any]]) -> QueueMessage:
        fields = fields or {}
        return QueueMessage(
            message_id=msg_id,
            body=fields.get("body", ""),
            correlation_id=fields.get("correlation_id"),
        )

    def _require_client(self) -> aioredis.Redis:
        if self._redis_client is None:
            raise QueueConnectionError("Redis Stream consumer is not connected")
        return self._redis_client

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()
