"""Message bus infrastructure - Redis Streams integration."""
from .redis_stream_publisher import RedisStreamPublisher
from .redis_stream_consumer import RedisStreamConsumer

__all__ = [
    "RedisStreamPublisher",
    "RedisStreamConsumer",
]
