"""Tests for RedisStreamConsumer (Redis client mocked)."""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from core.errors import QueueConnectionError
from core.infrastructure.bus import redis_stream_consumer
from core.infrastructure.bus.redis_stream_consumer import RedisStreamConsumer
from orchestration.bus import QueueMessage


STREAM = "orders:test"
GROUP = "orders:test:group"


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.xreadgroup.return_value = []
    return client


def make_consumer(**kwargs) -> RedisStreamConsumer:
    return RedisStreamConsumer(
        redis_url="redis://redis.test:6379/0",
        stream_name=STREAM,
        consumer_group=GROUP,
        consumer_name="worker-a",
        read_count=2,
        **kwargs,
    )


def entries(*pairs):
    return [[STREAM, [(msg_id, fields) for msg_id, fields in pairs]]]


@pytest.mark.asyncio
async def test_connect_creates_group(redis_client):
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()

    redis_client.ping.assert_awaited_once()
    redis_client.xgroup_create.assert_awaited_once_with(
        name=STREAM, groupname=GROUP, id="0", mkstream=True
    )
    assert consumer.is_connected


@pytest.mark.asyncio
async def test_connect_tolerates_existing_group(redis_client):
    redis_client.xgroup_create.side_effect = ResponseError(
        "BUSYGROUP Consumer Group name already exists"
    )
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()

    assert consumer.is_connected


@pytest.mark.asyncio
async def test_connect_failure_raises_queue_connection_error(redis_client):
    redis_client.ping.side_effect = RedisConnectionError("connection refused")
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        with pytest.raises(QueueConnectionError):
            await consumer.connect()

    redis_client.aclose.assert_awaited_once()
    assert not consumer.is_connected


@pytest.mark.asyncio
async def test_receive_no_wait_buffers_and_drains(redis_client):
    redis_client.xreadgroup.side_effect = [
        entries(
            ("1-0", {"body": "first", "correlation_id": "c-1"}),
            ("2-0", {"body": "second"}),
        ),
        entries(("3-0", {"body": "third", "correlation_id": "c-3"})),
        [],
    ]
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()
        received = []
        while (message := await consumer.receive_no_wait()) is not None:
            received.append(message)

    assert received == [
        QueueMessage("1-0", "first", "c-1"),
        QueueMessage("2-0", "second", None),
        QueueMessage("3-0", "third", "c-3"),
    ]
    assert redis_client.xreadgroup.await_count == 3
    kwargs = redis_client.xreadgroup.call_args.kwargs
    assert kwargs == {
        "groupname": GROUP,
        "consumername": "worker-a",
        "streams": {STREAM: ">"},
        "count": 2,
        "noack": True,
    }


@pytest.mark.asyncio
async def test_receive_returns_none_when_stream_empty(redis_client):
    redis_client.xreadgroup.return_value = None
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()
        assert await consumer.receive_no_wait() is None


@pytest.mark.asyncio
async def test_receive_wraps_transport_errors(redis_client):
    redis_client.xreadgroup.side_effect = RedisConnectionError("connection reset")
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()
        with pytest.raises(QueueConnectionError):
            await consumer.receive_no_wait()


@pytest.mark.asyncio
async def test_receive_without_connection_raises():
    with pytest.raises(QueueConnectionError):
        await make_consumer().receive_no_wait()


@pytest.mark.asyncio
async def test_acknowledge_after_handling_sends_xack(redis_client):
    redis_client.xreadgroup.return_value = entries(("7-0", {"body": "x"}))
    consumer = make_consumer(acknowledge_on_receive=False)

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()
        message = await consumer.receive_no_wait()
        await consumer.acknowledge(message)

    assert redis_client.xreadgroup.call_args.kwargs["noack"] is False
    redis_client.xack.assert_awaited_once_with(STREAM, GROUP, "7-0")


@pytest.mark.asyncio
async def test_acknowledge_is_noop_when_acknowledged_on_receive(redis_client):
    consumer = make_consumer()

    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        await consumer.connect()
        await consumer.acknowledge(QueueMessage("1-0", "x"))

    redis_client.xack.assert_not_awaited()


@pytest.mark.asyncio
async def test_context_manager_disconnects(redis_client):
    with patch.object(redis_stream_consumer.aioredis, "from_url", return_value=redis_client):
        async with make_consumer() as consumer:
            assert consumer.is_connected

    assert not consumer.is_connected
    redis_client.aclose.assert_awaited_once()
