"""Tests for InMemoryOrderQueue."""

import json

import pytest

from orchestration.bus import InMemoryOrderQueue
from orchestration.models import PizzaRequest


@pytest.mark.asyncio
async def test_publish_then_receive_in_order():
    ids = iter(["c-1", "c-2"])
    queue = InMemoryOrderQueue(correlation_id_factory=lambda: next(ids))

    assert await queue.publish("MAKE_LEMONADE", {"sugarSpoons": 1}) is True
    assert await queue.publish("MAKE_PIZZA", PizzaRequest(name="Margherita", ingredients=["Ham"]), 2)

    first = await queue.receive_no_wait()
    second = await queue.receive_no_wait()

    assert first.message_id == "1-0"
    assert first.correlation_id == "c-1"
    assert json.loads(first.body) == {
        "eventName": "MAKE_LEMONADE",
        "payload": {"sugarSpoons": 1},
        "occurrences": 1,
    }
    assert json.loads(second.body)["occurrences"] == 2
    assert second.correlation_id == "c-2"
    assert await queue.receive_no_wait() is None


@pytest.mark.asyncio
async def test_publish_returns_false_for_unserializable_payload():
    queue = InMemoryOrderQueue()

    assert await queue.publish("MAKE_PIZZA", {"when": object()}) is False
    assert await queue.publish("MAKE_PIZZA", ["not", "a", "mapping"]) is False
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_pending_until_acknowledged():
    queue = InMemoryOrderQueue(acknowledge_on_receive=False)
    queue.put_raw("body")

    message = await queue.receive_no_wait()
    assert queue.pending == [message]

    await queue.acknowledge(message)
    assert queue.pending == []
