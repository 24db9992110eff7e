"""Orchestration layer - order event workflow driven by the queue."""

from typing import TYPE_CHECKING

from .bus import InMemoryOrderQueue, MessageQueueProtocol, QueueMessage
from .events import BillStep, EventName, LemonadeStep, OrderEvent, OrderStep, PizzaStep, decode_step
from .models import (
    FailedOrder,
    FulfillmentResult,
    LemonadeRequest,
    LemonadeResponse,
    ManualReviewReason,
    OrchestrationOutcome,
    PizzaRequest,
    PizzaResponse,
)
from .orchestrator import OrderOrchestrator
from .worker import DrainReport, OrderEventWorker

if TYPE_CHECKING:
    from core.application.interfaces import IKitchenClient, IManualReviewStore, IOrderPublisher

__all__ = [
    "BillStep",
    "DrainReport",
    "EventName",
    "FailedOrder",
    "FulfillmentResult",
    "InMemoryOrderQueue",
    "LemonadeRequest",
    "LemonadeResponse",
    "LemonadeStep",
    "ManualReviewReason",
    "MessageQueueProtocol",
    "OrchestrationOutcome",
    "OrderEvent",
    "OrderEventWorker",
    "OrderOrchestrator",
    "OrderStep",
    "PizzaRequest",
    "PizzaResponse",
    "PizzaStep",
    "QueueMessage",
    "create_default_worker",
    "decode_step",
]


def create_default_worker(
    kitchen_client: "IKitchenClient",
    manual_review: "IManualReviewStore",
    queue: InMemoryOrderQueue | None = None,
    publisher: "IOrderPublisher | None" = None,
    drain_interval: float = 30.0,
) -> OrderEventWorker:
    """Create a worker wired to an in-memory queue.

    The queue doubles as the publisher unless one is given, so the
    workflow loops back into the same process.

    Args:
        kitchen_client: Kitchen API client
        manual_review: Manual-review store
        queue: Queue to drain (new in-memory queue by default)
        publisher: Publisher for advances and retries (the queue by default)
        drain_interval: Seconds between drain cycles

    Returns:
        OrderEventWorker instance
    """
    if queue is None:
        queue = InMemoryOrderQueue()
    orchestrator = OrderOrchestrator(
        kitchen_client=kitchen_client,
        publisher=publisher if publisher is not None else queue,
        manual_review=manual_review,
    )
    return OrderEventWorker(queue=queue, orchestrator=orchestrator, drain_interval=drain_interval)
