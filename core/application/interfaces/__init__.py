"""Application layer interfaces."""
from abc import ABC, abstractmethod
from typing import Any, List

from orchestration.models import (
    FailedOrder,
    FulfillmentResult,
    LemonadeRequest,
    LemonadeResponse,
    PizzaRequest,
    PizzaResponse,
)


class IKitchenClient(ABC):
    """
    Interface for the remote fulfillment (kitchen) service.

    Verdict operations never raise for ordinary remote failures
    (timeouts, 4xx, 5xx); they map them into a FulfillmentResult that
    tells retryable from non-retryable outcomes.
    """

    @abstractmethod
    async def create_lemonade(
        self, request: LemonadeRequest
    ) -> FulfillmentResult[LemonadeResponse]:
        """
        Order a lemonade.

        Args:
            request: Lemonade request

        Returns:
            Verdict carrying the lemonade response on success
        """
        pass

    @abstractmethod
    async def create_pizza(self, request: PizzaRequest) -> FulfillmentResult[PizzaResponse]:
        """
        Order a pizza.

        Args:
            request: Pizza request

        Returns:
            Verdict carrying the pizza response on success
        """
        pass

    @abstractmethod
    async def deliver_bill(self) -> None:
        """Billing completion callback. Fire-and-forget."""
        pass


class IOrderPublisher(ABC):
    """
    Interface for putting order events on the queue.

    Used both for workflow-advance publishes and retry republishes.
    """

    @abstractmethod
    async def publish(self, event_name: str, payload: Any, occurrences: int = 1) -> bool:
        """
        Publish an order event.

        Args:
            event_name: Routing key of the event
            payload: Pydantic model or mapping
            occurrences: Attempt counter carried by the new message

        Returns:
            True if the broker accepted the message, False on any transport
            error. Never raises.
        """
        pass


class IManualReviewStore(ABC):
    """
    Interface for persisting orders that left the automated workflow.
    """

    @abstractmethod
    async def record(self, failed_order: FailedOrder) -> None:
        """
        Persist a failed order for manual review.

        Args:
            failed_order: Failed order record
        """
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> List[FailedOrder]:
        """
        List the most recent failed orders, newest first.

        Args:
            limit: Maximum number of records to return
        """
        pass


__all__ = ["IKitchenClient", "IOrderPublisher", "IManualReviewStore"]
