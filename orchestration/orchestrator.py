"""Orchestrator - turns one raw queue message into at most one kitchen call and new queue messages."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Union

from pydantic import ValidationError

from core.errors import PayloadDecodeError, UnknownEventError

from .events import BillStep, EventName, LemonadeStep, OrderEvent, PizzaStep, decode_step
from .models import (
    DEFAULT_PIZZA_NAME,
    FailedOrder,
    FulfillmentResult,
    ManualReviewReason,
    OrchestrationOutcome,
    PizzaRequest,
)

if TYPE_CHECKING:
    from core.application.interfaces import IKitchenClient, IManualReviewStore, IOrderPublisher

DEFAULT_MAX_OCCURRENCES = 3


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderOrchestrator:
    """Routes order events through the lemonade -> pizza -> bill workflow.

    The workflow state lives entirely in the message (event name plus
    attempt counter); nothing is kept between messages.
    """

    def __init__(
        self,
        kitchen_client: "IKitchenClient",
        publisher: "IOrderPublisher",
        manual_review: "IManualReviewStore",
        max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize orchestrator.

        Args:
            kitchen_client: Remote fulfillment client
            publisher: Publisher used for workflow advances and retries
            manual_review: Store receiving orders that leave the workflow
            max_occurrences: Events arriving with this many occurrences are dropped
            logger: Logger to write to (module logger by default)
            clock: Source of timestamps for manual-review records
        """
        self._kitchen = kitchen_client
        self._publisher = publisher
        self._manual_review = manual_review
        self._max_occurrences = max_occurrences
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

    async def orchestrate(
        self, raw_message: Union[str, bytes], correlation_id: str | None = None
    ) -> OrchestrationOutcome:
        """Handle one raw queue message.

        Never raises: every failure is logged and reported through the
        returned outcome.

        Args:
            raw_message: Queue body (JSON envelope)
            correlation_id: Transport correlation id, used for logging only

        Returns:
            Terminal state reached for this message
        """
        try:
            return await self._orchestrate(raw_message, correlation_id)
        except Exception as exc:
            self._logger.error(
                f"[{correlation_id}] Unable to orchestrate event: {raw_message!r}, "
                f"{type(exc).__name__}: {exc}, inner: {exc.__cause__!r}",
                exc_info=True,
            )
            return OrchestrationOutcome.FAILED

    async def _orchestrate(
        self, raw_message: Union[str, bytes], correlation_id: str | None
    ) -> OrchestrationOutcome:
        try:
            envelope = OrderEvent.decode(raw_message)
        except ValidationError as exc:
            self._logger.error(
                f"[{correlation_id}] Unable to deserialize the event: {raw_message!r}, "
                f"{exc.error_count()} error(s): {exc}"
            )
            return OrchestrationOutcome.DROPPED_MALFORMED

        if envelope.occurrences >= self._max_occurrences:
            self._logger.warning(
                f"[{correlation_id}] Retry budget exhausted for {envelope.event_name} "
                f"(occurrences={envelope.occurrences}, max={self._max_occurrences}), dropping"
            )
            await self._hand_off(
                envelope, ManualReviewReason.RETRIES_EXHAUSTED, correlation_id,
                error_message="retry budget exhausted",
            )
            return OrchestrationOutcome.DROPPED_EXHAUSTED

        envelope = envelope.next_attempt()

        try:
            step = decode_step(envelope)
        except UnknownEventError as exc:
            self._logger.warning(f"[{correlation_id}] {exc}, dropping")
            return OrchestrationOutcome.DROPPED_UNKNOWN
        except PayloadDecodeError as exc:
            self._logger.error(
                f"[{correlation_id}] Unable to decode payload: {raw_message!r}, {exc.reason}"
            )
            return OrchestrationOutcome.DROPPED_MALFORMED

        self._logger.info(
            f"[{correlation_id}] Dispatching {envelope.event_name} "
            f"(attempt {envelope.occurrences}/{self._max_occurrences})"
        )

        if isinstance(step, LemonadeStep):
            return await self._handle_make_lemonade(envelope, step, correlation_id)
        if isinstance(step, PizzaStep):
            return await self._handle_make_pizza(envelope, step, correlation_id)
        if isinstance(step, BillStep):
            await self._kitchen.deliver_bill()
            return OrchestrationOutcome.COMPLETED

        raise TypeError(f"Unhandled step type: {type(step).__name__}")

    async def _handle_make_lemonade(
        self, envelope: OrderEvent, step: LemonadeStep, correlation_id: str | None
    ) -> OrchestrationOutcome:
        result = await self._kitchen.create_lemonade(step.request)

        if not result.is_successful:
            return await self._handle_failure(envelope, result, correlation_id)

        pizza = PizzaRequest.with_secret_ingredient(
            DEFAULT_PIZZA_NAME, result.response_body.secret_ingredient
        )
        return await self._advance(envelope, EventName.MAKE_PIZZA, pizza, correlation_id)

    async def _handle_make_pizza(
        self, envelope: OrderEvent, step: PizzaStep, correlation_id: str | None
    ) -> OrchestrationOutcome:
        result = await self._kitchen.create_pizza(step.request)

        if not result.is_successful:
            return await self._handle_failure(envelope, result, correlation_id)

        return await self._advance(envelope, EventName.DELIVER_BILL, {}, correlation_id)

    async def _advance(
        self,
        envelope: OrderEvent,
        next_event: EventName,
        payload: object,
        correlation_id: str | None,
    ) -> OrchestrationOutcome:
        if await self._publisher.publish(next_event.value, payload):
            self._logger.info(
                f"[{correlation_id}] {envelope.event_name} done, advanced to {next_event.value}"
            )
            return OrchestrationOutcome.ADVANCED

        # The chain ends here; the next step only exists in the review record
        self._logger.error(
            f"[{correlation_id}] Failed to publish {next_event.value} after {envelope.event_name}"
        )
        next_envelope = OrderEvent.build(next_event, payload)
        await self._hand_off(
            next_envelope, ManualReviewReason.PUBLISH_FAILED, correlation_id,
            error_message=f"publish of {next_event.value} failed",
        )
        return OrchestrationOutcome.PUBLISH_FAILED

    async def _handle_failure(
        self, envelope: OrderEvent, result: FulfillmentResult, correlation_id: str | None
    ) -> OrchestrationOutcome:
        if not result.is_retryable_failure:
            self._logger.warning(
                f"[{correlation_id}] {envelope.event_name} rejected "
                f"(status={result.status_code}): {result.error_message}"
            )
            await self._hand_off(
                envelope, ManualReviewReason.REJECTED, correlation_id,
                status_code=result.status_code, error_message=result.error_message,
            )
            return OrchestrationOutcome.MANUAL_REVIEW

        self._logger.warning(
            f"[{correlation_id}] {envelope.event_name} failed "
            f"(status={result.status_code}): {result.error_message}, "
            f"republishing with occurrences={envelope.occurrences}"
        )
        if await self._publisher.publish(
            envelope.event_name, envelope.payload, envelope.occurrences
        ):
            return OrchestrationOutcome.RETRIED

        self._logger.error(f"[{correlation_id}] Failed to republish {envelope.event_name}")
        await self._hand_off(
            envelope, ManualReviewReason.PUBLISH_FAILED, correlation_id,
            status_code=result.status_code, error_message=result.error_message,
        )
        return OrchestrationOutcome.PUBLISH_FAILED

    async def _hand_off(
        self,
        envelope: OrderEvent,
        reason: ManualReviewReason,
        correlation_id: str | None,
        status_code: int | None = None,
        error_message: str | None = None,
    ) -> None:
        failed_order = FailedOrder(
            event_name=envelope.event_name,
            payload=envelope.payload,
            occurrences=envelope.occurrences,
            reason=reason,
            failed_at=self._clock(),
            status_code=status_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self._manual_review.record(failed_order)
