"""
In-Memory Manual Review Store Implementation.

This is an in-memory implementation for local runs and tests.
"""
from typing import List
import logging

from core.application.interfaces import IManualReviewStore
from orchestration.models import FailedOrder


logger = logging.getLogger(__name__)


class InMemoryManualReviewStore(IManualReviewStore):
    """
    In-memory implementation of IManualReviewStore.

    Keeps failed orders in a list, oldest first.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._records: List[FailedOrder] = []
        logger.info("InMemoryManualReviewStore initialized (in-memory storage)")

    @property
    def records(self) -> List[FailedOrder]:
        return list(self._records)

    async def record(self, failed_order: FailedOrder) -> None:
        self._records.append(failed_order)
        logger.info(
            f"[{failed_order.correlation_id}] ✅ Saved {failed_order.event_name} "
            f"for manual review (reason: {failed_order.reason.value})"
        )

    async def list_recent(self, limit: int = 100) -> List[FailedOrder]:
        return list(reversed(self._records))[:limit]

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()
