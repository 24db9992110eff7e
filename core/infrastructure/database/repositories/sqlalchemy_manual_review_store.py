"""
SQLAlchemy Manual Review Store Implementation.

Implements IManualReviewStore using SQLAlchemy (PostgreSQL or SQLite).
"""
from datetime import timezone
from typing import List
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import IManualReviewStore
from core.infrastructure.database.models import FailedOrderModel
from orchestration.models import FailedOrder, ManualReviewReason


logger = logging.getLogger(__name__)


class SQLAlchemyManualReviewStore(IManualReviewStore):
    """
    SQLAlchemy implementation of IManualReviewStore.

    Each call runs in its own session and transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize store with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def record(self, failed_order: FailedOrder) -> None:
        """
        Insert a failed order.

        Args:
            failed_order: Failed order record
        """
        async with self.session_factory() as session:
            async with session.begin():
                session.add(self._to_model(failed_order))

        logger.info(
            f"[{failed_order.correlation_id}] ✅ Saved {failed_order.event_name} "
            f"for manual review (reason: {failed_order.reason.value})"
        )

    async def list_recent(self, limit: int = 100) -> List[FailedOrder]:
        """
        List the most recent failed orders, newest first.

        Args:
            limit: Maximum number of records to return
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(FailedOrderModel)
                .order_by(FailedOrderModel.failed_at.desc(), FailedOrderModel.id.desc())
                .limit(limit)
            )
            return [self._to_entity(model) for model in result.scalars().all()]

    @staticmethod
    def _to_model(failed_order: FailedOrder) -> FailedOrderModel:
        return FailedOrderModel(
            event_name=failed_order.event_name,
            payload=failed_order.payload,
            occurrences=failed_order.occurrences,
            reason=failed_order.reason.value,
            status_code=failed_order.status_code,
            error_message=failed_order.error_message,
            correlation_id=failed_order.correlation_id,
            extra=failed_order.metadata,
            failed_at=failed_order.failed_at,
        )

    @staticmethod
    def _to_entity(model: FailedOrderModel) -> FailedOrder:
        failed_at = model.failed_at
        # SQLite hands back naive datetimes
        if failed_at.tzinfo is None:
            failed_at = failed_at.replace(tzinfo=timezone.utc)

        return FailedOrder(
            event_name=model.event_name,
            payload=dict(model.payload or {}),
            occurrences=model.occurrences,
            reason=ManualReviewReason(model.reason),
            failed_at=failed_at,
            status_code=model.status_code,
            error_message=model.error_message,
            correlation_id=model.correlation_id,
            metadata=dict(model.extra or {}),
        )
