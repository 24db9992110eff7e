"""
SQLAlchemy ORM Models.

Maps manual-review records to database tables.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Text, Index, JSON
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# FAILED ORDER MODEL
# =============================================================================

class FailedOrderModel(Base):
    """
    Failed order database model.

    One row per order event that left the automated workflow and waits
    for manual review.
    """

    __tablename__ = "failed_orders"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Event envelope
    event_name = Column(String(64), nullable=False, index=True)
    payload = Column(JSON, nullable=False, default=dict)
    occurrences = Column(Integer, nullable=False, default=0)

    # Failure details
    reason = Column(String(32), nullable=False, index=True)
    status_code = Column(Integer, nullable=True)
    error_message = Column(Text, nullable=True)
    correlation_id = Column(String(64), nullable=True)
    extra = Column("metadata", JSON, nullable=False, default=dict)

    # Timestamps
    failed_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Indexes
    __table_args__ = (
        Index("ix_failed_orders_failed_at", "failed_at"),
    )

    def __repr__(self):
        return (
            f"<FailedOrderModel(id={self.id}, event_name={self.event_name}, "
            f"reason={self.reason})>"
        )
