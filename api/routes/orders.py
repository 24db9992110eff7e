"""
Order endpoints.

Manual trigger for new orders and the manual-review listing.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
import logging

from api.dependencies import get_manual_review_store, get_publisher
from orchestration.events import EventName
from orchestration.models import LemonadeRequest


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# MANUAL TRIGGER
# =============================================================================

@router.post(
    "/lemonade",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a lemonade order",
    description="Publish a MAKE_LEMONADE event; the worker picks it up on its next drain"
)
async def make_lemonade(
    request: LemonadeRequest,
    publisher=Depends(get_publisher)
):
    """
    Start the lemonade -> pizza -> bill workflow.

    **Returns:**
    - 202 once the event is on the queue
    - 503 if the queue did not accept the event
    """
    published = await publisher.publish(EventName.MAKE_LEMONADE.value, request)

    if not published:
        logger.error(f"Failed to publish {EventName.MAKE_LEMONADE.value}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Order queue unavailable, try again later"
        )

    logger.info(f"🍋 Lemonade order queued (sugarSpoons={request.sugar_spoons})")
    return {
        "status": "accepted",
        "event_name": EventName.MAKE_LEMONADE.value,
        "occurrences": 1,
    }


# =============================================================================
# MANUAL REVIEW
# =============================================================================

@router.get(
    "/manual-review",
    status_code=status.HTTP_200_OK,
    summary="List orders waiting for manual review",
)
async def list_manual_review(
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of records to return"),
    store=Depends(get_manual_review_store)
):
    """
    List failed orders, newest first.

    **Query Parameters:**
    - `limit`: Maximum records to return (1-1000, default: 100)
    """
    records = await store.list_recent(limit)

    return {
        "count": len(records),
        "limit": limit,
        "orders": [
            {
                "event_name": record.event_name,
                "payload": record.payload,
                "occurrences": record.occurrences,
                "reason": record.reason.value,
                "status_code": record.status_code,
                "error_message": record.error_message,
                "correlation_id": record.correlation_id,
                "failed_at": record.failed_at.isoformat(),
            }
            for record in records
        ]
    }
