"""
Weather endpoints.

Thin proxy over the kitchen service's temperature conversion.
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from api.dependencies import get_kitchen_client


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/kelvin/{celsius}",
    status_code=status.HTTP_200_OK,
    summary="Convert Celsius to Kelvin",
)
async def get_kelvin(celsius: float, kitchen=Depends(get_kitchen_client)):
    """Convert a temperature through the remote service; 502 if it fails."""
    result = await kitchen.get_kelvin_temperature(celsius)

    if not result.is_successful:
        logger.error(f"Kelvin conversion failed: {result.error_message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=result.error_message or "Remote service failed"
        )

    return {"celsius": celsius, "kelvin": result.response_body}
