"""
Kitchen API client.

Async aiohttp client for the remote fulfillment service (drinks, food,
billing). Remote failures are never raised; they come back as a
FulfillmentResult telling retryable from non-retryable outcomes.
"""
import asyncio
import logging
from typing import Any, Optional, Type, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from core.application.interfaces import IKitchenClient
from core.settings import KitchenApiSettings
from orchestration.models import (
    FulfillmentResult,
    LemonadeRequest,
    LemonadeResponse,
    PizzaRequest,
    PizzaResponse,
)


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Throttling and timeouts reported by the server are worth another attempt
RETRYABLE_STATUS_CODES = frozenset({408, 425, 429})

MAX_ERROR_BODY_CHARS = 500


def is_retryable_status(status: int) -> bool:
    """
    Classify a non-2xx HTTP status.

    Returns:
        True for 408/425/429 and any 5xx, False for the remaining 4xx
    """
    return status in RETRYABLE_STATUS_CODES or status >= 500


def classify_status(status: int) -> str:
    """Short label for a non-2xx status, used in error messages."""
    if status in RETRYABLE_STATUS_CODES:
        return "Throttled or timed out"
    if status >= 500:
        return "Server error"
    if 400 <= status < 500:
        return "Client error"
    return "Unexpected status"


class KitchenApiClient(IKitchenClient):
    """
    Kitchen API client.

    Endpoints:
    - POST {base}/api/drinks/make-lemonade
    - POST {base}/api/food/make-pizza
    - GET  {base}/api/getKelvinTemperature/{celsius}

    Usage:
        async with KitchenApiClient("http://localhost:3000") as kitchen:
            result = await kitchen.create_lemonade(LemonadeRequest(sugar_spoons=2))
    """

    def __init__(self, base_url: str = "http://localhost:3000", timeout_seconds: float = 30.0):
        """
        Initialize Kitchen API client.

        Args:
            base_url: Service root, without trailing slash
            timeout_seconds: Total timeout per request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: KitchenApiSettings) -> "KitchenApiClient":
        return cls(base_url=settings.base_url, timeout_seconds=settings.timeout_seconds)

    async def __aenter__(self) -> "KitchenApiClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    # =========================================================================
    # KITCHEN OPERATIONS
    # =========================================================================

    async def create_lemonade(
        self, request: LemonadeRequest
    ) -> FulfillmentResult[LemonadeResponse]:
        """Order a lemonade."""
        logger.info(f"🍋 Ordering lemonade (sugarSpoons={request.sugar_spoons})")
        return await self._post_model(
            "/api/drinks/make-lemonade", request, LemonadeResponse
        )

    async def create_pizza(self, request: PizzaRequest) -> FulfillmentResult[PizzaResponse]:
        """Order a pizza."""
        logger.info(f"🍕 Ordering pizza {request.name} (ingredients={request.ingredients})")
        return await self._post_model("/api/food/make-pizza", request, PizzaResponse)

    async def deliver_bill(self) -> None:
        """Billing completion callback. The kitchen has no billing endpoint."""
        logger.info("🧾 Bill delivered, order workflow complete")

    async def get_kelvin_temperature(self, celsius: float) -> FulfillmentResult[float]:
        """
        Convert a Celsius temperature using the kitchen's weather endpoint.

        Args:
            celsius: Temperature in degrees Celsius

        Returns:
            Verdict carrying the Kelvin temperature on success
        """
        result = await self._request("GET", f"/api/getKelvinTemperature/{float(celsius)!r}")
        if not result.is_successful:
            return result

        try:
            kelvin = float(str(result.response_body).strip())
        except ValueError:
            return FulfillmentResult.failure(
                is_eligible_for_retry=False,
                error_message=f"Undecodable temperature: {result.response_body!r}",
                status_code=result.status_code,
            )
        return FulfillmentResult.success(kelvin, status_code=result.status_code)

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _post_model(
        self, path: str, request: BaseModel, response_model: Type[ModelT]
    ) -> FulfillmentResult[ModelT]:
        result = await self._request(
            "POST", path, json=request.model_dump(mode="json", by_alias=True)
        )
        if not result.is_successful:
            return result

        try:
            body = response_model.model_validate_json(result.response_body or "")
        except ValidationError as e:
            logger.error(f"Undecodable response from {path}: {e.error_count()} error(s)")
            return FulfillmentResult.failure(
                is_eligible_for_retry=False,
                error_message=f"Undecodable response body: {e}",
                status_code=result.status_code,
            )

        if getattr(body, "is_successful", True) is False:
            logger.warning(f"Kitchen reported isSuccessful=false for {path}")
            return FulfillmentResult.failure(
                is_eligible_for_retry=False,
                error_message="Kitchen reported isSuccessful=false",
                status_code=result.status_code,
            )

        return FulfillmentResult.success(body, status_code=result.status_code)

    async def _request(
        self, method: str, path: str, json: Optional[Any] = None
    ) -> FulfillmentResult[str]:
        """
        Perform one HTTP request and classify the outcome.

        Returns:
            Success carrying the raw response text, or a classified failure
        """
        url = f"{self.base_url}{path}"
        try:
            session = await self._ensure_session()
            async with session.request(method, url, json=json) as response:
                text = await response.text()

                if 200 <= response.status < 300:
                    logger.debug(f"{method} {url} -> {response.status}")
                    return FulfillmentResult.success(text, status_code=response.status)

                retryable = is_retryable_status(response.status)
                log = logger.warning if retryable else logger.error
                log(f"{method} {url} -> {response.status} (retryable={retryable})")
                return FulfillmentResult.failure(
                    is_eligible_for_retry=retryable,
                    error_message=(
                        f"{classify_status(response.status)} ({response.status}): "
                        f"{text[:MAX_ERROR_BODY_CHARS]}"
                    ),
                    status_code=response.status,
                )

        except asyncio.TimeoutError:
            logger.warning(f"{method} {url} timed out after {self.timeout_seconds}s")
            return FulfillmentResult.failure(
                is_eligible_for_retry=True,
                error_message=f"Timeout after {self.timeout_seconds}s: {url}",
            )
        except aiohttp.ClientError as e:
            logger.warning(f"{method} {url} failed: {e}")
            return FulfillmentResult.failure(
                is_eligible_for_retry=True,
                error_message=f"Connection error: {e}",
            )
