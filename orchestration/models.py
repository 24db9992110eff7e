"""Orchestration models - FulfillmentResult, kitchen requests/responses, FailedOrder."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_PIZZA_NAME = "Margherita"


class LemonadeRequest(BaseModel):
    """Request body for the make-lemonade endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    sugar_spoons: int = Field(..., alias="sugarSpoons")


class LemonadeResponse(BaseModel):
    """Response body of the make-lemonade endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    is_successful: bool = Field(True, alias="isSuccessful")
    # The kitchen service spells it "secretIngridient"
    secret_ingredient: str = Field(
        ...,
        alias="secretIngredient",
        validation_alias=AliasChoices("secretIngredient", "secretIngridient"),
    )


class PizzaRequest(BaseModel):
    """Request body for the make-pizza endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: str
    ingredients: list[str]

    @classmethod
    def with_secret_ingredient(cls, name: str, ingredient: str) -> "PizzaRequest":
        return cls(name=name, ingredients=[ingredient])


class PizzaResponse(BaseModel):
    """Response body of the make-pizza endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    is_successful: bool = Field(True, alias="isSuccessful")


@dataclass(frozen=True)
class FulfillmentResult(Generic[T]):
    """Verdict of a call to the kitchen API.

    Exactly one of three states holds: success, retryable failure or
    non-retryable failure. Build it through ``success`` / ``failure``.
    """

    is_successful: bool
    is_eligible_for_retry: bool = False
    error_message: str | None = None
    status_code: int | None = None
    response_body: T | None = None

    @classmethod
    def success(cls, response_body: T, status_code: int = 200) -> "FulfillmentResult[T]":
        return cls(
            is_successful=True,
            is_eligible_for_retry=False,
            status_code=status_code,
            response_body=response_body,
        )

    @classmethod
    def failure(
        cls,
        is_eligible_for_retry: bool,
        error_message: str,
        status_code: int | None = None,
    ) -> "FulfillmentResult[T]":
        return cls(
            is_successful=False,
            is_eligible_for_retry=is_eligible_for_retry,
            error_message=error_message,
            status_code=status_code,
        )

    @property
    def is_retryable_failure(self) -> bool:
        return not self.is_successful and self.is_eligible_for_retry


class ManualReviewReason(str, Enum):
    """Why an order chain was handed off for manual review."""

    REJECTED = "rejected"
    PUBLISH_FAILED = "publish_failed"
    RETRIES_EXHAUSTED = "retries_exhausted"


@dataclass
class FailedOrder:
    """Order event that left the automated workflow."""

    event_name: str
    payload: dict[str, Any]
    occurrences: int
    reason: ManualReviewReason
    failed_at: datetime
    status_code: int | None = None
    error_message: str | None = None
    correlation_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class OrchestrationOutcome(str, Enum):
    """Terminal state reached by handling a single queue message."""

    ADVANCED = "advanced"
    RETRIED = "retried"
    COMPLETED = "completed"
    MANUAL_REVIEW = "manual_review"
    PUBLISH_FAILED = "publish_failed"
    DROPPED_EXHAUSTED = "dropped_exhausted"
    DROPPED_UNKNOWN = "dropped_unknown"
    DROPPED_MALFORMED = "dropped_malformed"
    FAILED = "failed"
