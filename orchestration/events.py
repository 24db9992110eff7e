"""Orchestration events - OrderEvent envelope, EventName, and typed workflow steps."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.errors import PayloadDecodeError, UnknownEventError

from .models import LemonadeRequest, PizzaRequest


class EventName(str, Enum):
    """Routing keys understood by the orchestrator."""

    MAKE_LEMONADE = "MAKE_LEMONADE"
    MAKE_PIZZA = "MAKE_PIZZA"
    DELIVER_BILL = "DELIVER_BILL"

    @classmethod
    def parse(cls, value: str) -> "EventName":
        try:
            return cls(value)
        except ValueError:
            raise UnknownEventError(value) from None


class OrderEvent(BaseModel):
    """Envelope carried on the queue.

    Wire shape is exactly ``{"eventName", "payload", "occurrences"}``.
    Instances are immutable; ``next_attempt`` returns a new envelope.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    event_name: str = Field(..., alias="eventName")
    payload: dict[str, Any] = Field(default_factory=dict)
    occurrences: int = Field(0, ge=0)

    @field_validator("payload", mode="before")
    @classmethod
    def _null_payload_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @classmethod
    def decode(cls, raw: Union[str, bytes]) -> "OrderEvent":
        """Parse a raw queue body. Raises ``ValidationError`` when malformed."""
        return cls.model_validate_json(raw)

    @classmethod
    def build(cls, event_name: str, payload: Any = None, occurrences: int = 1) -> "OrderEvent":
        """Create an outgoing envelope; publishes default to one occurrence."""
        if isinstance(event_name, EventName):
            event_name = event_name.value
        return cls(event_name=event_name, payload=to_payload(payload), occurrences=occurrences)

    def encode(self) -> str:
        return self.model_dump_json(by_alias=True)

    def next_attempt(self) -> "OrderEvent":
        return self.model_copy(update={"occurrences": self.occurrences + 1})


def to_payload(payload: Any) -> dict[str, Any]:
    """Normalize a payload (pydantic model, mapping or None) into a JSON object."""
    if payload is None:
        return {}
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    if isinstance(payload, Mapping):
        # Round-trip through JSON so the envelope never holds live objects
        return json.loads(json.dumps(dict(payload)))
    raise TypeError(f"Payload must be a mapping or a pydantic model, got {type(payload).__name__}")


@dataclass(frozen=True)
class LemonadeStep:
    request: LemonadeRequest


@dataclass(frozen=True)
class PizzaStep:
    request: PizzaRequest


@dataclass(frozen=True)
class BillStep:
    pass


OrderStep = Union[LemonadeStep, PizzaStep, BillStep]


def decode_step(event: OrderEvent) -> OrderStep:
    """Decode the event payload into the step variant for its event name.

    Raises:
        UnknownEventError: event name outside the known vocabulary
        PayloadDecodeError: payload does not fit the step's request type
    """
    name = EventName.parse(event.event_name)

    try:
        if name is EventName.MAKE_LEMONADE:
            return LemonadeStep(request=LemonadeRequest.model_validate(event.payload))
        if name is EventName.MAKE_PIZZA:
            return PizzaStep(request=PizzaRequest.model_validate(event.payload))
    except ValidationError as exc:
        raise PayloadDecodeError(name.value, str(exc), event.payload) from exc

    return BillStep()
