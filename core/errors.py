"""
Order pipeline exceptions.

Raised at the seams of the orchestration pipeline. None of these ever
escape the orchestrator or the queue worker; they are logged at the point
of detection or converted into a data-level action (republish / hand-off).
"""
from typing import Optional


class OrderPipelineError(Exception):
    """Base class for all order pipeline errors."""


class QueueConnectionError(OrderPipelineError):
    """
    Broker unreachable or protocol fault.

    Aborts the current drain cycle; the worker reconnects after a cooldown.
    """


class UnknownEventError(OrderPipelineError):
    """Event name is not part of the known vocabulary."""

    def __init__(self, event_name: str):
        super().__init__(f"Unknown event: {event_name}")
        self.event_name = event_name


class PayloadDecodeError(OrderPipelineError):
    """Payload could not be decoded into the request type of its event."""

    def __init__(self, event_name: str, reason: str, payload: Optional[dict] = None):
        super().__init__(f"Invalid payload for {event_name}: {reason}")
        self.event_name = event_name
        self.reason = reason
        self.payload = payload


__all__ = [
    "OrderPipelineError",
    "QueueConnectionError",
    "UnknownEventError",
    "PayloadDecodeError",
]
