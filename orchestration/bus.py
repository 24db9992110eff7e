"""Queue bus - QueueMessage, MessageQueueProtocol and InMemoryOrderQueue."""

import logging
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from .events import OrderEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueueMessage:
    """A message taken off the queue."""

    message_id: str
    body: str
    correlation_id: str | None = None


class MessageQueueProtocol(Protocol):
    """Consumer side of the queue, owned exclusively by the worker."""

    @property
    def acknowledge_on_receive(self) -> bool:
        """True when a message counts as consumed as soon as it is received."""
        ...

    async def connect(self) -> None:
        """Open the long-lived connection. Raises QueueConnectionError."""
        ...

    async def disconnect(self) -> None:
        """Close the connection."""
        ...

    async def receive_no_wait(self) -> QueueMessage | None:
        """Return the next available message or None without waiting."""
        ...

    async def acknowledge(self, message: QueueMessage) -> None:
        """Mark a message as handled (only used when not acknowledged on receive)."""
        ...


class InMemoryOrderQueue:
    """In-memory queue implementing both the consumer and publisher sides.

    Handy for local runs without a broker and for tests.
    """

    def __init__(
        self,
        acknowledge_on_receive: bool = True,
        correlation_id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._messages: deque[QueueMessage] = deque()
        self._pending: dict[str, QueueMessage] = {}
        self._acknowledge_on_receive = acknowledge_on_receive
        self._new_correlation_id = correlation_id_factory or (lambda: str(uuid.uuid4()))
        self._sequence = 0
        self.connected = False

    @property
    def acknowledge_on_receive(self) -> bool:
        return self._acknowledge_on_receive

    @property
    def pending(self) -> list[QueueMessage]:
        """Messages received but not yet acknowledged."""
        return list(self._pending.values())

    def __len__(self) -> int:
        return len(self._messages)

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    def put_raw(self, body: str, correlation_id: str | None = None) -> QueueMessage:
        """Enqueue a raw body as-is (no envelope validation)."""
        self._sequence += 1
        message = QueueMessage(
            message_id=f"{self._sequence}-0",
            body=body,
            correlation_id=correlation_id,
        )
        self._messages.append(message)
        return message

    async def publish(self, event_name: str, payload: Any, occurrences: int = 1) -> bool:
        try:
            event = OrderEvent.build(event_name, payload, occurrences)
        except (TypeError, ValueError) as exc:
            logger.error(f"Failed to build event {event_name}: {exc}")
            return False
        self.put_raw(event.encode(), correlation_id=self._new_correlation_id())
        return True

    async def receive_no_wait(self) -> QueueMessage | None:
        if not self._messages:
            return None
        message = self._messages.popleft()
        if not self._acknowledge_on_receive:
            self._pending[message.message_id] = message
        return message

    async def acknowledge(self, message: QueueMessage) -> None:
        self._pending.pop(message.message_id, None)
