"""Queue worker - periodically drains the order queue and hands each message to the orchestrator."""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from core.errors import QueueConnectionError

from .bus import MessageQueueProtocol, QueueMessage
from .models import OrchestrationOutcome
from .orchestrator import OrderOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class DrainReport:
    """Throughput of a single drain cycle."""

    received: int = 0
    processed: int = 0
    failed: int = 0
    duration_ms: int = 0
    outcomes: dict[str, int] = field(default_factory=dict)


class OrderEventWorker:
    """
    Background worker owning the queue consumer.

    Every ``drain_interval`` seconds it drains everything currently in the
    queue into one batch without waiting, then processes the batch message
    by message. A failing message never aborts the batch. A broken
    connection aborts the cycle; the worker waits ``reconnect_cooldown``
    seconds and connects again, indefinitely.
    """

    def __init__(
        self,
        queue: MessageQueueProtocol,
        orchestrator: OrderOrchestrator,
        drain_interval: float = 30.0,
        reconnect_cooldown: float = 10.0,
    ):
        """
        Initialize worker.

        Args:
            queue: Consumer side of the order queue
            orchestrator: Orchestrator handling each message
            drain_interval: Seconds between drain cycles
            reconnect_cooldown: Seconds to wait before reconnecting after a failure
        """
        self._queue = queue
        self._orchestrator = orchestrator
        self._drain_interval = drain_interval
        self._reconnect_cooldown = reconnect_cooldown
        self._stop_event = asyncio.Event()
        self.cycles = 0
        self.connection_failures = 0

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the worker to stop at the next suspension point."""
        self._stop_event.set()

    async def run(self) -> None:
        """Supervising loop: connect, drain on an interval, reconnect on failure."""
        logger.info(
            f"🚀 Starting order event worker "
            f"(interval={self._drain_interval}s, cooldown={self._reconnect_cooldown}s)"
        )
        try:
            while not self.stopping:
                try:
                    await self._queue.connect()
                    await self._interval_loop()
                except QueueConnectionError as e:
                    self.connection_failures += 1
                    logger.error(f"Queue connection failed: {e}")
                except Exception as e:
                    self.connection_failures += 1
                    logger.error(f"Worker error: {e}", exc_info=True)
                finally:
                    await self._safe_disconnect()

                if not self.stopping:
                    logger.info(f"Reconnecting in {self._reconnect_cooldown}s")
                    await self._sleep(self._reconnect_cooldown)
        finally:
            logger.info("✅ Order event worker stopped")

    async def _interval_loop(self) -> None:
        while not self.stopping:
            if await self._sleep(self._drain_interval):
                return
            await self.drain_once()

    async def drain_once(self) -> DrainReport:
        """
        Drain the queue once and process the resulting batch.

        Raises:
            QueueConnectionError: If the queue fails while draining
        """
        started = time.monotonic()
        batch = await self._drain()
        report = DrainReport(received=len(batch))
        self.cycles += 1

        if not batch:
            logger.info("No messages in queue at this interval")
            return report

        logger.info(f"📨 Processing {len(batch)} message(s)")

        for message in batch:
            if self.stopping:
                logger.warning(
                    f"Stop requested, {len(batch) - report.processed - report.failed} "
                    f"drained message(s) left unprocessed"
                )
                break
            outcome = await self._handle(message)
            if outcome is None:
                report.failed += 1
            else:
                report.processed += 1
                report.outcomes[outcome.value] = report.outcomes.get(outcome.value, 0) + 1

        report.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"Batch finished: received={report.received}, processed={report.processed}, "
            f"failed={report.failed}, duration_ms={report.duration_ms}, outcomes={report.outcomes}"
        )
        return report

    async def _drain(self) -> list[QueueMessage]:
        batch: list[QueueMessage] = []
        while True:
            message = await self._queue.receive_no_wait()
            if message is None:
                return batch
            batch.append(message)

    async def _handle(self, message: QueueMessage) -> OrchestrationOutcome | None:
        try:
            outcome = await self._orchestrator.orchestrate(message.body, message.correlation_id)
        except Exception as e:
            logger.error(
                f"Failed to process message {message.message_id} "
                f"(correlation_id={message.correlation_id}): {e}",
                exc_info=True,
            )
            return None

        if not self._queue.acknowledge_on_receive:
            await self._queue.acknowledge(message)
        return outcome

    async def _sleep(self, seconds: float) -> bool:
        """Wait for ``seconds`` or until stopped. Returns True if stopped."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def _safe_disconnect(self) -> None:
        try:
            await self._queue.disconnect()
        except Exception as e:
            logger.warning(f"Error while disconnecting from queue: {e}")
