"""Audit event bus: the single publish point for audit events.

Call sites publish and move on. A background worker drains the queue into
the ``AuditLog``. ``publish`` never raises: a full queue drops the event with a
warning, and append failures are already swallowed by the log itself.

There is no transactionality between an action and its event: the action may
succeed and its event be dropped or fail to write.
"""

import asyncio
import logging
from typing import Protocol

from podcatalog.models.audit import AuditEvent
from podcatalog.observability.audit_log import AuditLog

logger = logging.getLogger(__name__)


class AuditPublisher(Protocol):
    """Anything catalog operations can hand audit events to."""

    def publish(self, event: AuditEvent) -> None: ...


class AuditEventBus:
    """asyncio queue + worker feeding ``AuditLog.append``."""

    def __init__(self, log: AuditLog, maxsize: int = 0) -> None:
        self._log = log
        self._queue: asyncio.Queue[AuditEvent] = asyncio.Queue(maxsize=maxsize)
        self._worker: asyncio.Task[None] | None = None
        self.published = 0
        self.dropped = 0
        self.written = 0
        self.failed = 0

    @property
    def log(self) -> AuditLog:
        return self._log

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def publish(self, event: AuditEvent) -> None:
        """Enqueue ``event``. Never raises."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Audit queue full; dropping %s event on %s", event.action, event.object,
            )
            return
        self.published += 1

    def start(self) -> None:
        """Start the worker task on the running loop (idempotent)."""
        if self.running:
            return
        self._worker = asyncio.create_task(self._run(), name="audit-event-bus")

    async def flush(self) -> None:
        """Wait until every event published so far has been handled."""
        if self.running:
            await self._queue.join()
            return
        while not self._queue.empty():
            event = self._queue.get_nowait()
            try:
                await self._handle(event)
            finally:
                self._queue.task_done()

    async def close(self) -> None:
        """Flush pending events, then stop the worker."""
        await self.flush()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._handle(event)
            finally:
                self._queue.task_done()

    async def _handle(self, event: AuditEvent) -> None:
        uri = await self._log.append(event)
        if uri is None:
            self.failed += 1
        else:
            self.written += 1
