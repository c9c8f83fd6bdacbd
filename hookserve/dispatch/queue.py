"""Bounded hand-off between request handlers and event consumers.

Request handlers call :meth:`DispatchQueue.publish`, which never suspends.
When the buffer is full the event is handed to a detached task that waits
for space, so the HTTP response completes independently of consumer speed.
The number of such waiting tasks is capped by ``max_pending``; beyond that
cap events are dropped and counted rather than accumulating without bound.

Events live only in memory: anything still queued when the process stops is
lost, and consumers get no acknowledgement or redelivery.
"""

from __future__ import annotations

import asyncio
import enum
import typing as typ

from hookserve.webhook.observability import DeliveryEventLogger

if typ.TYPE_CHECKING:
    from hookserve.webhook.models import Event


class PublishOutcome(enum.StrEnum):
    """What happened to a published event."""

    QUEUED = "queued"
    DEFERRED = "deferred"
    DROPPED = "dropped"


class DispatchQueue:
    """FIFO buffer of events with non-blocking, bounded publishing.

    Parameters
    ----------
    capacity
        Number of events buffered before publishes are deferred.
    max_pending
        Maximum number of deferred publishes waiting for space at once.
    event_logger
        Receiver for deferred and dropped events.

    """

    def __init__(
        self,
        capacity: int = 10,
        *,
        max_pending: int = 100,
        event_logger: DeliveryEventLogger | None = None,
    ) -> None:
        """Create an empty queue."""
        if capacity < 1:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=capacity)
        self._max_pending = max_pending
        self._pending: set[asyncio.Task[None]] = set()
        self._dropped = 0
        self._event_logger = event_logger or DeliveryEventLogger()

    @property
    def capacity(self) -> int:
        """Return the number of events the buffer holds."""
        return self._queue.maxsize

    @property
    def depth(self) -> int:
        """Return the number of buffered events."""
        return self._queue.qsize()

    @property
    def pending(self) -> int:
        """Return the number of deferred publishes still waiting."""
        return len(self._pending)

    @property
    def dropped(self) -> int:
        """Return how many events have been dropped since creation."""
        return self._dropped

    def publish(self, event: Event) -> PublishOutcome:
        """Hand *event* to consumers without suspending the caller.

        Deferred publishes run as tasks on the running event loop, so this
        must be called from within a coroutine when the buffer is full.
        """
        if not self._pending and not self._queue.full():
            self._queue.put_nowait(event)
            return PublishOutcome.QUEUED

        if len(self._pending) >= self._max_pending:
            self._dropped += 1
            self._event_logger.log_dropped(
                event=event, dropped=self._dropped, max_pending=self._max_pending
            )
            return PublishOutcome.DROPPED

        task = asyncio.get_running_loop().create_task(self._queue.put(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self._event_logger.log_deferred(event=event, pending=len(self._pending))
        return PublishOutcome.DEFERRED

    async def get(self) -> Event:
        """Wait for and return the oldest event."""
        return await self._queue.get()

    def get_nowait(self) -> Event:
        """Return the oldest event, raising ``asyncio.QueueEmpty`` if none."""
        return self._queue.get_nowait()

    def __aiter__(self) -> typ.AsyncIterator[Event]:
        """Iterate over events as they arrive, forever."""
        return self._iterate()

    async def _iterate(self) -> typ.AsyncIterator[Event]:
        while True:
            yield await self._queue.get()

    async def drain(self, timeout: float | None = None) -> int:
        """Wait for deferred publishes to reach the buffer.

        Publishes still waiting after *timeout* seconds are cancelled and
        their events lost.

        Returns
        -------
        int
            Number of deferred publishes that were cancelled.

        """
        if not self._pending:
            return 0
        _done, waiting = await asyncio.wait(tuple(self._pending), timeout=timeout)
        for task in waiting:
            task.cancel()
        return len(waiting)


__all__ = ["DispatchQueue", "PublishOutcome"]
