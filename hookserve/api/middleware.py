"""Lifespan middleware running the event consumers.

Consumers are started when the ASGI server sends ``lifespan.startup`` and
stopped on ``lifespan.shutdown``. Before they are cancelled, deferred
publishes get a bounded grace period to reach the queue.

Usage
-----
Register the middleware when creating the Falcon app::

    lifecycle = ConsumerLifecycle(queue, handler, consumer_count=1)
    app = falcon.asgi.App(middleware=[lifecycle])

"""

from __future__ import annotations

import asyncio
import contextlib
import typing as typ

from hookserve.dispatch.consumer import consume
from hookserve.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    from hookserve.dispatch.consumer import EventHandler
    from hookserve.dispatch.queue import DispatchQueue

__all__ = ["ConsumerLifecycle"]

logger = get_logger(__name__)

_DRAIN_TIMEOUT_SECONDS = 5.0


class ConsumerLifecycle:
    """Falcon middleware owning the consumer tasks.

    Parameters
    ----------
    queue
        Queue the consumers read from.
    handler
        Handler each consumer passes events to.
    consumer_count
        Number of concurrent consumer tasks.

    """

    def __init__(
        self,
        queue: DispatchQueue,
        handler: EventHandler,
        *,
        consumer_count: int = 1,
        drain_timeout: float = _DRAIN_TIMEOUT_SECONDS,
    ) -> None:
        """Initialise without starting any task."""
        self._queue = queue
        self._handler = handler
        self._consumer_count = consumer_count
        self._drain_timeout = drain_timeout
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def running(self) -> int:
        """Return the number of live consumer tasks."""
        return sum(1 for task in self._tasks if not task.done())

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Start the consumer tasks."""
        self._tasks = [
            asyncio.create_task(consume(self._queue, self._handler))
            for _ in range(self._consumer_count)
        ]
        log_info(logger, "Started %d event consumer(s)", self._consumer_count)

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Flush deferred publishes, then cancel the consumers."""
        abandoned = await self._queue.drain(timeout=self._drain_timeout)
        if abandoned:
            log_warning(
                logger,
                "Abandoned %d deferred event(s) at shutdown; %d still queued",
                abandoned,
                self._queue.depth,
            )
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks = []
