"""Consumers that read events off the dispatch queue."""

from __future__ import annotations

import typing as typ

from hookserve.logging import get_logger, log_exception
from hookserve.webhook.observability import DeliveryEventLogger

if typ.TYPE_CHECKING:
    from hookserve.webhook.models import Event

    from .queue import DispatchQueue

logger = get_logger(__name__)


class EventHandler(typ.Protocol):
    """Callable invoked once for every consumed event."""

    async def __call__(self, event: Event) -> None:
        """Handle one event."""
        ...


class LogEventHandler:
    """Default handler: log ``owner repo branch commit`` for each event."""

    def __init__(self, event_logger: DeliveryEventLogger | None = None) -> None:
        """Use *event_logger*, or a fresh ``DeliveryEventLogger``."""
        self._event_logger = event_logger or DeliveryEventLogger()

    async def __call__(self, event: Event) -> None:
        """Log the event summary."""
        self._event_logger.log_consumed(event=event)


async def consume(queue: DispatchQueue, handler: EventHandler) -> None:
    """Feed events from *queue* to *handler* until cancelled.

    A handler failure is logged and the event discarded; the loop then moves
    on to the next event.
    """
    async for event in queue:
        try:
            await handler(event)
        except Exception as exc:  # noqa: BLE001 - one bad event must not stop the consumer
            log_exception(
                logger,
                f"Event handler failed for {event.slug}@{event.commit}",
                exc,
            )


__all__ = ["EventHandler", "LogEventHandler", "consume"]
