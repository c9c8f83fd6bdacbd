"""Structured log events for the delivery lifecycle.

Every delivery outcome is emitted as one ``[event.type] key=value`` line so
log aggregators can count accepted, ignored and rejected deliveries. Secrets
and signatures are never included.

Usage
-----
>>> event_logger = DeliveryEventLogger()
>>> event_logger.log_ignored(delivery_id="abc", event_type="push", reason="tag")

"""

from __future__ import annotations

import enum
import typing as typ

from hookserve.logging import get_logger, log_debug, log_info, log_warning

if typ.TYPE_CHECKING:
    from .models import Event

logger = get_logger(__name__)


class DeliveryEventType(enum.StrEnum):
    """Structured log event types for webhook deliveries."""

    DELIVERY_ACCEPTED = "webhook.delivery.accepted"
    DELIVERY_IGNORED = "webhook.delivery.ignored"
    DELIVERY_REJECTED = "webhook.delivery.rejected"
    EVENT_DEFERRED = "dispatch.event.deferred"
    EVENT_DROPPED = "dispatch.event.dropped"
    EVENT_CONSUMED = "dispatch.event.consumed"


class DeliveryEventLogger:
    """Emit delivery lifecycle events via femtologging."""

    def log_accepted(self, *, delivery_id: str | None, event: Event) -> None:
        """Log a delivery that produced *event*."""
        log_info(
            logger,
            "[%s] delivery_id=%s event_type=%s repo_slug=%s branch=%s commit=%s",
            DeliveryEventType.DELIVERY_ACCEPTED,
            delivery_id,
            event.type,
            event.slug,
            event.branch,
            event.commit,
        )

    def log_ignored(
        self, *, delivery_id: str | None, event_type: str, reason: str
    ) -> None:
        """Log a delivery that was filtered out without error."""
        log_info(
            logger,
            "[%s] delivery_id=%s event_type=%s reason=%s",
            DeliveryEventType.DELIVERY_IGNORED,
            delivery_id,
            event_type,
            reason,
        )

    def log_rejected(
        self, *, delivery_id: str | None, status: int, error: BaseException
    ) -> None:
        """Log a delivery that ended in an error response.

        Parameters
        ----------
        delivery_id
            Value of ``X-GitHub-Delivery`` when the sender supplied one.
        status
            HTTP status returned to the sender.
        error
            The error that terminated the request.

        """
        log_warning(
            logger,
            "[%s] delivery_id=%s status=%d error_type=%s error_message=%s",
            DeliveryEventType.DELIVERY_REJECTED,
            delivery_id,
            status,
            type(error).__name__,
            str(error),
        )

    def log_deferred(self, *, event: Event, pending: int) -> None:
        """Log an event whose publish is waiting for queue space."""
        log_debug(
            logger,
            "[%s] repo_slug=%s commit=%s pending=%d",
            DeliveryEventType.EVENT_DEFERRED,
            event.slug,
            event.commit,
            pending,
        )

    def log_dropped(self, *, event: Event, dropped: int, max_pending: int) -> None:
        """Log an event discarded because too many publishes were waiting."""
        log_warning(
            logger,
            "[%s] repo_slug=%s commit=%s dropped_total=%d max_pending=%d",
            DeliveryEventType.EVENT_DROPPED,
            event.slug,
            event.commit,
            dropped,
            max_pending,
        )

    def log_consumed(self, *, event: Event) -> None:
        """Log the default consumer's one-line event summary."""
        log_info(
            logger,
            "[%s] %s %s %s %s",
            DeliveryEventType.EVENT_CONSUMED,
            event.owner,
            event.repo,
            event.branch,
            event.commit,
        )


__all__ = ["DeliveryEventLogger", "DeliveryEventType"]
