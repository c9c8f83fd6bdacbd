"""Ingestion endpoint for GitHub webhook deliveries.

``WebhookSink`` is installed as a Falcon sink so it sees every request that
no other route claims, which lets it apply the delivery checks in a fixed
order: method, path, event header, signature, payload. The first failing
check ends the request.

Usage
-----
Register the sink on the Falcon app::

    app.add_sink(WebhookSink(dependencies))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon
import msgspec

from hookserve.errors import MalformedRequestError, PayloadParseError
from hookserve.webhook.codec import encode
from hookserve.webhook.models import Event, EventType
from hookserve.webhook.signature import verify_signature

from .errors import DELIVERY_HEADER

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookserve.config import HookserveConfig
    from hookserve.dispatch.queue import DispatchQueue
    from hookserve.webhook.extraction import EventExtractor
    from hookserve.webhook.observability import DeliveryEventLogger

__all__ = ["EVENT_HEADER", "SIGNATURE_HEADER", "WebhookDependencies", "WebhookSink"]

EVENT_HEADER = "X-GitHub-Event"
SIGNATURE_HEADER = "X-Hub-Signature"


@dc.dataclass(frozen=True, slots=True)
class WebhookDependencies:
    """Collaborators for ``WebhookSink``.

    Attributes
    ----------
    config
        Read-only server configuration (path and secret).
    extractor
        Extractor carrying the tag and pull-request action filters.
    queue
        Queue receiving accepted events.
    event_logger
        Receiver for accepted and ignored deliveries.

    """

    config: HookserveConfig
    extractor: EventExtractor
    queue: DispatchQueue
    event_logger: DeliveryEventLogger


def _event_type(req: Request) -> EventType:
    raw = req.get_header(EVENT_HEADER)
    if not raw:
        raise MalformedRequestError.missing_event_type()
    try:
        return EventType(raw)
    except ValueError:
        raise MalformedRequestError.unknown_event_type(raw) from None


def _decode_payload(body: bytes) -> object:
    try:
        return msgspec.json.decode(body)
    except msgspec.DecodeError as exc:
        msg = f"body is not valid JSON: {exc}"
        raise PayloadParseError(msg) from exc


class WebhookSink:
    """Falcon sink that turns deliveries into published events."""

    def __init__(self, dependencies: WebhookDependencies) -> None:
        """Configure the sink with its collaborators."""
        self._config = dependencies.config
        self._extractor = dependencies.extractor
        self._queue = dependencies.queue
        self._event_logger = dependencies.event_logger

    async def __call__(self, req: Request, resp: Response, **_kwargs: str) -> None:
        """Handle one delivery.

        Responds 200 with the event's text form when an event is published,
        or 200 with an empty body when the delivery is ignored. Failures
        raise the ``HookserveError`` subclass mapped by
        ``hookserve.api.errors``.
        """
        if req.method != "POST":
            raise MalformedRequestError.method_not_allowed(req.method)
        if req.path != self._config.path:
            raise MalformedRequestError.not_found(req.path)
        event_type = _event_type(req)

        body = await req.stream.read()
        verify_signature(body, req.get_header(SIGNATURE_HEADER), self._config.secret)

        delivery_id = req.get_header(DELIVERY_HEADER)
        outcome = self._extractor.extract(event_type, _decode_payload(body))

        resp.status = falcon.HTTP_200
        resp.content_type = falcon.MEDIA_TEXT
        if not isinstance(outcome, Event):
            self._event_logger.log_ignored(
                delivery_id=delivery_id, event_type=event_type, reason=outcome.reason
            )
            resp.text = ""
            return

        self._queue.publish(outcome)
        self._event_logger.log_accepted(delivery_id=delivery_id, event=outcome)
        resp.text = encode(outcome)
