"""Falcon error handlers for delivery errors.

Each handler maps one ``HookserveError`` subclass to its HTTP status and a
JSON body with ``title`` and ``description`` (and ``field`` for payload
errors), and records the rejection as a structured log event.

Usage
-----
Register the handlers on a Falcon app::

    from hookserve.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from hookserve.errors import (
    AuthenticationError,
    MalformedRequestError,
    PayloadParseError,
)
from hookserve.webhook.observability import DeliveryEventLogger

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "handle_authentication_error",
    "handle_malformed_request",
    "handle_payload_parse_error",
    "register_error_handlers",
]

DELIVERY_HEADER = "X-GitHub-Delivery"

_event_logger = DeliveryEventLogger()


def _reject(
    req: Request,
    resp: Response,
    ex: Exception,
    *,
    status: HTTPStatus,
    title: str,
) -> dict[str, str]:
    _event_logger.log_rejected(
        delivery_id=req.get_header(DELIVERY_HEADER), status=status, error=ex
    )
    resp.status = status
    return {"title": title, "description": str(ex)}


async def handle_malformed_request(
    req: Request,
    resp: Response,
    ex: MalformedRequestError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``MalformedRequestError`` to its 405, 404 or 400 response."""
    resp.media = _reject(req, resp, ex, status=ex.status, title=ex.status.phrase)
    if ex.status is HTTPStatus.METHOD_NOT_ALLOWED:
        resp.set_header("Allow", "POST")


async def handle_authentication_error(
    req: Request,
    resp: Response,
    ex: AuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationError`` to an HTTP 403 JSON response."""
    resp.media = _reject(
        req, resp, ex, status=HTTPStatus.FORBIDDEN, title="Forbidden"
    )


async def handle_payload_parse_error(
    req: Request,
    resp: Response,
    ex: PayloadParseError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PayloadParseError`` to an HTTP 500 JSON response.

    Parameters
    ----------
    req
        Falcon request, consulted for the delivery id.
    resp
        Falcon response whose status and media are set.
    ex
        The payload error carrying the reason and optional field path.
    _params
        URI template parameters (unused).

    """
    media = _reject(
        req,
        resp,
        ex,
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        title="Unable to parse payload",
    )
    media["description"] = ex.reason
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Install the delivery error handlers on *app*."""
    app.add_error_handler(MalformedRequestError, handle_malformed_request)
    app.add_error_handler(AuthenticationError, handle_authentication_error)
    app.add_error_handler(PayloadParseError, handle_payload_parse_error)
