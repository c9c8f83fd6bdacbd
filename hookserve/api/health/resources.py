"""Health probe resources for liveness and readiness checks.

Usage
-----
Register health endpoints on the Falcon app::

    from hookserve.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(queue))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookserve.dispatch.queue import DispatchQueue

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reporting dispatch queue pressure.

    Always responds with HTTP 200; the queue figures let operators spot
    consumers that have fallen behind before events start being dropped.

    """

    def __init__(self, queue: DispatchQueue) -> None:
        """Report on *queue*."""
        self._queue = queue

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status and queue figures.

        """
        resp.media = {
            "status": "ready",
            "queue": {
                "capacity": self._queue.capacity,
                "depth": self._queue.depth,
                "pending": self._queue.pending,
                "dropped": self._queue.dropped,
            },
        }
        resp.status = HTTPStatus.OK
