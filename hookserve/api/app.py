"""Application factory for the hookserve Falcon ASGI application.

``create_app()`` wires the ingestion endpoint, the health probes, the error
handlers and the consumer lifecycle around one ``DispatchQueue``.

Usage
-----
Create an app with default configuration::

    app = create_app()

Create an app with a custom configuration and event handler::

    from hookserve.api.app import AppDependencies, create_app

    deps = AppDependencies(config=config, handler=my_handler)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from hookserve.api.errors import register_error_handlers
from hookserve.api.health.resources import HealthResource, ReadyResource
from hookserve.api.middleware import ConsumerLifecycle
from hookserve.api.webhook import WebhookDependencies, WebhookSink
from hookserve.config import HookserveConfig
from hookserve.dispatch.consumer import LogEventHandler
from hookserve.dispatch.queue import DispatchQueue
from hookserve.webhook.extraction import extractor_for
from hookserve.webhook.observability import DeliveryEventLogger

if typ.TYPE_CHECKING:
    from hookserve.dispatch.consumer import EventHandler

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    config
        Server configuration. Defaults to ``HookserveConfig()``.
    queue
        Dispatch queue; built from ``config`` when ``None``.
    handler
        Consumer handler; defaults to ``LogEventHandler``.
    event_logger
        Delivery event logger shared by the endpoint and the queue.

    """

    config: HookserveConfig = dc.field(default_factory=HookserveConfig)
    queue: DispatchQueue | None = None
    handler: EventHandler | None = None
    event_logger: DeliveryEventLogger | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies; defaults are used for anything
        left unset.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    config = deps.config
    event_logger = deps.event_logger or DeliveryEventLogger()
    queue = deps.queue or DispatchQueue(
        config.queue_capacity,
        max_pending=config.max_pending,
        event_logger=event_logger,
    )
    handler = deps.handler or LogEventHandler(event_logger)

    lifecycle = ConsumerLifecycle(
        queue, handler, consumer_count=config.consumer_count
    )
    app = falcon.asgi.App(middleware=[lifecycle])  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(queue))

    extractor = extractor_for(
        ignore_tags=config.ignore_tags,
        pull_request_actions=config.pull_request_actions,
    )
    app.add_sink(
        WebhookSink(
            WebhookDependencies(
                config=config,
                extractor=extractor,
                queue=queue,
                event_logger=event_logger,
            )
        )
    )

    register_error_handlers(app)
    return app
