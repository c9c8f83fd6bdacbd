"""hookserve HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application: the webhook ingestion endpoint, health probes, error
handlers and the consumer lifecycle.

Usage
-----
Create and run the application::

    from hookserve.api import create_app

    app = create_app()              # default configuration
    app = create_app(dependencies)  # custom configuration, queue or handler

"""

from hookserve.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
