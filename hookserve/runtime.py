"""hookserve runtime entrypoint.

``create_app`` builds the Falcon ASGI application from ``HOOKSERVE_*``
environment variables (see :meth:`hookserve.config.HookserveConfig.from_env`)
and is the stable ``hookserve.runtime:create_app`` factory handed to
Granian. ``main`` configures logging and serves it.

Run the service directly with ``python -m hookserve.runtime`` or the
``hookserve`` console script.
"""

from __future__ import annotations

import typing as typ

from hookserve.config import HookserveConfig
from hookserve.errors import ConfigError
from hookserve.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "load_config", "main"]

logger = get_logger(__name__)


def load_config() -> HookserveConfig:
    """Read configuration from the environment.

    Raises
    ------
    SystemExit
        If any ``HOOKSERVE_*`` variable is invalid.

    """
    try:
        return HookserveConfig.from_env()
    except ConfigError as exc:
        # Validation failures need no traceback
        log_error(logger, "Invalid configuration: %s", exc)
        raise SystemExit(1) from exc


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration."""
    from hookserve.api.app import AppDependencies
    from hookserve.api.app import create_app as _create_api_app

    return _create_api_app(AppDependencies(config=load_config()))


def main() -> None:
    """Start the hookserve server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    config = load_config()

    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid HOOKSERVE_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )
    if not config.authentication_enabled:
        log_warning(
            logger,
            "HOOKSERVE_SECRET is not set; deliveries will not be authenticated",
        )

    log_info(
        logger,
        "Listening for webhooks on %s:%d%s (log_level=%s)",
        config.host,
        config.port,
        config.path,
        normalized_level,
    )

    server = Granian(
        "hookserve.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
