"""Server configuration for the webhook runtime.

``HookserveConfig`` is built once at startup and shared read-only by every
request, so request handlers never need to synchronise on it.

Usage
-----
Create a configuration with defaults:

>>> config = HookserveConfig()
>>> config.path
'/postreceive'

Or load from environment variables:

>>> import os
>>> os.environ["HOOKSERVE_TAGS"] = "true"
>>> HookserveConfig.from_env().ignore_tags
False

"""

from __future__ import annotations

import dataclasses as dc
import os

from hookserve.errors import ConfigError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

_MIN_PORT = 1
_MAX_PORT = 65535


@dc.dataclass(frozen=True, slots=True)
class HookserveConfig:
    """Configuration for webhook ingestion.

    Attributes
    ----------
    host
        Bind address for the Granian server.
    port
        Listen port. Defaults to 80.
    path
        The only path that accepts deliveries. Defaults to ``/postreceive``.
    secret
        Shared secret for HMAC verification. ``None`` disables
        authentication, which lets any caller inject events.
    ignore_tags
        When true, pushes of ``refs/tags/*`` are ignored.
    pull_request_actions
        Allow-list of pull-request actions that produce events. ``None``
        accepts every action.
    queue_capacity
        Number of events the dispatch queue buffers.
    max_pending
        Maximum number of detached publishes waiting for queue space before
        new events are dropped.
    consumer_count
        Number of consumer tasks started with the application.
    log_level
        femtologging level name.

    """

    host: str = "0.0.0.0"  # noqa: S104 - bind all interfaces for container
    port: int = 80
    path: str = "/postreceive"
    secret: str | None = None
    ignore_tags: bool = True
    pull_request_actions: frozenset[str] | None = None
    queue_capacity: int = 10
    max_pending: int = 100
    consumer_count: int = 1
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Reject values no server could run with."""
        if not self.path.startswith("/"):
            raise ConfigError.invalid("path", f"must start with '/', got {self.path!r}")
        if self.queue_capacity < 1:
            raise ConfigError.invalid("queue_capacity", "must be positive")
        if self.max_pending < 0:
            raise ConfigError.invalid("max_pending", "must not be negative")

    @property
    def authentication_enabled(self) -> bool:
        """Return True when deliveries must carry a valid signature."""
        return bool(self.secret)

    @staticmethod
    def _parse_int(env_var: str, default: int, *, minimum: int) -> int:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"must be an integer, got: {raw!r}"
            raise ConfigError.invalid(env_var, msg) from exc
        if value < minimum:
            msg = f"must be at least {minimum}, got: {value}"
            raise ConfigError.invalid(env_var, msg)
        return value

    @staticmethod
    def _parse_bool(env_var: str, *, default: bool) -> bool:
        raw = os.environ.get(env_var, "").strip().lower()
        if not raw:
            return default
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        raise ConfigError.invalid(env_var, f"must be a boolean, got: {raw!r}")

    @staticmethod
    def _parse_actions(env_var: str) -> frozenset[str] | None:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return None
        return frozenset(item.strip() for item in raw.split(",") if item.strip())

    @classmethod
    def _parse_port(cls, env_var: str, default: int) -> int:
        port = cls._parse_int(env_var, default, minimum=_MIN_PORT)
        if port > _MAX_PORT:
            raise ConfigError.invalid(
                env_var, f"must be {_MIN_PORT}-{_MAX_PORT}, got: {port}"
            )
        return port

    @classmethod
    def from_env(cls) -> HookserveConfig:
        """Create configuration from ``HOOKSERVE_*`` environment variables.

        Reads the following environment variables:

        - ``HOOKSERVE_HOST``: bind address.
        - ``HOOKSERVE_PORT``: listen port, 1-65535.
        - ``HOOKSERVE_PATH``: delivery path.
        - ``HOOKSERVE_SECRET``: HMAC secret; unset disables verification.
        - ``HOOKSERVE_TAGS``: boolean; when true, tag pushes produce events.
        - ``HOOKSERVE_PULL_REQUEST_ACTIONS``: comma-separated allow-list.
        - ``HOOKSERVE_QUEUE_CAPACITY``: positive integer.
        - ``HOOKSERVE_MAX_PENDING``: non-negative integer.
        - ``HOOKSERVE_CONSUMERS``: non-negative integer.
        - ``HOOKSERVE_LOG_LEVEL``: log level name.

        Raises
        ------
        ConfigError
            If any variable holds a value of the wrong shape.

        """
        defaults = cls()
        secret = os.environ.get("HOOKSERVE_SECRET") or None
        return cls(
            host=os.environ.get("HOOKSERVE_HOST", defaults.host),
            port=cls._parse_port("HOOKSERVE_PORT", defaults.port),
            path=os.environ.get("HOOKSERVE_PATH", "").strip() or defaults.path,
            secret=secret,
            ignore_tags=not cls._parse_bool("HOOKSERVE_TAGS", default=False),
            pull_request_actions=cls._parse_actions("HOOKSERVE_PULL_REQUEST_ACTIONS"),
            queue_capacity=cls._parse_int(
                "HOOKSERVE_QUEUE_CAPACITY", defaults.queue_capacity, minimum=1
            ),
            max_pending=cls._parse_int(
                "HOOKSERVE_MAX_PENDING", defaults.max_pending, minimum=0
            ),
            consumer_count=cls._parse_int(
                "HOOKSERVE_CONSUMERS", defaults.consumer_count, minimum=0
            ),
            log_level=os.environ.get("HOOKSERVE_LOG_LEVEL", defaults.log_level),
        )


__all__ = ["HookserveConfig"]
