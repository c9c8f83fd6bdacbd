"""Error taxonomy for webhook ingestion.

Every error raised while handling a delivery is terminal for that delivery:
nothing is retried and each type maps to exactly one HTTP status (see
``hookserve.api.errors``). Deliberately ignored deliveries are *not* errors
and never surface through this hierarchy.
"""

from __future__ import annotations

from http import HTTPStatus


class HookserveError(Exception):
    """Base class for all hookserve errors."""


class AuthenticationError(HookserveError):
    """Raised when a delivery's HMAC signature is missing or wrong."""

    @classmethod
    def missing_signature(cls) -> AuthenticationError:
        """Return an error for a delivery without ``X-Hub-Signature``."""
        return cls("Missing X-Hub-Signature required for HMAC verification")

    @classmethod
    def mismatch(cls) -> AuthenticationError:
        """Return an error for a signature that does not match the body."""
        return cls("HMAC verification failed")


class MalformedRequestError(HookserveError):
    """Raised when the method, path or event header rules out a delivery.

    Attributes
    ----------
    status
        HTTP status the request maps to (405, 404 or 400).

    """

    def __init__(self, message: str, *, status: HTTPStatus) -> None:
        """Initialise with a message and the HTTP status it maps to."""
        self.status = status
        super().__init__(message)

    @classmethod
    def method_not_allowed(cls, method: str) -> MalformedRequestError:
        """Return an error for any method other than POST."""
        return cls(
            f"Method {method} not allowed", status=HTTPStatus.METHOD_NOT_ALLOWED
        )

    @classmethod
    def not_found(cls, path: str) -> MalformedRequestError:
        """Return an error for a path other than the configured one."""
        return cls(f"No webhook listens on {path}", status=HTTPStatus.NOT_FOUND)

    @classmethod
    def missing_event_type(cls) -> MalformedRequestError:
        """Return an error for a delivery without ``X-GitHub-Event``."""
        return cls("Missing X-GitHub-Event header", status=HTTPStatus.BAD_REQUEST)

    @classmethod
    def unknown_event_type(cls, event_type: str) -> MalformedRequestError:
        """Return an error for an event type other than push or pull_request."""
        return cls(f"Unknown event type {event_type}", status=HTTPStatus.BAD_REQUEST)


class PayloadParseError(HookserveError):
    """Raised when a payload is not JSON or lacks an expected field.

    Attributes
    ----------
    field
        Dotted path of the offending field, or ``None`` when the body as a
        whole could not be decoded.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialise with a reason and the offending field path."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


class FormatError(HookserveError):
    """Raised when text cannot be decoded into an event."""

    @classmethod
    def line_count(cls, count: int) -> FormatError:
        """Return an error for text with an unsupported number of lines."""
        return cls(f"Unable to parse event string: unexpected line count {count}")

    @classmethod
    def bad_line(cls, number: int, label: str) -> FormatError:
        """Return an error for a line that does not start with *label*."""
        return cls(
            f"Unable to parse event string: line {number} must start with {label!r}"
        )


class ConfigError(HookserveError):
    """Raised when environment configuration is invalid."""

    @classmethod
    def invalid(cls, variable: str, reason: str) -> ConfigError:
        """Return an error naming the environment variable at fault."""
        return cls(f"{variable} {reason}")


__all__ = [
    "AuthenticationError",
    "ConfigError",
    "FormatError",
    "HookserveError",
    "MalformedRequestError",
    "PayloadParseError",
]
