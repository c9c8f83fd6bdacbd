"""Typed nested-field access for decoded webhook payloads.

Lookups return a ``Found`` or ``Missing`` result instead of raising, so the
extractor can report the exact dotted path that was absent or malformed.
"""

from __future__ import annotations

import dataclasses
import typing as typ

T = typ.TypeVar("T")


@dataclasses.dataclass(frozen=True, slots=True)
class Found(typ.Generic[T]):
    """A field that resolved to a usable value."""

    path: str
    value: T


@dataclasses.dataclass(frozen=True, slots=True)
class Missing:
    """A field that could not be resolved.

    Attributes
    ----------
    path
        Dotted path of the field that failed, which is a prefix of the
        requested path when an intermediate object is absent.
    reason
        Why resolution failed, e.g. ``"is absent"`` or ``"is not a string"``.

    """

    path: str
    reason: str


Lookup: typ.TypeAlias = Found[T] | Missing


def _describe(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, dict):
        return "an object"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, str):
        return "a string"
    return "a number"


def lookup(payload: object, path: str) -> Lookup[object]:
    """Resolve a dotted *path* such as ``"repository.owner.name"``.

    A ``null`` leaf resolves to ``Found(value=None)``; callers that need a
    concrete value use :func:`lookup_text` or check for ``None`` themselves.
    A ``null`` or non-object value in the middle of the path is reported as
    ``Missing`` at that segment.
    """
    current: object = payload
    walked: list[str] = []
    for segment in path.split("."):
        if not isinstance(current, dict):
            where = ".".join(walked) or "payload"
            return Missing(where, f"is {_describe(current)}, not an object")
        walked.append(segment)
        mapping = typ.cast("dict[str, object]", current)
        if segment not in mapping:
            return Missing(".".join(walked), "is absent")
        current = mapping[segment]
    return Found(path, current)


def lookup_text(payload: object, path: str) -> Lookup[str]:
    """Resolve *path* to a non-empty string."""
    result = lookup(payload, path)
    if isinstance(result, Missing):
        return result
    value = result.value
    if not isinstance(value, str):
        return Missing(path, f"is {_describe(value)}, not a string")
    if not value:
        return Missing(path, "is empty")
    return Found(path, value)


def is_null(payload: object, path: str) -> bool:
    """Return True when *path* is absent or explicitly ``null``."""
    result = lookup(payload, path)
    return isinstance(result, Missing) or result.value is None


__all__ = ["Found", "Lookup", "Missing", "is_null", "lookup", "lookup_text"]
