"""In-memory dispatch of events from request handlers to consumers."""

from __future__ import annotations

from .consumer import EventHandler, LogEventHandler, consume
from .queue import DispatchQueue, PublishOutcome

__all__ = [
    "DispatchQueue",
    "EventHandler",
    "LogEventHandler",
    "PublishOutcome",
    "consume",
]
