"""Receive GitHub push and pull-request webhooks as canonical events.

Deliveries are authenticated with HMAC-SHA1, normalised into ``Event``
records and handed to in-process consumers through a bounded queue.
"""

from __future__ import annotations

from hookserve.config import HookserveConfig
from hookserve.webhook.models import Event, EventType

__all__ = ["Event", "EventType", "HookserveConfig"]
