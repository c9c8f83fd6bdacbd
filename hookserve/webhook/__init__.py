"""Webhook authentication, event extraction and the event text codec."""

from __future__ import annotations

from .codec import decode, encode
from .extraction import EventExtractor
from .models import Event, EventType, Ignored
from .observability import DeliveryEventLogger, DeliveryEventType
from .signature import compute_signature, verify_signature

__all__ = [
    "DeliveryEventLogger",
    "DeliveryEventType",
    "Event",
    "EventExtractor",
    "EventType",
    "Ignored",
    "compute_signature",
    "decode",
    "encode",
    "verify_signature",
]
