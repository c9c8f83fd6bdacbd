"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from hookserve.config import HookserveConfig
from tests.helpers.webhook_harness import (
    TEST_SECRET,
    RecordingHandler,
    WebhookHarness,
    build_harness,
)


@pytest.fixture
def harness() -> WebhookHarness:
    """Return an unauthenticated webhook app with no consumers."""
    return build_harness(HookserveConfig(consumer_count=0))


@pytest.fixture
def signed_harness() -> WebhookHarness:
    """Return a webhook app that requires ``TEST_SECRET`` signatures."""
    return build_harness(HookserveConfig(secret=TEST_SECRET, consumer_count=0))


@pytest.fixture
def recording_handler() -> RecordingHandler:
    """Return a fresh recording consumer handler."""
    return RecordingHandler()
