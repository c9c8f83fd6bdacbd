"""Shared fixtures for BDD feature tests."""

from __future__ import annotations

import typing as typ

import pytest

if typ.TYPE_CHECKING:
    import falcon.testing
    from falcon.testing.client import Result

    from hookserve.dispatch.queue import DispatchQueue


class DeliveryContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    client: falcon.testing.TestClient
    queue: DispatchQueue
    secret: str | None
    response: Result


@pytest.fixture
def delivery_context() -> DeliveryContext:
    """Provision empty scenario state."""
    return {"secret": None}
