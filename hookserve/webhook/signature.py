"""HMAC verification of webhook deliveries.

GitHub signs each delivery with HMAC-SHA1 over the exact request body and
sends the result as ``X-Hub-Signature: sha1=<hex digest>``. Verification must
see the body bytes as received: a MAC computed over re-serialised JSON would
not match what the sender signed.
"""

from __future__ import annotations

import hashlib
import hmac

from hookserve.errors import AuthenticationError

SIGNATURE_PREFIX = "sha1="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the ``sha1=<hex>`` signature GitHub sends for *body*."""
    digest = hmac.new(secret.encode(), body, hashlib.sha1).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes, signature: str | None, secret: str | None) -> None:
    """Authenticate a delivery body against its signature header.

    When *secret* is ``None`` or empty, verification is disabled and every
    delivery passes. Deployments that expose the endpoint publicly should
    always configure a secret.

    Parameters
    ----------
    body
        Raw request body, before any JSON decoding.
    signature
        Value of the ``X-Hub-Signature`` header, if present.
    secret
        Shared secret configured for the webhook.

    Raises
    ------
    AuthenticationError
        If a secret is configured and the signature is missing or does not
        match.

    """
    if not secret:
        return
    if not signature:
        raise AuthenticationError.missing_signature()

    expected = compute_signature(body, secret)
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        raise AuthenticationError.mismatch()


__all__ = ["SIGNATURE_PREFIX", "compute_signature", "verify_signature"]
