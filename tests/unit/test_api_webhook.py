"""Unit tests for the webhook ingestion endpoint.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_webhook.py

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import pytest

from hookserve.config import HookserveConfig
from hookserve.webhook.codec import decode
from hookserve.webhook.models import Event, EventType
from tests.helpers.github_payloads import (
    delivery_headers,
    encode_body,
    pull_request_payload,
    push_payload,
)
from tests.helpers.webhook_harness import TEST_SECRET, build_harness

if typ.TYPE_CHECKING:
    import falcon.testing

    from tests.helpers.webhook_harness import WebhookHarness

PATH = "/postreceive"


def _post(
    harness: WebhookHarness,
    payload: object,
    *,
    event_type: str | None = "push",
    secret: str | None = None,
    path: str = PATH,
) -> falcon.testing.Result:
    body = encode_body(payload)
    return harness.client.simulate_post(
        path,
        body=body,
        headers=delivery_headers(event_type, body=body, secret=secret),
    )


class TestRequestRouting:
    """Method, path and event header checks."""

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
    def test_non_post_is_405(self, harness: WebhookHarness, method: str) -> None:
        """Only POST is accepted on the webhook path."""
        result = harness.client.simulate_request(method, PATH)

        assert result.status_code == HTTPStatus.METHOD_NOT_ALLOWED
        assert result.headers.get("allow") == "POST", "expected an Allow header"

    def test_method_checked_before_path(self, harness: WebhookHarness) -> None:
        """A GET on an unknown path is still a 405."""
        result = harness.client.simulate_get("/elsewhere")

        assert result.status_code == HTTPStatus.METHOD_NOT_ALLOWED

    def test_wrong_path_is_404(self, harness: WebhookHarness) -> None:
        """POSTs to any other path are not found."""
        result = _post(harness, push_payload(), path="/elsewhere")

        assert result.status_code == HTTPStatus.NOT_FOUND
        assert result.json["title"] == "Not Found"

    def test_missing_event_header_is_400(self, harness: WebhookHarness) -> None:
        """Deliveries must name their event type."""
        result = _post(harness, push_payload(), event_type=None)

        assert result.status_code == HTTPStatus.BAD_REQUEST
        assert "X-GitHub-Event" in result.json["description"]

    def test_unknown_event_type_is_400(self, harness: WebhookHarness) -> None:
        """Only push and pull_request are supported."""
        result = _post(harness, {"comment": {}}, event_type="issue_comment")

        assert result.status_code == HTTPStatus.BAD_REQUEST
        assert "issue_comment" in result.json["description"]

    def test_custom_path_is_honoured(self) -> None:
        """The configured path replaces the default."""
        harness = build_harness(HookserveConfig(path="/hooks", consumer_count=0))

        assert _post(harness, push_payload(), path="/hooks").status_code == (
            HTTPStatus.OK
        )
        assert _post(harness, push_payload()).status_code == HTTPStatus.NOT_FOUND


class TestSignatureVerification:
    """HMAC checks when a secret is configured."""

    def test_valid_signature_is_accepted(
        self, signed_harness: WebhookHarness
    ) -> None:
        """A correctly signed delivery is processed."""
        result = _post(signed_harness, push_payload(), secret=TEST_SECRET)

        assert result.status_code == HTTPStatus.OK

    def test_missing_signature_is_403(self, signed_harness: WebhookHarness) -> None:
        """Unsigned deliveries are refused."""
        result = _post(signed_harness, push_payload())

        assert result.status_code == HTTPStatus.FORBIDDEN
        assert "X-Hub-Signature" in result.json["description"]
        assert signed_harness.queue.depth == 0, "nothing should be queued"

    def test_wrong_secret_is_403(self, signed_harness: WebhookHarness) -> None:
        """Signatures computed with another secret are refused."""
        result = _post(signed_harness, push_payload(), secret="tango")

        assert result.status_code == HTTPStatus.FORBIDDEN
        assert result.json == {
            "title": "Forbidden",
            "description": "HMAC verification failed",
        }

    def test_signature_checked_before_json(
        self, signed_harness: WebhookHarness
    ) -> None:
        """A bad signature wins over an unparseable body."""
        result = signed_harness.client.simulate_post(
            PATH, body=b"not json", headers=delivery_headers("push")
        )

        assert result.status_code == HTTPStatus.FORBIDDEN

    def test_signature_ignored_without_secret(self, harness: WebhookHarness) -> None:
        """Without a secret any signature header is disregarded."""
        body = encode_body(push_payload())
        headers = delivery_headers("push", body=body)
        headers["X-Hub-Signature"] = "sha1=garbage"

        result = harness.client.simulate_post(PATH, body=body, headers=headers)

        assert result.status_code == HTTPStatus.OK


class TestPayloadHandling:
    """Extraction outcomes and their responses."""

    def test_push_example_round_trips(self, harness: WebhookHarness) -> None:
        """The response body is the published event's text form."""
        body = (
            b'{"ref":"refs/heads/main","head_commit":{"id":"abc123"},'
            b'"repository":{"name":"r","owner":{"name":"o"}}}'
        )

        result = harness.client.simulate_post(
            PATH, body=body, headers={"X-GitHub-Event": "push"}
        )

        assert result.status_code == HTTPStatus.OK
        expected = Event(
            type=EventType.PUSH, owner="o", repo="r", branch="main", commit="abc123"
        )
        assert decode(result.text) == expected
        assert harness.queue.get_nowait() == expected, "expected the event queued"

    def test_pull_request_is_published(self, harness: WebhookHarness) -> None:
        """Pull-request deliveries publish a pull-request event."""
        result = _post(
            harness,
            pull_request_payload(action="synchronize"),
            event_type="pull_request",
        )

        assert result.status_code == HTTPStatus.OK
        event = harness.queue.get_nowait()
        assert event.type == EventType.PULL_REQUEST
        assert event.action == "synchronize"
        assert event.base_repo == "reef"

    def test_ignored_delivery_is_200_with_empty_body(
        self, harness: WebhookHarness
    ) -> None:
        """Filtered deliveries succeed without publishing anything."""
        result = _post(harness, push_payload(ref="refs/tags/v1.0"))

        assert result.status_code == HTTPStatus.OK
        assert result.text == ""
        assert harness.queue.depth == 0, "ignored deliveries must not be queued"

    def test_disallowed_action_is_ignored(self) -> None:
        """The configured allow-list filters pull-request actions."""
        harness = build_harness(
            HookserveConfig(
                pull_request_actions=frozenset({"opened"}), consumer_count=0
            )
        )

        result = _post(
            harness, pull_request_payload(action="closed"), event_type="pull_request"
        )

        assert result.status_code == HTTPStatus.OK
        assert result.text == ""
        assert harness.queue.depth == 0

    def test_invalid_json_is_500(self, harness: WebhookHarness) -> None:
        """Bodies that are not JSON fail to parse."""
        result = harness.client.simulate_post(
            PATH, body=b"{not json", headers=delivery_headers("push")
        )

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert result.json["title"] == "Unable to parse payload"
        assert "field" not in result.json

    def test_missing_field_is_500_with_field(self, harness: WebhookHarness) -> None:
        """Missing fields are reported by dotted path."""
        payload = push_payload()
        del payload["repository"]["owner"]

        result = _post(harness, payload)

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert result.json["field"] == "repository.owner"
        assert result.json["description"] == "is absent"

    def test_each_delivery_is_published_once(self, harness: WebhookHarness) -> None:
        """Sequential deliveries queue one event each, in order."""
        for commit in ("c1", "c2", "c3"):
            _post(harness, push_payload(commit=commit))

        commits = [harness.queue.get_nowait().commit for _ in range(3)]

        assert commits == ["c1", "c2", "c3"]
        assert harness.queue.depth == 0
