"""Unit tests for nested payload lookups."""

from __future__ import annotations

import pytest

from hookserve.webhook.payload import Found, Missing, is_null, lookup, lookup_text

PAYLOAD = {
    "ref": "refs/heads/main",
    "head_commit": None,
    "repository": {"name": "reef", "owner": {"name": "octo"}, "size": 3},
    "empty": "",
}


def test_lookup_resolves_nested_path() -> None:
    """Dotted paths walk nested objects."""
    assert lookup(PAYLOAD, "repository.owner.name") == Found(
        "repository.owner.name", "octo"
    )


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        pytest.param(
            "repository.owner.login",
            Missing("repository.owner.login", "is absent"),
            id="absent_leaf",
        ),
        pytest.param(
            "pull_request.head.sha",
            Missing("pull_request", "is absent"),
            id="absent_root",
        ),
        pytest.param(
            "head_commit.id",
            Missing("head_commit", "is null, not an object"),
            id="null_intermediate",
        ),
        pytest.param(
            "ref.name",
            Missing("ref", "is a string, not an object"),
            id="scalar_intermediate",
        ),
    ],
)
def test_lookup_reports_failing_segment(path: str, expected: Missing) -> None:
    """Failures name the first path prefix that could not be resolved."""
    assert lookup(PAYLOAD, path) == expected


def test_lookup_on_non_object_payload() -> None:
    """A non-object payload fails at the root."""
    assert lookup(["not", "a", "dict"], "ref") == Missing(
        "payload", "is an array, not an object"
    )


@pytest.mark.parametrize(
    ("path", "reason"),
    [
        ("repository.size", "is a number, not a string"),
        ("repository.owner", "is an object, not a string"),
        ("head_commit", "is null, not a string"),
        ("empty", "is empty"),
    ],
)
def test_lookup_text_rejects_non_strings(path: str, reason: str) -> None:
    """Text lookups require a non-empty string."""
    assert lookup_text(PAYLOAD, path) == Missing(path, reason)


def test_lookup_text_returns_value() -> None:
    """A string leaf is returned as found."""
    assert lookup_text(PAYLOAD, "ref") == Found("ref", "refs/heads/main")


@pytest.mark.parametrize(
    ("path", "expected"),
    [("head_commit", True), ("missing", True), ("repository", False)],
)
def test_is_null(path: str, *, expected: bool) -> None:
    """Absent and null fields both count as null."""
    assert is_null(PAYLOAD, path) is expected
