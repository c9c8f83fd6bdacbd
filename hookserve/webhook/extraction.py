"""Classify webhook payloads and extract canonical events.

The extractor handles the two delivery kinds hookserve understands:

``push``
    Accepted for branch refs, and for tag refs when tags are not ignored.
    Pushes without a head commit (branch deletions) are ignored.
``pull_request``
    Accepted for every action unless an allow-list is configured, in which
    case other actions are ignored.

Filtering is reported as an ``Ignored`` outcome; only missing or malformed
fields raise ``PayloadParseError``.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from hookserve.errors import PayloadParseError

from .models import Event, EventType, Ignored
from .payload import Missing, is_null, lookup_text

BRANCH_REF_PREFIX = "refs/heads/"
TAG_REF_PREFIX = "refs/tags/"


def _require_text(payload: object, path: str) -> str:
    result = lookup_text(payload, path)
    if isinstance(result, Missing):
        raise PayloadParseError(result.reason, field=result.path)
    return result.value


def _build_event(**fields: str) -> Event:
    try:
        return Event(**fields)  # type: ignore[arg-type]
    except ValueError as exc:
        raise PayloadParseError(str(exc)) from exc


@dataclasses.dataclass(frozen=True, slots=True)
class _RefSide:
    """Field paths for one side (head or base) of a pull request."""

    owner: str
    repo: str
    branch: str


_HEAD = _RefSide(
    owner="pull_request.head.repo.owner.login",
    repo="pull_request.head.repo.name",
    branch="pull_request.head.ref",
)
_BASE = _RefSide(
    owner="pull_request.base.repo.owner.login",
    repo="pull_request.base.repo.name",
    branch="pull_request.base.ref",
)


@dataclasses.dataclass(frozen=True, slots=True)
class EventExtractor:
    """Turn decoded payloads into events according to the filtering rules.

    Attributes
    ----------
    ignore_tags
        Ignore pushes to ``refs/tags/*`` when true.
    pull_request_actions
        Pull-request actions that produce events; ``None`` accepts all.

    """

    ignore_tags: bool = True
    pull_request_actions: frozenset[str] | None = None

    def extract(self, event_type: EventType, payload: object) -> Event | Ignored:
        """Return the event for *payload*, or why it was ignored.

        Parameters
        ----------
        event_type
            Value of the delivery's ``X-GitHub-Event`` header, already
            validated by the endpoint.
        payload
            The decoded JSON body.

        Raises
        ------
        PayloadParseError
            If a field the event needs is absent, null, empty or of the
            wrong type.

        """
        if event_type == EventType.PUSH:
            return self._extract_push(payload)
        return self._extract_pull_request(payload)

    def branch_for_ref(self, ref: str) -> str | None:
        """Return the branch or tag name for *ref*, or ``None`` to ignore it."""
        if ref.startswith(BRANCH_REF_PREFIX):
            return ref.removeprefix(BRANCH_REF_PREFIX) or None
        if ref.startswith(TAG_REF_PREFIX) and not self.ignore_tags:
            return ref.removeprefix(TAG_REF_PREFIX) or None
        return None

    def _extract_push(self, payload: object) -> Event | Ignored:
        ref = _require_text(payload, "ref")
        branch = self.branch_for_ref(ref)
        if branch is None:
            return Ignored(f"ref {ref} is not a tracked branch or tag")
        if is_null(payload, "head_commit"):
            return Ignored(f"push to {ref} has no head commit")

        return _build_event(
            type=EventType.PUSH,
            owner=_require_text(payload, "repository.owner.name"),
            repo=_require_text(payload, "repository.name"),
            branch=branch,
            commit=_require_text(payload, "head_commit.id"),
        )

    def _extract_pull_request(self, payload: object) -> Event | Ignored:
        action = _require_text(payload, "action")
        if (
            self.pull_request_actions is not None
            and action not in self.pull_request_actions
        ):
            return Ignored(f"pull_request action {action} is not allowed")

        return _build_event(
            type=EventType.PULL_REQUEST,
            owner=_require_text(payload, _HEAD.owner),
            repo=_require_text(payload, _HEAD.repo),
            branch=_require_text(payload, _HEAD.branch),
            commit=_require_text(payload, "pull_request.head.sha"),
            action=action,
            base_owner=_require_text(payload, _BASE.owner),
            base_repo=_require_text(payload, _BASE.repo),
            base_branch=_require_text(payload, _BASE.branch),
        )


def extractor_for(
    *,
    ignore_tags: bool,
    pull_request_actions: typ.Iterable[str] | None,
) -> EventExtractor:
    """Build an extractor, freezing the allow-list if one is given."""
    actions = None if pull_request_actions is None else frozenset(pull_request_actions)
    return EventExtractor(ignore_tags=ignore_tags, pull_request_actions=actions)


__all__ = ["BRANCH_REF_PREFIX", "TAG_REF_PREFIX", "EventExtractor", "extractor_for"]
