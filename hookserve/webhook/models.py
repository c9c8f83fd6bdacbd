"""Canonical event records produced from accepted deliveries."""

from __future__ import annotations

import dataclasses
import enum

import msgspec


class EventType(enum.StrEnum):
    """Delivery kinds that can produce an event."""

    PUSH = "push"
    PULL_REQUEST = "pull_request"


class Event(msgspec.Struct, kw_only=True, frozen=True):
    """Normalised record of one accepted push or pull-request delivery.

    For pull requests ``owner``, ``repo``, ``branch`` and ``commit`` describe
    the head ref and the ``base_*`` fields describe the merge target. For
    pushes every pull-request field is empty.

    Attributes
    ----------
    type
        Kind of delivery the event came from.
    owner
        Login or name of the repository owner.
    repo
        Repository name.
    branch
        Branch or tag name with its ``refs/...`` prefix removed.
    commit
        Head commit SHA.
    action
        Pull-request action such as ``opened`` or ``synchronize``.
    base_owner
        Owner of the pull request's target repository.
    base_repo
        Name of the pull request's target repository.
    base_branch
        Target branch of the pull request.

    """

    type: EventType
    owner: str
    repo: str
    branch: str
    commit: str
    action: str = ""
    base_owner: str = ""
    base_repo: str = ""
    base_branch: str = ""

    def __post_init__(self) -> None:
        """Enforce the per-type field invariants."""
        kind = EventType(self.type)
        for name in ("owner", "repo", "branch", "commit"):
            if not getattr(self, name):
                msg = f"{name} must be non-empty"
                raise ValueError(msg)
        if kind is EventType.PUSH and any(self.pull_request_fields()):
            msg = "push events must not carry pull-request fields"
            raise ValueError(msg)
        if kind is EventType.PULL_REQUEST and not self.action:
            msg = "pull_request events require an action"
            raise ValueError(msg)
        for name in self.__struct_fields__:
            value = getattr(self, name)
            if "\n" in value or "\r" in value:
                msg = f"{name} must not contain line breaks"
                raise ValueError(msg)

    def pull_request_fields(self) -> tuple[str, str, str, str]:
        """Return ``(action, base_owner, base_repo, base_branch)``."""
        return (self.action, self.base_owner, self.base_repo, self.base_branch)

    @property
    def slug(self) -> str:
        """Return the ``owner/repo`` slug of the affected repository."""
        return f"{self.owner}/{self.repo}"


@dataclasses.dataclass(frozen=True, slots=True)
class Ignored:
    """Outcome for a delivery that is valid but deliberately not published.

    Attributes
    ----------
    reason
        Short explanation for logs, e.g.
        ``"pull_request action closed is not allowed"``.

    """

    reason: str


__all__ = ["Event", "EventType", "Ignored"]
