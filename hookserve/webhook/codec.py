"""Line-oriented text form of events.

Each field is written on its own line behind an eight-character label::

    type:   pull_request
    owner:  octo
    repo:   reef
    branch: feature
    commit: 4f2c...
    action: opened
    bowner: octo
    brepo:  reef
    bbranch:main

The ``type`` line is optional. Push events stop after ``commit``; pull
requests add the four trailing lines. ``decode(encode(event)) == event`` for
every valid event, with or without the type line.
"""

from __future__ import annotations

import typing as typ

from hookserve.errors import FormatError

from .models import Event, EventType

TYPE_LABEL = "type:   "
LABEL_WIDTH = len(TYPE_LABEL)

_CORE_FIELDS: tuple[tuple[str, str], ...] = (
    ("owner", "owner:  "),
    ("repo", "repo:   "),
    ("branch", "branch: "),
    ("commit", "commit: "),
)
_PULL_REQUEST_FIELDS: tuple[tuple[str, str], ...] = (
    ("action", "action: "),
    ("base_owner", "bowner: "),
    ("base_repo", "brepo:  "),
    ("base_branch", "bbranch:"),
)

PUSH_LINES = len(_CORE_FIELDS)
PULL_REQUEST_LINES = PUSH_LINES + len(_PULL_REQUEST_FIELDS)


def _fields_for(event_type: str) -> tuple[tuple[str, str], ...]:
    if event_type == EventType.PULL_REQUEST:
        return _CORE_FIELDS + _PULL_REQUEST_FIELDS
    return _CORE_FIELDS


def encode(event: Event, *, include_type: bool = True) -> str:
    """Render *event* in its text form, one newline-terminated line per field."""
    lines: list[str] = []
    if include_type:
        lines.append(TYPE_LABEL + event.type)
    lines.extend(
        label + getattr(event, name) for name, label in _fields_for(event.type)
    )
    return "".join(f"{line}\n" for line in lines)


def _value(line: str, label: str, number: int) -> str:
    if len(line) < LABEL_WIDTH or not line.startswith(label):
        raise FormatError.bad_line(number, label)
    return line[LABEL_WIDTH:]


def _split_type(lines: list[str]) -> tuple[str | None, list[str]]:
    if lines and lines[0].startswith(TYPE_LABEL):
        return lines[0][LABEL_WIDTH:], lines[1:]
    return None, lines


def decode(text: str) -> Event:
    """Parse the text form produced by :func:`encode`.

    Raises
    ------
    FormatError
        If the line count matches neither form, a line lacks its label,
        the type line disagrees with the field count, or the values do not
        form a valid event.

    """
    # Values never contain CR or LF; other Unicode line separators are data.
    lines = [line.removesuffix("\r") for line in text.strip("\r\n").split("\n")]
    declared, body = _split_type(lines)

    if len(body) != PUSH_LINES and len(body) != PULL_REQUEST_LINES:
        raise FormatError.line_count(len(lines))

    inferred = EventType.PUSH if len(body) == PUSH_LINES else EventType.PULL_REQUEST
    if declared is not None and declared != inferred:
        msg = (
            f"Unable to parse event string: type {declared!r} does not match "
            f"{len(body)} field lines"
        )
        raise FormatError(msg)

    offset = len(lines) - len(body) + 1
    fields: dict[str, typ.Any] = {
        name: _value(line, label, number)
        for number, ((name, label), line) in enumerate(
            zip(_fields_for(inferred), body, strict=True), start=offset
        )
    }
    try:
        return Event(type=inferred, **fields)
    except ValueError as exc:
        msg = f"Unable to parse event string: {exc}"
        raise FormatError(msg) from exc


__all__ = [
    "LABEL_WIDTH",
    "PULL_REQUEST_LINES",
    "PUSH_LINES",
    "TYPE_LABEL",
    "decode",
    "encode",
]
