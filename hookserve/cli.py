"""Decode text-encoded events into JSON."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import msgspec

from hookserve.errors import FormatError
from hookserve.webhook.codec import decode


def _read_source(source: Path | None) -> str:
    if source is None:
        return sys.stdin.read()
    return source.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """Parse an event in its text form and print it as JSON.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the source cannot be read or the
        text is not a valid event.

    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        default=None,
        help="File holding the event text; reads stdin when omitted",
    )
    args = parser.parse_args(argv)

    source: Path | None = args.source
    try:
        text = _read_source(source)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Cannot read {source or 'stdin'}: {exc}", file=sys.stderr)
        return 1

    try:
        event = decode(text)
    except FormatError as exc:
        print(f"Invalid event: {exc}", file=sys.stderr)
        return 1

    print(msgspec.json.encode(event).decode())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
