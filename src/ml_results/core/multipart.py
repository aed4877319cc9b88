"""Multipart envelope splitting and content aggregation.

A multipart query response is a sequence of header/body units, each preceded
by a ``--<boundary>`` line and the whole terminated by ``--<boundary>--``:

    --abc123
    Content-Type: text/plain

    First
    --abc123
    Content-Type: text/plain

    Second
    --abc123--

Single linear scan: one compiled delimiter pattern, one finditer pass, one
parse_single() call per part. Consumed text is never re-scanned.

// [LAW:one-source-of-truth] parse_multipart() is THE split; aggregate() is a view over it.
// [LAW:dataflow-not-control-flow] Total over string input. Fallbacks are values, not errors.
"""

from __future__ import annotations

import logging
import re

from ml_results.core.boundary import (
    boundary_from_content_type,
    detect_boundary,
    escape_boundary,
)
from ml_results.core.parts import parse_single
from ml_results.core.records import Envelope

logger = logging.getLogger(__name__)

_LEADING = "\ufeff \t\r\n"


def _delimiter_re(boundary: str) -> re.Pattern[str]:
    """Line-anchored delimiter. Group 1 is set on the terminal ``--`` form."""
    return re.compile(
        r"^--" + escape_boundary(boundary) + r"(--)?[ \t]*(?:\r?\n|$)",
        re.MULTILINE,
    )


def _strip_line_ending(segment: str) -> str:
    """Drop the line ending that belongs to the following delimiter line."""
    if segment.endswith("\r\n"):
        return segment[:-2]
    if segment.endswith("\n"):
        return segment[:-1]
    return segment


def split_parts(text: str, boundary: str) -> list[str] | None:
    """Split *text* into part strings at ``--<boundary>`` lines.

    Returns None when no delimiter line occurs at all. Preamble, epilogue
    and whitespace-only segments are dropped.
    """
    segments: list[str] = []
    part_start: int | None = None
    terminated = False

    for m in _delimiter_re(boundary).finditer(text):
        if part_start is not None:
            segments.append(text[part_start : m.start()])
        if m.group(1):
            terminated = True
            break
        part_start = m.end()
    else:
        if part_start is None:
            return None

    if not terminated and part_start is not None:
        # Unterminated envelope: the last part runs to end of input.
        segments.append(text[part_start:])

    return [_strip_line_ending(s) for s in segments if s.strip()]


def _opens_or_closes_envelope(text: str, token: str) -> bool:
    """True when *text* starts with a *token* delimiter or carries its terminal marker."""
    if _delimiter_re(token).match(text.lstrip(_LEADING)):
        return True
    terminal = re.compile(r"^--" + escape_boundary(token) + r"--[ \t]*\r?$", re.MULTILINE)
    return terminal.search(text) is not None


def parse_multipart(text: str, boundary: str | None = None) -> Envelope:
    """Parse a (possibly multipart) response into an ordered Envelope.

    *boundary* is the token without the leading ``--``. When omitted it is
    taken from the first delimiter-shaped line, and trusted only when the
    text opens with that delimiter or contains its terminal marker. With no
    usable boundary the whole text is parsed as one part.
    """
    txt = str(text or "")
    if not txt:
        return ()

    token = boundary or detect_boundary(txt)
    if not token:
        logger.debug("no multipart boundary found; parsing %d chars as one part", len(txt))
        return (parse_single(txt),)

    # A guessed token may be a "-- comment" line inside a single-part body.
    if not boundary and not _opens_or_closes_envelope(txt, token):
        logger.debug("detected boundary %r does not frame the text; parsing as one part", token)
        return (parse_single(txt),)

    parts = split_parts(txt, token)
    if parts is None:
        logger.debug("boundary %r never occurs; parsing as one part", token)
        return (parse_single(txt),)

    return tuple(parse_single(part) for part in parts)


def parse_response(
    text: str,
    *,
    content_type: str | None = None,
    boundary: str | None = None,
) -> Envelope:
    """Parse a response body using the HTTP Content-Type to find the boundary.

    An explicit *boundary* wins over the one declared in *content_type*.
    """
    token = boundary or boundary_from_content_type(content_type)
    return parse_multipart(text, token)


def aggregate(text: str, boundary: str | None = None) -> str:
    """Join every record's content, in order, with a single newline."""
    return "\n".join(record.content for record in parse_multipart(text, boundary))
