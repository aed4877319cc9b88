"""Content pretty-printing for display: XML and JSON reformatting.

Every public entry point returns a string and never raises. Failures are
carried as data in FormatResult and mapped back to the original text by the
caller-facing wrappers.

// [LAW:dataflow-not-control-flow] Failure is a FormatResult value, not exception unwinding.
// [LAW:single-enforcer] Content-type dispatch for formatting lives in _formatter_for() only.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from collections import OrderedDict
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ml_results.core.records import Record, coerce_record

logger = logging.getLogger(__name__)

INDENT_UNIT = "  "

# Whitespace strictly between a closing '>' and the next '<'.
_INTER_TAG_WS_RE = re.compile(r">\s+<")


# ─── Result type ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FormatResult:
    """Formatted text, or the reason formatting failed."""

    text: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_original(self, original: str) -> str:
        """Formatted text on success, *original* on failure."""
        return self.text if self.ok else original


def _failure(original: object, error: str) -> FormatResult:
    text = "" if original is None else str(original)
    logger.debug("formatting fell back to original text: %s", error)
    return FormatResult(text=text, error=error)


# ─── XML ─────────────────────────────────────────────────────────────────────


_OUTSIDE_TAG = 0
_INSIDE_TAG = 1


def _tokenize_tags(text: str) -> list[tuple[bool, str]]:
    """Split text into (is_tag, token) pairs with a two-state scanner.

    A tag is ``<`` + at least one non-``>`` char + ``>``. A ``<`` with no
    later ``>`` leaves the remainder as text.
    """
    tokens: list[tuple[bool, str]] = []
    state = _OUTSIDE_TAG
    text_start = 0
    tag_start = 0
    pos = 0

    while True:
        if state == _OUTSIDE_TAG:
            lt = text.find("<", pos)
            if lt == -1:
                break
            tag_start = lt
            pos = lt + 1
            state = _INSIDE_TAG
        else:
            gt = text.find(">", pos)
            if gt == -1:
                break
            pos = gt + 1
            state = _OUTSIDE_TAG
            if gt == tag_start + 1:
                continue  # "<>" is text
            if tag_start > text_start:
                tokens.append((False, text[text_start:tag_start]))
            tokens.append((True, text[tag_start:pos]))
            text_start = pos

    if text_start < len(text):
        tokens.append((False, text[text_start:]))
    return tokens


def _is_closing(tag: str) -> bool:
    return tag.startswith("</")


def _is_standalone(tag: str) -> bool:
    """Self-closing, processing instruction, or declaration/comment."""
    return tag.endswith("/>") or tag.startswith("<?") or tag.startswith("<!")


def try_format_xml(raw_text: str) -> FormatResult:
    """Indent XML-ish text by tag nesting, two spaces per level."""
    if not isinstance(raw_text, str):
        return _failure(raw_text, f"expected str, got {type(raw_text).__name__}")

    collapsed = _INTER_TAG_WS_RE.sub("><", raw_text)
    indent = 0
    lines: list[str] = []

    for is_tag, token in _tokenize_tags(collapsed):
        if is_tag:
            closing = _is_closing(token)
            if closing:
                indent = max(indent - 1, 0)
            lines.append(INDENT_UNIT * indent + token)
            if not closing and not _is_standalone(token):
                indent += 1
        else:
            text = token.strip()
            if text:
                lines.append(INDENT_UNIT * indent + text)

    return FormatResult(text="\n".join(lines))


def format_xml_pretty(raw_text: str) -> str:
    """Pretty-print XML, returning the input unchanged if that fails."""
    return try_format_xml(raw_text).text


# ─── JSON ────────────────────────────────────────────────────────────────────


def _reject_constant(name: str) -> float:
    # NaN / Infinity are not JSON.
    raise ValueError(f"invalid JSON constant {name}")


def try_format_json(raw_text: str) -> FormatResult:
    """Re-serialize JSON text with two-space indentation."""
    if not isinstance(raw_text, str):
        return _failure(raw_text, f"expected str, got {type(raw_text).__name__}")
    try:
        parsed = json.loads(raw_text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        return _failure(raw_text, f"invalid JSON: {e}")
    return FormatResult(text=json.dumps(parsed, indent=2, ensure_ascii=False))


def format_json_pretty(raw_text: str) -> str:
    """Pretty-print JSON, returning the input unchanged if it does not parse."""
    return try_format_json(raw_text).text


# ─── Record dispatch ─────────────────────────────────────────────────────────


RecordLike = Record | Mapping[str, object]


def _formatter_for(content_type: str, *, html_as_xml: bool) -> Callable[[str], FormatResult] | None:
    ct = content_type.lower()
    if "json" in ct:
        return try_format_json
    if "xml" in ct:
        return try_format_xml
    if html_as_xml and "html" in ct:
        return try_format_xml
    return None


def _format(record: RecordLike | None, *, html_as_xml: bool) -> str:
    rec = coerce_record(record)
    formatter = _formatter_for(rec.content_type, html_as_xml=html_as_xml)
    if formatter is None:
        return rec.content
    return formatter(rec.content).or_original(rec.content)


def format_record(record: RecordLike | None) -> str:
    """Pretty-printed content for a record, chosen by its content type.

    ``json`` content types are re-indented as JSON, ``xml`` ones as XML; any
    other type, and any content that fails to format, comes back unchanged.
    """
    return _format(record, html_as_xml=False)


def format_for_display(record: RecordLike | None) -> str:
    """Like format_record(), but HTML content is indented like XML too."""
    return _format(record, html_as_xml=True)


# ─── Caller-owned memoization ────────────────────────────────────────────────


class FormatCache:
    """LRU memo of formatted content keyed by content type + content hash.

    Owned by the caller (typically one per results view). Not thread-safe.
    """

    def __init__(
        self,
        formatter: Callable[[RecordLike | None], str] = format_record,
        max_entries: int = 512,
    ) -> None:
        self._formatter = formatter
        self._max_entries = max(1, int(max_entries))
        self._entries: OrderedDict[tuple[str, str], str] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(record: Record) -> tuple[str, str]:
        digest = hashlib.sha256(record.content.encode("utf-8", "surrogatepass")).hexdigest()
        return (record.content_type.lower(), digest)

    def format(self, record: RecordLike | None) -> str:
        rec = coerce_record(record)
        key = self.make_key(rec)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            self._entries.move_to_end(key)
            return cached

        self.misses += 1
        text = self._formatter(rec)
        self._entries[key] = text
        if len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
        return text

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
