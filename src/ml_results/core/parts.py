"""Single-part parsing: ``Name: value`` header block, blank line, body.

// [LAW:dataflow-not-control-flow] parse_single() is total: text in, Record out.
"""

from __future__ import annotations

import re

from ml_results.core.records import Record


_BOM = "\ufeff"

# First blank line between header block and body. CRLF and LF both accepted.
_SEPARATOR_RE = re.compile(r"\r?\n\r?\n")

# Header name (lowercased) -> Record field.
RECOGNIZED_HEADERS = {
    "content-type": "content_type",
    "x-primitive": "primitive",
    "x-uri": "uri",
    "x-path": "path",
}


def parse_headers(block: str) -> dict[str, str]:
    """Parse a header block into a dict keyed by lowercased header name.

    Lines without a colon are skipped. For repeated headers the first wins.
    """
    headers: dict[str, str] = {}
    for line in block.splitlines():
        name, sep, value = line.partition(":")
        if not sep:
            continue
        key = name.strip().lower()
        if key and key not in headers:
            headers[key] = value.strip()
    return headers


def parse_single(text: str) -> Record:
    """Parse one header/body unit into a Record.

    Everything after the first blank line is content, verbatim. Without a
    blank line the whole input is content and every header field is "".
    """
    txt = str(text or "")
    if txt.startswith(_BOM):
        txt = txt[len(_BOM):]

    m = _SEPARATOR_RE.search(txt)
    if not m:
        return Record(content=txt)

    headers = parse_headers(txt[: m.start()])
    fields = {
        field: headers[name]
        for name, field in RECOGNIZED_HEADERS.items()
        if name in headers
    }
    return Record(content=txt[m.end():], **fields)
