"""Multipart boundary handling: literal escaping and boundary discovery.

// [LAW:single-enforcer] Every boundary-derived pattern is built from escape_boundary().
"""

from __future__ import annotations

import re


# First delimiter-looking line: --token or --token-- (token has no '-', CR, LF).
_DELIMITER_LINE_RE = re.compile(r"^--([^\r\n-]+)(?:--)?[ \t\r]*$", re.MULTILINE)

# boundary parameter of a multipart Content-Type header, quoted or bare.
_BOUNDARY_PARAM_RE = re.compile(
    r"""boundary\s*=\s*(?:"([^"]*)"|([^;\s]+))""", re.IGNORECASE
)


def escape_boundary(boundary: str) -> str:
    """Return a regex matching only literal occurrences of *boundary*."""
    return re.escape(str(boundary or ""))


def boundary_from_content_type(content_type: str | None) -> str | None:
    """Extract the boundary parameter from a ``multipart/*`` Content-Type value.

    >>> boundary_from_content_type('multipart/mixed; boundary="abc 123"')
    'abc 123'
    """
    if not content_type:
        return None
    m = _BOUNDARY_PARAM_RE.search(content_type)
    if not m:
        return None
    token = m.group(1) if m.group(1) is not None else m.group(2)
    return token or None


def detect_boundary(text: str) -> str | None:
    """Guess the boundary from the first delimiter-shaped line of *text*."""
    if not text:
        return None
    m = _DELIMITER_LINE_RE.search(text)
    return m.group(1) if m else None
