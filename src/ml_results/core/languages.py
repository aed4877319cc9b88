"""Syntax-highlighting language tags for record content and query editors.

// [LAW:dataflow-not-control-flow] Lookups are table/priority driven; no side effects.
"""

from __future__ import annotations


PLAINTEXT = "plaintext"

QUERY_TYPES = ("xquery", "javascript", "sparql")

_QUERY_LANGUAGES = {
    "javascript": "javascript",
    "xquery": "xml",
    "sparql": "sql",
}

# Checked in order; first substring hit wins. "js" also catches "json", so
# json must stay ahead of javascript.
_CONTENT_TYPE_LANGUAGES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("json",), "json"),
    (("xml",), "xml"),
    (("html",), "html"),
    (("javascript", "js"), "javascript"),
)


def language_from_content_type(content_type: str | None) -> str:
    if not content_type:
        return PLAINTEXT
    ct = str(content_type).lower()
    for needles, language in _CONTENT_TYPE_LANGUAGES:
        if any(n in ct for n in needles):
            return language
    return PLAINTEXT


def language_from_query_type(query_type: str | None) -> str:
    return _QUERY_LANGUAGES.get(query_type or "", PLAINTEXT)


def resolve_language(value: str | None) -> str:
    """Language for either a query type (``xquery``) or a content type (``text/xml``)."""
    if value in _QUERY_LANGUAGES:
        return _QUERY_LANGUAGES[value]
    return language_from_content_type(value)
