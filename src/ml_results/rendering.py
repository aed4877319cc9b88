"""Rich rendering for parsed query records.

Converts Records into Rich renderables: a summary table for the envelope and
a syntax-highlighted view of one record's formatted content. Shared by the
CLI and the Textual results view.

# Pygments Syntax() is for record CONTENT only. Table chrome uses plain styles.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from ml_results.core.formatting import FormatCache, format_record
from ml_results.core.languages import PLAINTEXT, language_from_content_type
from ml_results.core.records import Record

PREVIEW_MAX_LEN = 60

# Language tag -> Pygments lexer name, where they differ.
_LEXER_ALIASES = {PLAINTEXT: "text"}

TABLE_COLUMNS = ("#", "Content-Type", "Primitive", "URI", "Path", "Content")


def lexer_for(language: str) -> str:
    return _LEXER_ALIASES.get(language, language)


def content_preview(text: str, max_len: int = PREVIEW_MAX_LEN) -> str:
    """Single-line preview, truncated with an ellipsis."""
    preview = " ".join(text.split())
    if len(preview) > max_len:
        preview = preview[:max_len] + "…"
    return preview


def record_row(index: int, record: Record) -> tuple[str, ...]:
    return (
        str(index),
        record.content_type,
        record.primitive,
        record.uri,
        record.path,
        content_preview(record.content),
    )


def records_table(
    records: Sequence[Record],
    *,
    start: int = 0,
    title: str | None = None,
) -> Table:
    """Summary table; row numbers are 1-based positions in the whole envelope."""
    table = Table(title=title, show_lines=False, expand=False)
    for name in TABLE_COLUMNS:
        table.add_column(name, overflow="fold", no_wrap=(name == "#"))
    for offset, record in enumerate(records):
        table.add_row(*record_row(start + offset + 1, record))
    return table


def record_syntax(
    record: Record,
    *,
    theme: str = "monokai",
    cache: FormatCache | None = None,
    line_numbers: bool = False,
) -> Syntax:
    """Formatted record content, highlighted for its content type."""
    text = cache.format(record) if cache is not None else format_record(record)
    language = language_from_content_type(record.content_type)
    return Syntax(
        text,
        lexer_for(language),
        theme=theme,
        line_numbers=line_numbers,
        word_wrap=True,
        background_color="default",
    )


def record_header(index: int, total: int, record: Record) -> Text:
    """One-line label: position plus whichever header fields are present."""
    t = Text()
    t.append(f"Record {index} of {total}", style="bold")
    for label, value in (
        ("type", record.content_type),
        ("primitive", record.primitive),
        ("uri", record.uri),
        ("path", record.path),
    ):
        if value:
            t.append(f"  {label}=", style="dim")
            t.append(value)
    return t
