"""Textual results browser for a parsed query response.

Record table on top, syntax-highlighted content of the active record below.
Paging and record navigation are delegated to RecordPager; formatting goes
through one FormatCache owned by the app.

// [LAW:single-enforcer] _refresh_content() is the only place the content pane is updated.
"""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import DataTable, Footer, Static

from ml_results.core.formatting import FormatCache, format_for_display
from ml_results.core.paging import DEFAULT_PAGE_SIZE, RecordPager
from ml_results.core.records import Record
from ml_results.rendering import TABLE_COLUMNS, record_header, record_row, record_syntax


class ResultsApp(App):
    """Browse the records of one query response."""

    DEFAULT_CSS = """
    #records-table {
        height: 40%;
    }

    #record-header {
        padding: 0 1;
        color: $text-muted;
    }

    #record-scroll {
        height: 1fr;
        border: round $panel-lighten-1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("j", "next_record", "Next record"),
        Binding("k", "prev_record", "Prev record"),
        Binding("n", "next_page", "Next page"),
        Binding("p", "prev_page", "Prev page"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        records: Sequence[Record],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        code_theme: str = "monokai",
        source_name: str = "",
    ) -> None:
        super().__init__()
        self._pager = RecordPager(records, page_size=page_size)
        self._cache = FormatCache(formatter=format_for_display)
        self._code_theme = code_theme
        self._source_name = source_name

    @property
    def pager(self) -> RecordPager:
        return self._pager

    def compose(self) -> ComposeResult:
        yield DataTable(id="records-table", cursor_type="row", zebra_stripes=True)
        yield Static("", id="record-header")
        with VerticalScroll(id="record-scroll"):
            yield Static("No records.", id="record-content")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "ml-results"
        self.sub_title = self._source_name
        table = self.query_one("#records-table", DataTable)
        table.add_columns(*TABLE_COLUMNS)
        self._load_page()

    # ─── Rendering ───────────────────────────────────────────────────────────

    def _load_page(self) -> None:
        table = self.query_one("#records-table", DataTable)
        table.clear()
        start = self._pager.start
        for offset, record in enumerate(self._pager.page_records):
            table.add_row(*record_row(start + offset + 1, record))
        self._refresh_content()

    def _refresh_content(self) -> None:
        header = self.query_one("#record-header", Static)
        content = self.query_one("#record-content", Static)
        record = self._pager.active_record
        if record is None:
            header.update("")
            content.update("No records.")
            return
        position = self._pager.start + self._pager.active_index + 1
        header.update(record_header(position, self._pager.total_records, record))
        content.update(record_syntax(record, theme=self._code_theme, cache=self._cache))

    def _sync_cursor(self) -> None:
        table = self.query_one("#records-table", DataTable)
        if table.row_count:
            table.move_cursor(row=self._pager.active_index)

    # ─── Events & actions ────────────────────────────────────────────────────

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.cursor_row == self._pager.active_index:
            return
        self._pager.set_active(event.cursor_row)
        self._refresh_content()

    def action_next_record(self) -> None:
        self._pager.next_record()
        self._sync_cursor()
        self._refresh_content()

    def action_prev_record(self) -> None:
        self._pager.prev_record()
        self._sync_cursor()
        self._refresh_content()

    def action_next_page(self) -> None:
        before = self._pager.current_page
        if self._pager.next_page() != before:
            self._load_page()

    def action_prev_page(self) -> None:
        before = self._pager.current_page
        if self._pager.prev_page() != before:
            self._load_page()

    def get_state(self) -> dict[str, object]:
        """Expose navigation state for deterministic tests."""
        record = self._pager.active_record
        return {
            "page": self._pager.current_page,
            "total_pages": self._pager.total_pages,
            "active_index": self._pager.active_index,
            "active_uri": record.uri if record is not None else None,
            "rows": self.query_one("#records-table", DataTable).row_count,
        }
