"""Page-at-a-time navigation over a parsed Envelope.

Pure in-memory state machine; the results view asks it which records to show
and which one is active. All moves clamp at the edges instead of raising.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ml_results.core.records import Record

DEFAULT_PAGE_SIZE = 50


def _clamp(value: int, lo: int, hi: int) -> int:
    return min(max(value, lo), hi)


class RecordPager:
    def __init__(self, records: Sequence[Record], page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._records = tuple(records)
        self.page_size = max(1, int(page_size))
        self.current_page = 0
        self.active_index = 0

    @property
    def total_records(self) -> int:
        return len(self._records)

    @property
    def total_pages(self) -> int:
        if not self._records:
            return 0
        return math.ceil(len(self._records) / self.page_size)

    @property
    def start(self) -> int:
        return self.current_page * self.page_size

    @property
    def page_records(self) -> tuple[Record, ...]:
        return self._records[self.start : self.start + self.page_size]

    @property
    def active_record(self) -> Record | None:
        page = self.page_records
        if not page:
            return None
        return page[self.active_index]

    def jump_to_page(self, page: int) -> int:
        """Go to *page* (clamped); resets the active record to the page's first."""
        self.current_page = _clamp(page, 0, max(self.total_pages - 1, 0))
        self.active_index = 0
        return self.current_page

    def next_page(self) -> int:
        if (self.current_page + 1) * self.page_size >= self.total_records:
            return self.current_page
        return self.jump_to_page(self.current_page + 1)

    def prev_page(self) -> int:
        if self.current_page == 0:
            return 0
        return self.jump_to_page(self.current_page - 1)

    def set_active(self, index: int) -> int:
        self.active_index = _clamp(index, 0, max(len(self.page_records) - 1, 0))
        return self.active_index

    def next_record(self) -> int:
        return self.set_active(self.active_index + 1)

    def prev_record(self) -> int:
        return self.set_active(self.active_index - 1)
