"""Buffered query result: raw eval response → records + flattened text.

This is the seam between the HTTP collaborator (which hands over status,
headers and body) and the parsing core.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from ml_results.core.boundary import boundary_from_content_type
from ml_results.core.errors import QueryFailedError
from ml_results.core.multipart import parse_multipart
from ml_results.core.records import Envelope

logger = logging.getLogger(__name__)

NO_RESULTS_TEXT = "Query executed successfully (no results)"


@dataclass(frozen=True)
class QueryResult:
    raw: str
    records: Envelope
    formatted: str
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def total_records(self) -> int:
        return len(self.records)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return value
    return None


def build_query_result(
    raw: str,
    *,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
    boundary: str | None = None,
) -> QueryResult:
    """Parse a buffered eval response.

    Raises:
        QueryFailedError: status outside 200-299. The body (or ``HTTP <status>``)
            is the message.
    """
    body = raw or ""
    hdrs = dict(headers or {})
    if status < 200 or status >= 300:
        raise QueryFailedError(body or f"HTTP {status}", status)

    token = boundary or boundary_from_content_type(_header(hdrs, "content-type"))
    records = parse_multipart(body, token)
    formatted = "\n".join(r.content for r in records) or NO_RESULTS_TEXT
    logger.debug("parsed %d records from %d-char response", len(records), len(body))
    return QueryResult(
        raw=body,
        records=records,
        formatted=formatted,
        status=status,
        headers=hdrs,
    )
