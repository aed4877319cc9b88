"""Record data model: the unit of parsed query output.

// [LAW:one-source-of-truth] THE representation of one parsed part.
// [LAW:dataflow-not-control-flow] Absent fields are "" (a value), never None.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class Record:
    """One header/body unit of a query response."""

    content_type: str = ""
    primitive: str = ""
    uri: str = ""
    path: str = ""
    content: str = ""

    def to_dict(self) -> dict[str, str]:
        """Return the record keyed the way the results view names columns."""
        return {
            "contentType": self.content_type,
            "primitive": self.primitive,
            "uri": self.uri,
            "path": self.path,
            "content": self.content,
        }


# Ordered, immutable sequence of records from one parse call.
Envelope = tuple[Record, ...]


def coerce_record(value: Record | Mapping[str, object] | None) -> Record:
    """Build a Record from a Record or a record-like mapping.

    Accepts both ``contentType`` and ``content_type`` spellings. Missing or
    None fields become "".
    """
    if isinstance(value, Record):
        return value
    if not value:
        return Record()

    def _field(*names: str) -> str:
        for name in names:
            raw = value.get(name)
            if raw is not None:
                return str(raw)
        return ""

    return Record(
        content_type=_field("contentType", "content_type"),
        primitive=_field("primitive"),
        uri=_field("uri"),
        path=_field("path"),
        content=_field("content"),
    )
