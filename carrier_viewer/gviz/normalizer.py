from __future__ import annotations

from collections.abc import Iterable

from ..models.fields import lookup_field
from ..models.row import Row, empty_row
from .decoder import DecodedTable

"""Row normalizer: decoded (label, value) pairs -> fixed-schema Row.

Pure and total. Unrecognized labels are dropped, recognized fields missing
from the response stay "". Source row order is preserved.
"""

__all__ = [
    "normalize_row",
    "normalize_rows",
]


def normalize_row(pairs: Iterable[tuple[str, str]]) -> Row:
    row = empty_row()
    for label, value in pairs:
        field = lookup_field(label)
        if field is None:
            continue
        row[field.id] = value if value is not None else ""
    return row


def normalize_rows(table: DecodedTable) -> list[Row]:
    return [normalize_row(pairs) for pairs in table.rows]
