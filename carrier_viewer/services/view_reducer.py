from __future__ import annotations

import unicodedata
from collections.abc import Sequence

from ..models.row import Row
from ..models.view_state import FilterState, SortDirection, SortState

"""View reducer: (LoadedWindow, FilterState, SortState) -> displayed rows.

Pure function of its inputs; neither the window nor its rows are mutated.
Values are always compared as strings, also for date and identifier fields.
"""

__all__ = [
    "reduce_view",
    "filter_rows",
    "sort_rows",
    "collation_key",
]


# Primary character classes, root-collation order: punctuation and symbols,
# then digits, then letters.
_PUNCT, _DIGIT, _LETTER = 0, 1, 2


def _char_class(ch: str) -> int:
    if ch.isdigit():
        return _DIGIT
    if ch.isalpha():
        return _LETTER
    return _PUNCT


def collation_key(value: str) -> tuple:
    """Locale-style multi-level sort key.

    - primary: accents and case ignored; punctuation < digits < letters
      (``"_x" < "1st" < "acme" < "Beta" < "échelon"``)
    - secondary: unaccented before accented
    - tertiary: lowercase before uppercase (``"acme" < "ACME"``)

    The raw value breaks any remaining tie, so only identical strings compare
    equal.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    primary = tuple((_char_class(ch), ch) for ch in base)
    secondary = decomposed.casefold()
    return (primary, secondary, value.swapcase(), value)


def filter_rows(rows: Sequence[Row], filters: FilterState) -> list[Row]:
    if not filters:
        return list(rows)
    return [row for row in rows if filters.matches(row)]


def sort_rows(rows: Sequence[Row], sort: SortState) -> list[Row]:
    if not sort.active:
        return list(rows)
    field_id = sort.field_id
    # sorted() は reverse=True でも安定 (同値行の相対順序を保持)
    return sorted(
        rows,
        key=lambda row: collation_key(row.get(field_id) or ""),
        reverse=sort.direction is SortDirection.DESC,
    )


def reduce_view(rows: Sequence[Row], filters: FilterState, sort: SortState) -> list[Row]:
    """Filter, then stable-sort. Empty input yields an empty list."""
    return sort_rows(filter_rows(rows, filters), sort)
