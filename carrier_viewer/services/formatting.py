from __future__ import annotations

import logging
import re
from collections.abc import Sequence

import pandas as pd

from ..models.fields import FIELDS, Field, FieldKind
from ..models.row import Row
from ..models.view_state import PageState

"""Presentation formatting for the grid.

Date-kind cells are shown as MM/DD/YYYY. Parsing failures raise FormatError
internally and the cell falls back to its raw value; the Row itself is never
touched, so filtering/sorting keep working on the raw strings.
"""

__all__ = [
    "FormatError",
    "parse_date",
    "format_date",
    "format_cell",
    "render_grid",
    "pagination_caption",
    "LOADING_TEXT",
    "EMPTY_TEXT",
]

logger = logging.getLogger(__name__)

DISPLAY_DATE_FMT = "%m/%d/%Y"
LOADING_TEXT = "Loading data..."
EMPTY_TEXT = "No data available"

# gviz の日付リテラル: Date(2019,5,14) (月は 0 始まり)
_GVIZ_DATE = re.compile(
    r"^Date\((\d{1,4}),(\d{1,2}),(\d{1,2})(?:,(\d{1,2}),(\d{1,2}),(\d{1,2}))?\)$"
)


class FormatError(ValueError):
    """A value cannot be rendered in its declared kind."""


def parse_date(value: str) -> pd.Timestamp:
    """Parse an ISO-8601 string or a gviz ``Date(y,m,d[,h,mi,s])`` literal.

    Raises:
        FormatError: value is empty or not a parseable date
    """
    text = value.strip()
    if not text:
        raise FormatError("empty date value")

    m = _GVIZ_DATE.match(text)
    if m:
        year, month, day, hour, minute, second = (int(p) if p else 0 for p in m.groups())
        try:
            return pd.Timestamp(
                year=year, month=month + 1, day=day, hour=hour, minute=minute, second=second
            )
        except ValueError as e:
            raise FormatError(f"invalid date literal {text!r}: {e}") from e

    try:
        ts = pd.to_datetime(text, format="ISO8601")
    except (ValueError, TypeError, OverflowError) as e:
        raise FormatError(f"unparseable date {text!r}: {e}") from e
    if pd.isna(ts):
        raise FormatError(f"unparseable date {text!r}")
    return ts


def format_date(value: str) -> str:
    return parse_date(value).strftime(DISPLAY_DATE_FMT)


def format_cell(field: Field, value: str) -> str:
    if field.kind is not FieldKind.DATE or not value:
        return value
    try:
        return format_date(value)
    except FormatError as e:
        logger.debug(f"format {field.id}: {e}")
        return value


def render_grid(rows: Sequence[Row], *, loading: bool = False) -> str:
    """Text table with display labels as headers."""
    if loading:
        return LOADING_TEXT
    if not rows:
        return EMPTY_TEXT
    records = [{f.label: format_cell(f, row.get(f.id, "")) for f in FIELDS} for row in rows]
    df = pd.DataFrame(records, columns=[f.label for f in FIELDS])
    return df.to_string(index=False)


def pagination_caption(page: PageState, total_count: int) -> str:
    """``rows 11-20 of ~100000``; the total is a placeholder, hence the ``~``."""
    if total_count <= 0:
        return "rows 0-0 of ~0"
    start = min(page.offset + 1, total_count)
    end = min(page.offset + page.size, total_count)
    return f"rows {start}-{end} of ~{total_count}"
