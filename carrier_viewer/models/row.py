from __future__ import annotations

from collections.abc import Mapping

from .fields import FIELDS

"""Row model: one registry record keyed by every recognized field."""

__all__ = [
    "Row",
    "empty_row",
    "make_row",
]

# 値は常に文字列 (欠損は "")
Row = dict[str, str]


def empty_row() -> Row:
    """Row with all twelve fields set to the empty string, in catalogue order."""
    return {f.id: "" for f in FIELDS}


def make_row(values: Mapping[str, str]) -> Row:
    """Build a Row from a partial mapping; unknown keys are dropped."""
    row = empty_row()
    for key in row:
        value = values.get(key)
        if value is not None:
            row[key] = str(value)
    return row
