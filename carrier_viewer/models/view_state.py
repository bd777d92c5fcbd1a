from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from .fields import get_field

"""User-controlled view parameters: filters, sort and paging.

All three are immutable value objects. The engine replaces them wholesale on
every intent, which keeps the "did the page change?" check a plain equality
comparison between the old and new PageState.
"""

__all__ = [
    "FilterState",
    "SortDirection",
    "SortState",
    "PageState",
]


@dataclass(frozen=True)
class FilterState:
    """Field identifier -> case-insensitive substring pattern.

    Empty patterns are kept in ``patterns`` (the toolbar shows them as empty
    inputs) but never constrain a row.
    """
    patterns: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only copy; callers holding a snapshot cannot edit the filters
        object.__setattr__(self, "patterns", MappingProxyType(dict(self.patterns)))

    def with_pattern(self, field_id: str, pattern: str) -> FilterState:
        get_field(field_id)  # KeyError for unknown fields
        updated = dict(self.patterns)
        updated[field_id] = pattern or ""
        return FilterState(patterns=updated)

    def active(self) -> dict[str, str]:
        """Only the constraining (non-empty) patterns."""
        return {k: v for k, v in self.patterns.items() if v}

    def matches(self, row: Mapping[str, str]) -> bool:
        for field_id, pattern in self.active().items():
            value = row.get(field_id) or ""
            if pattern.casefold() not in str(value).casefold():
                return False
        return True

    def __bool__(self) -> bool:
        return bool(self.active())


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortState:
    """At most one active (field, direction) pair. ``field_id=None`` means unsorted."""
    field_id: str | None = None
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        if self.field_id is not None:
            get_field(self.field_id)
        if not isinstance(self.direction, SortDirection):
            object.__setattr__(self, "direction", SortDirection(self.direction))

    @property
    def active(self) -> bool:
        return self.field_id is not None

    def toggled(self, field_id: str) -> SortState:
        """Header-click semantics: same field ascending -> descending, otherwise ascending."""
        if self.field_id == field_id and self.direction is SortDirection.ASC:
            return SortState(field_id, SortDirection.DESC)
        return SortState(field_id, SortDirection.ASC)


@dataclass(frozen=True)
class PageState:
    """Zero-based page index and page size."""
    index: int = 0
    size: int = 10

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"page index must be >= 0, got {self.index}")
        if self.size <= 0:
            raise ValueError(f"page size must be > 0, got {self.size}")

    @property
    def offset(self) -> int:
        return self.index * self.size

    def with_index(self, index: int) -> PageState:
        return replace(self, index=index)

    def with_size(self, size: int) -> PageState:
        # ページサイズ変更時は先頭ページに戻す
        return PageState(index=0, size=size)
