"""Domain models for the carrier registry viewer.

This package contains the field catalogue, row factory and the view-state
value objects (filter / sort / page) shared by the gviz reader and services.
"""

from .error_record import ErrorRecord
from .fetch import FetchDescriptor, FetchStatus
from .fields import FIELDS, Field, FieldKind, field_ids, get_field, lookup_field
from .row import Row, empty_row
from .view_state import FilterState, PageState, SortDirection, SortState

__all__ = [
    # Catalogue
    "FIELDS",
    "Field",
    "FieldKind",
    "field_ids",
    "get_field",
    "lookup_field",
    # Rows
    "Row",
    "empty_row",
    # View state
    "FilterState",
    "SortDirection",
    "SortState",
    "PageState",
    # Fetch
    "FetchDescriptor",
    "FetchStatus",
    # Diagnostics
    "ErrorRecord",
]
