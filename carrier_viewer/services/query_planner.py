from __future__ import annotations

from ..models.fetch import FetchDescriptor
from ..models.fields import FIELDS
from ..models.view_state import PageState

"""Query planner: PageState -> remote fetch window.

Filtering and sorting are never pushed to the remote query. The SELECT
clause only names the source columns and the LIMIT/OFFSET window, so the
endpoint's query language never leaks into the filter semantics.
"""

__all__ = [
    "plan_fetch",
    "fetch_required",
    "build_select",
]


def plan_fetch(page: PageState) -> FetchDescriptor:
    """Fetch exactly ``page.size`` rows starting at ``page.index * page.size``."""
    return FetchDescriptor(offset=page.offset, limit=page.size)


def fetch_required(old: PageState | None, new: PageState) -> bool:
    """True when a transition between page states needs a new fetch.

    ``old=None`` is the mount case (nothing loaded yet).
    """
    if old is None:
        return True
    return old.index != new.index or old.size != new.size


def build_select(descriptor: FetchDescriptor) -> str:
    """gviz query text for a descriptor, e.g. ``SELECT A,B LIMIT 10 OFFSET 20``."""
    columns = ",".join(f.column for f in FIELDS)
    return f"SELECT {columns} LIMIT {descriptor.limit} OFFSET {descriptor.offset}"
