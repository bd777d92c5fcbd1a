from __future__ import annotations

from .engine import EngineSnapshot

"""Status line rendering for the SUMMARY log label."""


def _render_filters(snapshot: EngineSnapshot) -> str:
    active = snapshot.filters.active()
    if not active:
        return "-"
    return ",".join(f"{k}~{v}" for k, v in active.items())


def _render_sort(snapshot: EngineSnapshot) -> str:
    if not snapshot.sort.active:
        return "-"
    return f"{snapshot.sort.field_id}:{snapshot.sort.direction.value}"


def render_summary_line(snapshot: EngineSnapshot) -> str:
    """Render the SUMMARY line for an engine snapshot.

    Format:
    SUMMARY status={status} page={index} page_size={size} loaded={n}
    shown={m} filters={k~v,...|-} sort={field:dir|-}

    Examples:
        >>> from carrier_viewer.models import FetchStatus, FilterState, PageState, SortState
        >>> snap = EngineSnapshot(
        ...     rows=[], loading=False, error=None, status=FetchStatus.LOADED,
        ...     filters=FilterState(), sort=SortState(), page=PageState(2, 10),
        ...     total_count=100000, loaded_count=10,
        ... )
        >>> render_summary_line(snap)
        'SUMMARY status=loaded page=2 page_size=10 loaded=10 shown=0 filters=- sort=-'
    """
    return (
        f"SUMMARY status={snapshot.status.value} "
        f"page={snapshot.page.index} "
        f"page_size={snapshot.page.size} "
        f"loaded={snapshot.loaded_count} "
        f"shown={len(snapshot.rows)} "
        f"filters={_render_filters(snapshot)} "
        f"sort={_render_sort(snapshot)}"
    )
