from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..gviz.decoder import DecodeError, decode_response
from ..gviz.normalizer import normalize_rows
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.fetch import FetchDescriptor, FetchStatus
from ..models.row import Row
from ..models.view_state import FilterState, PageState, SortDirection, SortState
from .fetcher import NetworkError
from .query_planner import fetch_required, plan_fetch
from .view_reducer import reduce_view

"""Data engine: owner of the view state and the loaded window.

The presentation layer talks to the engine through intent handlers
(``set_filter``, ``set_sort``, ``set_page``, ``set_page_size`` ...) and reads
``snapshot()``. Every intent replaces the relevant state object, then asks the
query planner whether the page transition needs a fetch. Filter and sort
changes reset the page index to 0; on page 0 that is not a transition, so
they never fetch there.

Fetch lifecycle:
- ``begin_fetch()`` issues a descriptor with the next sequence number and
  moves to LOADING
- ``settle()`` decodes + normalizes the response (or records the failure) and
  moves to LOADED / FAILED. Results for a superseded sequence number are
  dropped, so a slow response for an old page cannot overwrite a newer one.
- On failure the previous window stays in place (stale-but-present).
"""

logger = logging.getLogger(__name__)

__all__ = [
    "USER_ERROR_MESSAGE",
    "DEFAULT_NOMINAL_COUNT",
    "EngineSnapshot",
    "DataEngine",
]

USER_ERROR_MESSAGE = "Failed to load data. Please try again later."
# 総件数は別クエリなしでは不明なため固定のプレースホルダ
DEFAULT_NOMINAL_COUNT = 100_000

FetchPage = Callable[[FetchDescriptor], str]


@dataclass(frozen=True)
class EngineSnapshot:
    """Read contract exposed to the presentation layer."""
    rows: list[Row]  # View reducer output
    loading: bool
    error: str | None
    status: FetchStatus
    filters: FilterState
    sort: SortState
    page: PageState
    total_count: int  # 固定プレースホルダ (実件数ではない)
    loaded_count: int  # rows in the loaded window before filtering


class DataEngine:
    def __init__(
        self,
        fetch_page: FetchPage,
        *,
        page_size: int = 10,
        nominal_count: int = DEFAULT_NOMINAL_COUNT,
        diagnostics: ErrorLogBuffer | None = None,
    ) -> None:
        self._fetch_page = fetch_page
        self.nominal_count = nominal_count
        self.diagnostics = diagnostics

        self.filters = FilterState()
        self.sort = SortState()
        self.page = PageState(index=0, size=page_size)

        self.window: list[Row] = []
        self.status = FetchStatus.IDLE
        self.error: str | None = None
        self.last_descriptor: FetchDescriptor | None = None

        self._mounted = False
        self._sequence = 0
        self._fetch_count = 0

    # -- read contract -------------------------------------------------

    @property
    def loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def rows(self) -> list[Row]:
        """Displayed rows as copies; writing to them never reaches the window."""
        return [dict(row) for row in reduce_view(self.window, self.filters, self.sort)]

    @property
    def fetch_count(self) -> int:
        """Number of fetches issued so far."""
        return self._fetch_count

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            rows=self.rows,
            loading=self.loading,
            error=self.error,
            status=self.status,
            filters=self.filters,
            sort=self.sort,
            page=self.page,
            total_count=self.nominal_count,
            loaded_count=len(self.window),
        )

    # -- intents -------------------------------------------------------

    def mount(self) -> None:
        """Initial load. Intents applied before mount only shape the first fetch."""
        if self._mounted:
            return
        self._mounted = True
        self._load()

    def set_filter(self, field_id: str, pattern: str) -> None:
        self.filters = self.filters.with_pattern(field_id, pattern)
        logger.debug(f"filter {field_id}={pattern!r}")
        self._goto(self.page.with_index(0))

    def clear_filters(self) -> None:
        self.filters = FilterState()
        self._goto(self.page.with_index(0))

    def set_sort(self, field_id: str, direction: SortDirection | str = SortDirection.ASC) -> None:
        self.sort = SortState(field_id, SortDirection(direction))
        logger.debug(f"sort {field_id}:{self.sort.direction.value}")
        self._goto(self.page.with_index(0))

    def toggle_sort(self, field_id: str) -> None:
        self.sort = self.sort.toggled(field_id)
        self._goto(self.page.with_index(0))

    def clear_sort(self) -> None:
        self.sort = SortState()
        self._goto(self.page.with_index(0))

    def set_page(self, index: int) -> None:
        self._goto(self.page.with_index(index))

    def set_page_size(self, size: int) -> None:
        self._goto(self.page.with_size(size))

    def refresh(self) -> None:
        """Re-fetch the current page (single attempt, no backoff)."""
        if not self._mounted:
            self.mount()
            return
        self._load()

    # -- fetch lifecycle -----------------------------------------------

    def begin_fetch(self) -> FetchDescriptor:
        self._sequence += 1
        self._fetch_count += 1
        descriptor = replace(plan_fetch(self.page), sequence=self._sequence)
        self.last_descriptor = descriptor
        self.status = FetchStatus.LOADING
        self.error = None
        logger.debug(f"fetch seq={descriptor.sequence} offset={descriptor.offset} limit={descriptor.limit}")
        return descriptor

    def settle(
        self,
        descriptor: FetchDescriptor,
        *,
        text: str | None = None,
        error: Exception | None = None,
    ) -> bool:
        """Apply the outcome of a fetch.

        Returns False when the result belongs to a superseded request and was
        dropped, True otherwise.
        """
        if descriptor.sequence != self._sequence:
            logger.info(
                f"dropping stale response seq={descriptor.sequence} (latest={self._sequence})"
            )
            return False

        if error is None:
            try:
                rows = normalize_rows(decode_response(text or ""))
            except DecodeError as e:
                error = e
            else:
                self.window = rows
                self.status = FetchStatus.LOADED
                self.error = None
                logger.debug(f"loaded {len(rows)} rows seq={descriptor.sequence}")
                return True

        self._fail(descriptor, error)
        return True

    def _fail(self, descriptor: FetchDescriptor, error: Exception) -> None:
        error_type = "DECODE_ERROR" if isinstance(error, DecodeError) else "NETWORK_ERROR"
        logger.error(
            f"fetch failed seq={descriptor.sequence} offset={descriptor.offset} "
            f"type={error_type}: {error}"
        )
        if self.diagnostics is not None:
            self.diagnostics.append(
                ErrorRecord.create(
                    sequence=descriptor.sequence,
                    offset=descriptor.offset,
                    limit=descriptor.limit,
                    error_type=error_type,
                    message=str(error),
                )
            )
        self.status = FetchStatus.FAILED
        self.error = USER_ERROR_MESSAGE

    def _load(self) -> None:
        descriptor = self.begin_fetch()
        try:
            text = self._fetch_page(descriptor)
        except NetworkError as e:
            self.settle(descriptor, error=e)
            return
        self.settle(descriptor, text=text)

    def _goto(self, new_page: PageState) -> None:
        old_page = self.page
        self.page = new_page
        if self._mounted and fetch_required(old_page, new_page):
            self._load()
