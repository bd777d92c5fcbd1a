from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Fetch descriptor and engine lifecycle status."""

__all__ = [
    "FetchStatus",
    "FetchDescriptor",
]


class FetchStatus(Enum):
    """Data engine lifecycle.

    State transitions: idle → loading → (loaded | failed), and
    loaded/failed → loading on every page or page-size change.
    """
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchDescriptor:
    """A request for ``limit`` unfiltered, unsorted rows starting at ``offset``.

    ``sequence`` is assigned by the engine when the fetch is issued (0 = not yet
    issued) and is used to discard results of superseded requests.
    """
    offset: int
    limit: int
    sequence: int = 0
