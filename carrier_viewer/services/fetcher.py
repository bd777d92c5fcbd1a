from __future__ import annotations

import logging

import httpx

from ..models.fetch import FetchDescriptor
from .query_planner import build_select

"""HTTP transport for the gviz query endpoint (httpx)."""

__all__ = [
    "NetworkError",
    "GvizFetcher",
    "DEFAULT_BASE_URL",
]

DEFAULT_BASE_URL = "https://docs.google.com/spreadsheets/d"

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """Transport failure or non-2xx HTTP status."""


class GvizFetcher:
    """Callable ``FetchDescriptor -> response text`` used by the data engine.

    ``timeout=None`` disables httpx timeouts: a hung request keeps the engine
    in LOADING until it returns.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.spreadsheet_id}/gviz/tq"

    def params(self, descriptor: FetchDescriptor) -> dict[str, str]:
        return {"tqx": "out:json", "tq": build_select(descriptor)}

    def __call__(self, descriptor: FetchDescriptor) -> str:
        params = self.params(descriptor)
        logger.debug(f"GET {self.url} tq={params['tq']!r} seq={descriptor.sequence}")
        try:
            res = self.client.get(self.url, params=params)
            res.raise_for_status()
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e
        return res.text

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> GvizFetcher:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
