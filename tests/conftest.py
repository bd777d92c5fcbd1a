# Shared pytest fixtures
from __future__ import annotations
import json
import tempfile
from pathlib import Path

import pytest

from carrier_viewer.gviz.decoder import ENVELOPE_PREFIX, ENVELOPE_SUFFIX
from carrier_viewer.models.fields import field_ids


def build_envelope(labels: list[str], rows: list[list[object]], status: str = "ok") -> str:
    """Wrap a gviz table payload in the setResponse envelope."""
    payload = {
        "version": "0.6",
        "reqId": "0",
        "status": status,
        "sig": "1234567890",
        "table": {
            "cols": [
                {"id": chr(65 + i), "label": label, "type": "string"}
                for i, label in enumerate(labels)
            ],
            "rows": [
                {"c": [None if v is None else {"v": v} for v in row]}
                for row in rows
            ],
            "parsedNumHeaders": 1,
        },
    }
    return ENVELOPE_PREFIX + json.dumps(payload) + ENVELOPE_SUFFIX


class FakeSource:
    """fetch_page stand-in: records descriptors, replays queued responses.

    A queued Exception instance is raised instead of returned.
    """

    def __init__(self, *responses: object, default: str | None = None) -> None:
        self.queue = list(responses)
        self.default = default
        self.calls = []

    def __call__(self, descriptor):
        self.calls.append(descriptor)
        item = self.queue.pop(0) if self.queue else self.default
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    monkeypatch.delenv("CARRIER_VIEWER_SPREADSHEET_ID", raising=False)
    monkeypatch.delenv("CARRIER_VIEWER_BASE_URL", raising=False)
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """spreadsheet_id: test-sheet-id
base_url: https://sheets.example.test/d
page_size: 5
nominal_count: 500
timeout_seconds: null
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "viewer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_envelope():
    return build_envelope


@pytest.fixture()
def sample_rows() -> list[list[object]]:
    """Three carriers in field catalogue order."""
    return [
        ["2020-01-15", "2023-02-01", "CARRIER", "ACTIVE", "ACME LLC", "", "1 Main St", "555-0100", 1234567.0, "MC-100", 3.0, None],
        ["2019-06-30", "2023-02-01", "BROKER", "INACTIVE", "Beta Co", "Beta", "2 Side St", "555-0101", 2222222.0, "MC-200", 1.0, "2021-03-04"],
        ["2021-11-11", "2023-02-02", "CARRIER", "ACTIVE", "acme freight", "AF", "3 High St", "555-0102", 3333333.0, None, 12.0, None],
    ]


@pytest.fixture()
def sample_envelope(make_envelope, sample_rows) -> str:
    return make_envelope(field_ids(), sample_rows)


@pytest.fixture()
def fake_source():
    return FakeSource
