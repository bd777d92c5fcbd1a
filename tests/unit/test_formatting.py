from __future__ import annotations

import pytest

from carrier_viewer.models.fields import get_field
from carrier_viewer.models.row import make_row
from carrier_viewer.models.view_state import PageState
from carrier_viewer.services.formatting import (
    EMPTY_TEXT,
    LOADING_TEXT,
    FormatError,
    format_cell,
    format_date,
    pagination_caption,
    parse_date,
    render_grid,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2020-01-15", "01/15/2020"),
        ("2020-01-15T13:45:00", "01/15/2020"),
        ("2020-01-15T13:45:00Z", "01/15/2020"),
        ("Date(2019,5,14)", "06/14/2019"),
        ("Date(2019,11,31,23,59,59)", "12/31/2019"),
    ],
)
def test_format_date(raw, expected):
    assert format_date(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "not a date", "2020-13-45", "Date(2019,12,40)"])
def test_parse_date_rejects_garbage(raw):
    with pytest.raises(FormatError):
        parse_date(raw)


def test_format_cell_falls_back_to_raw_value():
    created = get_field("created_dt")
    assert format_cell(created, "2020-01-15") == "01/15/2020"
    assert format_cell(created, "someday") == "someday"
    assert format_cell(created, "") == ""


def test_format_cell_leaves_text_fields_alone():
    assert format_cell(get_field("legal_name"), "2020-01-15") == "2020-01-15"
    assert format_cell(get_field("usdot_number"), "0012") == "0012"


def test_render_grid_loading_and_empty():
    assert render_grid([], loading=True) == LOADING_TEXT
    assert render_grid([make_row({"legal_name": "x"})], loading=True) == LOADING_TEXT
    assert render_grid([]) == EMPTY_TEXT


def test_render_grid_uses_labels_and_formats_dates():
    rows = [make_row({"legal_name": "ACME LLC", "created_dt": "2020-01-15", "out_of_service_date": "n/a"})]
    text = render_grid(rows)
    header = text.splitlines()[0]
    assert "Legal Name" in header
    assert "Out of Service Date" in header
    assert "ACME LLC" in text
    assert "01/15/2020" in text
    assert "n/a" in text


def test_render_grid_does_not_touch_rows():
    row = make_row({"created_dt": "2020-01-15"})
    render_grid([row])
    assert row["created_dt"] == "2020-01-15"


def test_pagination_caption():
    assert pagination_caption(PageState(0, 10), 100_000) == "rows 1-10 of ~100000"
    assert pagination_caption(PageState(2, 10), 100_000) == "rows 21-30 of ~100000"
    assert pagination_caption(PageState(0, 10), 5) == "rows 1-5 of ~5"
    assert pagination_caption(PageState(0, 10), 0) == "rows 0-0 of ~0"
