from __future__ import annotations

import pytest

from carrier_viewer.gviz.decoder import DecodeError, decode_response

"""Envelope contract: a captured gviz response body decodes as-is."""

CAPTURED_RESPONSE = (
    "/*O_o*/\n"
    "google.visualization.Query.setResponse("
    '{"version":"0.6","reqId":"0","status":"ok","sig":"1872353154",'
    '"table":{"cols":['
    '{"id":"A","label":"created_dt","type":"datetime","pattern":"M/d/yyyy H:mm:ss"},'
    '{"id":"E","label":"legal_name","type":"string"},'
    '{"id":"R","label":"usdot_number","type":"number","pattern":"General"}],'
    '"rows":[{"c":[{"v":"Date(2024,0,5,0,0,0)","f":"1/5/2024 0:00:00"},'
    '{"v":"ACME TRUCKING LLC"},{"v":3456789.0,"f":"3456789"}]},'
    '{"c":[null,{"v":"BETA LOGISTICS"},null]}],'
    '"parsedNumHeaders":1}});'
)


def test_captured_response_decodes():
    table = decode_response(CAPTURED_RESPONSE)
    assert table.columns == ["created_dt", "legal_name", "usdot_number"]
    assert table.rows[0] == [
        ("created_dt", "Date(2024,0,5,0,0,0)"),
        ("legal_name", "ACME TRUCKING LLC"),
        ("usdot_number", "3456789"),
    ]
    assert table.rows[1] == [("created_dt", ""), ("legal_name", "BETA LOGISTICS"), ("usdot_number", "")]


@pytest.mark.parametrize("cut", [1, 8, 47])
def test_truncated_prefix_is_rejected(cut):
    with pytest.raises(DecodeError) as e:
        decode_response(CAPTURED_RESPONSE[cut:])
    assert e.value.reason == "envelope-mismatch"
