from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

"""Response decoder for the gviz ``tqx=out:json`` endpoint.

The endpoint does not return plain JSON: the payload is wrapped in a JSONP-like
envelope

    /*O_o*/
    google.visualization.Query.setResponse({...});

so the fixed 47 character prefix and 2 character suffix are stripped before the
remainder is parsed. Columns are reported with their declared label; the
decoder keeps labels as-is and leaves field resolution to the normalizer.
"""

__all__ = [
    "ENVELOPE_PREFIX",
    "ENVELOPE_SUFFIX",
    "DecodeError",
    "DecodedTable",
    "decode_response",
    "cell_to_text",
]

ENVELOPE_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
ENVELOPE_SUFFIX = ");"


class DecodeError(Exception):
    """Raised when a response cannot be decoded.

    ``reason`` is one of ``envelope-mismatch`` (prefix/suffix missing or the
    inner text is not JSON), ``remote-error`` (the query itself failed on the
    server) or ``structure`` (JSON parsed but the table shape is wrong).
    """

    def __init__(self, reason: str, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)


@dataclass
class DecodedTable:
    columns: list[str]  # 宣言順の列ラベル
    rows: list[list[tuple[str, str]]]  # 行ごとの (label, value) ペア


def cell_to_text(value: Any) -> str:
    """Render a raw cell value as the string stored in a Row.

    null -> "", bool -> "true"/"false", integral floats lose their ``.0``
    (numeric columns such as DOT numbers arrive as JSON numbers).
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _strip_envelope(text: str) -> str:
    body = text.rstrip()
    if not body.startswith(ENVELOPE_PREFIX) or not body.endswith(ENVELOPE_SUFFIX):
        raise DecodeError("envelope-mismatch", "response is not wrapped in the gviz setResponse envelope")
    return body[len(ENVELOPE_PREFIX):-len(ENVELOPE_SUFFIX)]


def _remote_error_message(payload: dict[str, Any]) -> str:
    errors = payload.get("errors") or []
    if errors and isinstance(errors[0], dict):
        first = errors[0]
        return str(first.get("detailed_message") or first.get("message") or first.get("reason") or "")
    return "query returned status=error"


def decode_response(text: str) -> DecodedTable:
    """Decode raw response text into ordered (label, value) pairs per row.

    Raises:
        DecodeError: envelope missing, JSON invalid, remote error status or
            malformed table structure
    """
    inner = _strip_envelope(text)
    try:
        payload = json.loads(inner)
    except json.JSONDecodeError as e:
        raise DecodeError("envelope-mismatch", f"invalid json: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError("structure", "payload is not an object")
    if payload.get("status") == "error":
        raise DecodeError("remote-error", _remote_error_message(payload))

    table = payload.get("table")
    if not isinstance(table, dict):
        raise DecodeError("structure", "missing 'table'")
    cols = table.get("cols")
    raw_rows = table.get("rows")
    if not isinstance(cols, list) or not isinstance(raw_rows, list):
        raise DecodeError("structure", "'table' lacks 'cols'/'rows' lists")

    columns: list[str] = []
    for col in cols:
        if not isinstance(col, dict):
            raise DecodeError("structure", "column entry is not an object")
        columns.append(str(col.get("label") or ""))

    rows: list[list[tuple[str, str]]] = []
    for index, raw in enumerate(raw_rows):
        if not isinstance(raw, dict) or not isinstance(raw.get("c"), list):
            raise DecodeError("structure", f"row {index} has no cell list")
        cells = raw["c"]
        pairs: list[tuple[str, str]] = []
        for pos, label in enumerate(columns):
            # セル数が列数より少ない行は欠損セルを null 扱い
            cell = cells[pos] if pos < len(cells) else None
            value = cell.get("v") if isinstance(cell, dict) else None
            pairs.append((label, cell_to_text(value)))
        rows.append(pairs)

    return DecodedTable(columns=columns, rows=rows)
