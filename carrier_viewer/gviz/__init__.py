"""Readers for the Google Visualization (gviz) JSON response format."""

from .decoder import DecodedTable, DecodeError, decode_response
from .normalizer import normalize_row, normalize_rows

__all__ = [
    "DecodedTable",
    "DecodeError",
    "decode_response",
    "normalize_row",
    "normalize_rows",
]
