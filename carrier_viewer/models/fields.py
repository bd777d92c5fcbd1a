from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Recognized field catalogue for the carrier registry.

The catalogue is closed: remote columns whose label does not resolve to one of
these twelve fields are ignored by the normalizer. Adding a field means adding
a triple here AND its source column letter, since the remote SELECT clause is
built from ``FIELDS`` in order.
"""

__all__ = [
    "FieldKind",
    "Field",
    "FIELDS",
    "field_ids",
    "get_field",
    "lookup_field",
]


class FieldKind(Enum):
    """Semantic kind of a field (display only, comparisons stay string based)."""
    TEXT = "text"
    DATE = "date"
    IDENTIFIER = "identifier"


@dataclass(frozen=True)
class Field:
    """One recognized registry attribute."""
    id: str  # column identifier used as Row key
    label: str  # human readable header
    kind: FieldKind
    column: str  # spreadsheet column letter in the remote SELECT


FIELDS: tuple[Field, ...] = (
    Field("created_dt", "Created Date", FieldKind.DATE, "A"),
    Field("data_source_modified_dt", "Modified Date", FieldKind.DATE, "B"),
    Field("entity_type", "Entity Type", FieldKind.TEXT, "C"),
    Field("operating_status", "Operating Status", FieldKind.TEXT, "D"),
    Field("legal_name", "Legal Name", FieldKind.TEXT, "E"),
    Field("dba_name", "DBA Name", FieldKind.TEXT, "F"),
    Field("physical_address", "Physical Address", FieldKind.TEXT, "G"),
    Field("phone", "Phone", FieldKind.TEXT, "L"),
    Field("usdot_number", "DOT Number", FieldKind.IDENTIFIER, "R"),
    Field("mc_mx_ff_number", "MC/MX/FF Number", FieldKind.IDENTIFIER, "S"),
    Field("power_units", "Power Units", FieldKind.TEXT, "T"),
    Field("out_of_service_date", "Out of Service Date", FieldKind.DATE, "V"),
)

_BY_ID: dict[str, Field] = {f.id: f for f in FIELDS}
_BY_LABEL: dict[str, Field] = {f.label.casefold(): f for f in FIELDS}


def field_ids() -> list[str]:
    """Field identifiers in catalogue order."""
    return [f.id for f in FIELDS]


def get_field(field_id: str) -> Field:
    """Return the Field for an identifier.

    Raises:
        KeyError: if the identifier is not part of the catalogue
    """
    try:
        return _BY_ID[field_id]
    except KeyError:
        raise KeyError(f"unknown field: {field_id!r}") from None


def lookup_field(name: str | None) -> Field | None:
    """Resolve a remote column label to a Field.

    The remote header row carries the identifiers (``usdot_number``), but a
    re-labelled sheet may use the display label (``DOT Number``) instead, so
    both are accepted. Returns None for anything else.
    """
    if not name:
        return None
    key = name.strip()
    if key in _BY_ID:
        return _BY_ID[key]
    return _BY_LABEL.get(key.casefold())
