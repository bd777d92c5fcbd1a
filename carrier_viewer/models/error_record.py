from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for fetch diagnostics.

Users only ever see one generic message when a page fails to load. The
underlying cause (transport vs. decode) is kept here so it can be written to
the JSON Lines diagnostics log.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        sequence: Fetch sequence number the error belongs to
        offset: Requested start row
        limit: Requested row count
        error_type: NETWORK_ERROR or DECODE_ERROR
        message: Underlying error message (decode reason included)
    """
    timestamp: str  # ISO8601 UTC
    sequence: int
    offset: int
    limit: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(sequence: int, offset: int, limit: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            sequence=sequence,
            offset=offset,
            limit=limit,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
