from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for rejected-upload logging.

One ErrorRecord per validation or decode problem, serialised as a JSON Lines
entry with a fixed key set. ``row=-1`` marks file-level errors where no data
row applies (missing columns, undecodable file, ...).
"""

__all__ = [
    "ErrorRecord",
    "row_number_from_message",
]

_ROW_PREFIX = re.compile(r"^Row (\d+): ")


def row_number_from_message(message: str) -> int:
    """Extract the 1-based row number from a ``"Row N: ..."`` message, else -1."""
    m = _ROW_PREFIX.match(message)
    return int(m.group(1)) if m else -1


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded filename
        row: Data row number (1-based). -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable description shown to the user
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
