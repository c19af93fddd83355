from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for per-file failure logging.

One record per failed upload, serialized as a JSON Lines entry with a fixed key
set. ``row`` is -1 for file-level failures (the usual case); ``sheet`` is
``FILE_LEVEL_SHEET`` when the workbook could not even be opened.
"""

__all__ = [
    "ErrorRecord",
    "FILE_LEVEL_SHEET",
]

FILE_LEVEL_SHEET = "<FILE_LEVEL>"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: uploaded file name
        sheet: sheet title, or FILE_LEVEL_SHEET
        row: 0-based sheet row, -1 when not row specific
        error_type: UPPER_SNAKE_CASE classification (HEADER_MISMATCH, READ_ERROR)
        message: human readable detail
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int  # 不明な場合 -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
