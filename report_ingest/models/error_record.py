from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per file that could not be parsed. The sheet is ``"<FILE_LEVEL>"``
when the failure is not tied to a sheet (unreadable bytes, unexpected
structure deep inside a parser).
"""

__all__ = [
    "ErrorRecord",
    "FILE_LEVEL",
]

FILE_LEVEL = "<FILE_LEVEL>"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: uploaded file name
        family: report family the file was classified into
        sheet: sheet name, or FILE_LEVEL
        error_type: error classification in UPPER_SNAKE_CASE
        message: exception text
    """
    timestamp: str
    file: str
    family: str
    sheet: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, family: str, error_type: str, message: str, sheet: str = FILE_LEVEL) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            family=family,
            sheet=sheet,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_exception(file: str, family: str, exc: BaseException) -> ErrorRecord:
        # ValueError -> VALUE_ERROR, WorkbookReadError -> WORKBOOK_READ_ERROR
        name = type(exc).__name__
        snake = "".join(f"_{ch}" if ch.isupper() and i else ch for i, ch in enumerate(name)).upper()
        return ErrorRecord.create(file=file, family=family, error_type=snake, message=str(exc))

    def to_json_line(self) -> str:
        """Serialize to one JSON line (no keys beyond the dataclass fields)."""
        return json.dumps(asdict(self), ensure_ascii=False)
