"""Domain models for report ingestion.

Per-family parse results are frozen dataclasses; see the family modules
(shipment, scanning, jewelry, capsule, pricing, filling, iz, sales).
"""

from .error_record import FILE_LEVEL, ErrorRecord
from .excel_file import FileStatus, UploadedFile
from .processing_result import FamilyStat, FileStat, LoadReport

__all__ = [
    # Error log
    "ErrorRecord",
    "FILE_LEVEL",
    # Batch input / outcome
    "FamilyStat",
    "FileStat",
    "FileStatus",
    "LoadReport",
    "UploadedFile",
]
