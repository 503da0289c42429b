from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

"""Uploaded file model and per-file status enum.

An UploadedFile is the in-memory byte buffer handed to the router, whether it
came from a directory scan or from a caller that already holds the bytes.
"""


class FileStatus(Enum):
    """Outcome of one file in a load batch.

    - SUCCESS: parser returned a result, committed to state with its family
    - SKIPPED: parser found none of its sheets (returned None) or the
      extension is not a workbook
    - FAILED: parsing raised; the file contributes nothing
    """
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadedFile:
    name: str   # original file name; classification and tagging use it
    data: bytes  # workbook bytes

    @classmethod
    def from_path(cls, path: Path) -> UploadedFile:
        return cls(name=path.name, data=path.read_bytes())

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix.lower()
