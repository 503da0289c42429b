from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

"""Load batch result models.

A LoadReport is returned by every router invocation; the CLI renders it as
the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file outcome within a load batch."""
    file_name: str
    family: str
    status: str  # success / skipped / failed
    rows: int  # normalized rows produced (0 unless success)
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class FamilyStat:
    """Per-family outcome: how many files were handed in, and whether state was updated."""
    family: str
    files: int
    parsed: int
    committed: bool


@dataclass(frozen=True)
class LoadReport:
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)
    family_stats: list[FamilyStat] = field(default_factory=list)
    ignored_files: list[str] = field(default_factory=list)  # unsupported extensions

    @property
    def success_files(self) -> int:
        return sum(1 for s in self.file_stats if s.status == "success")

    @property
    def skipped_files(self) -> int:
        return sum(1 for s in self.file_stats if s.status == "skipped")

    @property
    def failed_files(self) -> int:
        return sum(1 for s in self.file_stats if s.status == "failed")

    @property
    def total_rows(self) -> int:
        return sum(s.rows for s in self.file_stats)
