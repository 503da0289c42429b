from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..config.loader import IngestConfig
from ..excel.cells import fallback_counts, reset_fallback_counts
from ..logging.error_log import ErrorLogBuffer
from ..models.excel_file import FileStatus, UploadedFile
from ..models.processing_result import FileStat, LoadReport
from .progress import ProgressTracker
from .router import DEFAULT_EXTENSIONS, load_files
from .state import DashboardState

"""Directory orchestration: scan the configured folder and load it through the router."""

__all__ = [
    "ProcessingError",
    "load_directory",
    "scan_report_files",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Batch-level failure; nothing was loaded."""


def scan_report_files(directory: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> list[Path]:
    """Workbook files directly inside ``directory`` (non-recursive), sorted by name.

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    wanted = {e.lower() for e in extensions}
    try:
        # Excel lock files ("~$report.xlsx") are not workbooks
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in wanted and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _read_files(paths: list[Path]) -> list[UploadedFile]:
    files = []
    for path in paths:
        try:
            files.append(UploadedFile.from_path(path))
        except OSError as e:
            raise ProcessingError(f"Error reading file {path}: {e}") from e
    return files


def load_directory(config: IngestConfig, state: DashboardState | None = None) -> tuple[DashboardState, LoadReport]:
    """Load every report workbook in ``config.source_directory``.

    1. Scan the directory for workbooks with a configured extension
    2. Route them through ``load_files`` with a progress bar
    3. Flush the JSON Lines error log once at the end

    Args:
        config: loaded configuration
        state: state to load into; a fresh DashboardState when omitted

    Returns:
        (state, LoadReport)

    Raises:
        ProcessingError: For fatal errors that prevent loading
    """
    state = state if state is not None else DashboardState()
    paths = scan_report_files(Path(config.source_directory), config.extensions)
    logger.info("Found %d report file(s) in %s", len(paths), config.source_directory)
    files = _read_files(paths)

    error_log = ErrorLogBuffer(config.error_log_dir)
    reset_fallback_counts()
    counts = {"success": 0, "skipped": 0, "failed": 0}

    with ProgressTracker(len(files)) as progress:
        def on_done(stat: FileStat) -> None:
            counts[stat.status] += 1
            progress.set_postfix(**counts)
            progress.finish_file(success=stat.status == FileStatus.SUCCESS.value)

        report = load_files(
            files,
            state,
            error_log=error_log,
            keep_na_strings=config.keep_na_strings,
            extensions=config.extensions,
            on_file_start=lambda f: progress.start_file(f.name),
            on_file_done=on_done,
        )

    fallbacks = fallback_counts()
    if fallbacks:
        logger.debug("cell fallbacks: %s", ", ".join(f"{k}={v}" for k, v in sorted(fallbacks.items())))

    try:
        path = error_log.flush()
    except OSError as e:
        logger.warning("Could not write error log: %s", e)
    else:
        if path is not None:
            logger.info("Error log written to %s", path)
    return state, report
