from __future__ import annotations

from ..models.processing_result import LoadReport

"""SUMMARY line rendering.

Format:
    SUMMARY files={n} success={n} skipped={n} failed={n} rows={n} elapsed_sec={s} families={name:parsed/files,...}

``families`` lists every family that received files, in processing order;
a family that was not committed is marked with ``!`` (``sales:0/2!``).
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Integral values without decimals; tiny values without scientific notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}"


def render_summary_line(report: LoadReport) -> str:
    """Render the SUMMARY line for one load batch.

    Args:
        report: LoadReport returned by the router

    Returns:
        Summary line including the leading ``SUMMARY `` label

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 3, 15, tzinfo=timezone.utc)
        >>> render_summary_line(LoadReport(start_time=t, end_time=t, elapsed_seconds=0))
        'SUMMARY files=0 success=0 skipped=0 failed=0 rows=0 elapsed_sec=0 families=-'
    """
    families = ",".join(
        f"{f.family}:{f.parsed}/{f.files}{'' if f.committed else '!'}" for f in report.family_stats
    ) or "-"
    return (
        f"SUMMARY files={len(report.file_stats)} "
        f"success={report.success_files} "
        f"skipped={report.skipped_files} "
        f"failed={report.failed_files} "
        f"rows={report.total_rows} "
        f"elapsed_sec={format_seconds(report.elapsed_seconds)} "
        f"families={families}"
    )
