from __future__ import annotations

from datetime import UTC, datetime

from report_ingest.models.processing_result import FamilyStat, FileStat, LoadReport
from report_ingest.services.summary import format_seconds, render_summary_line

T0 = datetime(2024, 3, 15, tzinfo=UTC)


def test_render_summary_line_counts_and_families():
    report = LoadReport(
        start_time=T0,
        end_time=T0,
        elapsed_seconds=1.234,
        file_stats=[
            FileStat("Отчет ДР.xlsx", "shipment", "success", 12, 0.5),
            FileStat("Продажи 1.xlsx", "sales", "failed", 0, 0.1, error="boom"),
            FileStat("Продажи 2.xlsx", "sales", "skipped", 0, 0.1),
        ],
        family_stats=[
            FamilyStat("sales", files=2, parsed=0, committed=False),
            FamilyStat("shipment", files=1, parsed=1, committed=True),
        ],
    )

    assert render_summary_line(report) == (
        "SUMMARY files=3 success=1 skipped=1 failed=1 rows=12 elapsed_sec=1.23 "
        "families=sales:0/2!,shipment:1/1"
    )


def test_render_summary_line_empty_batch():
    report = LoadReport(start_time=T0, end_time=T0, elapsed_seconds=0)
    assert render_summary_line(report) == (
        "SUMMARY files=0 success=0 skipped=0 failed=0 rows=0 elapsed_sec=0 families=-"
    )


def test_format_seconds():
    assert format_seconds(0) == "0"
    assert format_seconds(2.0) == "2"
    assert format_seconds(0.0012) == "0.0012"
    assert format_seconds(3.14159) == "3.14"
