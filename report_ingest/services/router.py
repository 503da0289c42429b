from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ..excel.reader import Workbook, read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.excel_file import FileStatus, UploadedFile
from ..models.filling import FillingFile
from ..models.iz import IZFile
from ..models.jewelry import UnexposedFile
from ..models.processing_result import FamilyStat, FileStat, LoadReport
from ..models.shipment import ShipmentFile
from ..parsers import capsule, filling, iz, jewelry, pricing, sales, sales_jewelry, scanning, shipment
from .state import DashboardState

"""File router: classify uploaded workbooks into report families and load them.

Classification looks only at the file name. Families are tried in a fixed
priority order so that names matching several keyword sets ("Продажи ЮИ",
"Итоги сканирования") resolve the same way every time; anything unmatched
is treated as a shipment report.
"""

__all__ = [
    "DEFAULT_EXTENSIONS",
    "FAMILY_PRIORITY",
    "ReportFamily",
    "classify",
    "is_supported",
    "load_files",
]

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".xlsx", ".xls")


class ReportFamily(Enum):
    SCANNING = "scanning"
    CAPSULE = "capsule"
    PRICING = "pricing"
    FILLING = "filling"
    ADDRESS_ORDERS = "iz"
    SALES_JEWELRY = "sales_jewelry"
    SALES = "sales"
    JEWELRY = "jewelry"
    SHIPMENT = "shipment"


def _contains(*keywords: str) -> Callable[[str], bool]:
    return lambda name: any(k in name for k in keywords)


# "из" as a separate token: "ИЗ_СПБ.xlsx", "Отчет ИЗ неделя.xlsx", not "изменения"
_IZ_TOKEN = re.compile(r"(^|[\s_\-])из([\s_\-.]|$)")


def _is_address_orders(name: str) -> bool:
    return bool(_IZ_TOKEN.search(name)) or "адресн" in name


def _is_sales_jewelry(name: str) -> bool:
    return "доля в продажах" in name or ("продаж" in name and "юи" in name)


# Keyword sets overlap ("Продажи ЮИ" hits sales, sales-jewelry and jewelry), so
# narrower families are listed before the broader ones that would swallow them.
FAMILY_PRIORITY: tuple[tuple[ReportFamily, Callable[[str], bool]], ...] = (
    (ReportFamily.SCANNING, _contains("сканирован", "scan")),
    (ReportFamily.CAPSULE, _contains("капсул", "capsule")),
    (ReportFamily.PRICING, _contains("переоценк", "полупар", "pricing")),
    (ReportFamily.FILLING, _contains("наполненн", "filling")),
    (ReportFamily.ADDRESS_ORDERS, _is_address_orders),
    (ReportFamily.SALES_JEWELRY, _is_sales_jewelry),
    (ReportFamily.SALES, _contains("продаж", "sales")),
    (ReportFamily.JEWELRY, _contains("юи", "ювелир", "итог", "невыставленн", "jewelry")),
)

PARSERS: dict[ReportFamily, Callable[[Workbook, str], Any]] = {
    ReportFamily.SCANNING: scanning.parse,
    ReportFamily.CAPSULE: capsule.parse,
    ReportFamily.PRICING: pricing.parse,
    ReportFamily.FILLING: filling.parse,
    ReportFamily.ADDRESS_ORDERS: iz.parse,
    ReportFamily.SALES_JEWELRY: sales_jewelry.parse,
    ReportFamily.SALES: sales.parse,
    ReportFamily.JEWELRY: jewelry.parse,
    ReportFamily.SHIPMENT: shipment.parse,
}

PROCESSING_ORDER = tuple(f for f, _ in FAMILY_PRIORITY) + (ReportFamily.SHIPMENT,)


def classify(file_name: str) -> ReportFamily:
    """Report family for a file name; the first matching family in priority order wins."""
    name = Path(file_name).name.lower()
    for family, predicate in FAMILY_PRIORITY:
        if predicate(name):
            return family
    return ReportFamily.SHIPMENT


def is_supported(file_name: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    suffix = Path(file_name).suffix.lower()
    return suffix in {e.lower() for e in extensions}


def _row_count(result: Any) -> int:
    """Normalized rows produced by one parsed file (for the summary line)."""
    if isinstance(result, ShipmentFile):
        return len(result.summary) + len(result.detail) + len(result.region_totals)
    if isinstance(result, IZFile):
        return sum(len(s.stores) for s in result.sheets.values())
    if isinstance(result, FillingFile):
        return len(result.stores)
    if isinstance(result, UnexposedFile):
        return len(result.summary) + len(result.detail)
    return sum(len(getattr(result, attr, [])) for attr in ("regions", "subdivisions", "stores"))


def _load_one(
    file: UploadedFile,
    family: ReportFamily,
    error_log: ErrorLogBuffer | None,
    keep_na_strings: list[str] | None,
) -> tuple[FileStat, Any]:
    start = time.perf_counter()
    try:
        workbook = read_workbook(file.data, keep_na_strings=keep_na_strings)
        result = PARSERS[family](workbook, file.name)
    except Exception as exc:
        elapsed = time.perf_counter() - start
        logger.error("Failed to parse %s as %s: %s", file.name, family.value, exc)
        if error_log is not None:
            error_log.append(ErrorRecord.from_exception(file.name, family.value, exc))
        return FileStat(file.name, family.value, FileStatus.FAILED.value, 0, elapsed, error=str(exc)), None

    elapsed = time.perf_counter() - start
    if result is None:
        logger.info("Skipped %s: no %s sheets found", file.name, family.value)
        return FileStat(file.name, family.value, FileStatus.SKIPPED.value, 0, elapsed), None

    rows = _row_count(result)
    logger.info("Parsed %s as %s (%d rows, %.2fs)", file.name, family.value, rows, elapsed)
    return FileStat(file.name, family.value, FileStatus.SUCCESS.value, rows, elapsed), result


def load_files(
    files: Iterable[UploadedFile],
    state: DashboardState,
    error_log: ErrorLogBuffer | None = None,
    keep_na_strings: list[str] | None = None,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    on_file_start: Callable[[UploadedFile], None] | None = None,
    on_file_done: Callable[[FileStat], None] | None = None,
) -> LoadReport:
    """Classify, parse and commit one upload batch.

    Families are processed one after another in priority order, files in the
    order given. Each family with at least one parsed file is committed to
    ``state`` in one step; a family whose files all failed or were skipped
    keeps whatever the state held before.

    Args:
        files: uploaded workbooks
        state: state to commit into
        error_log: receives one ErrorRecord per failed file
        keep_na_strings: strings the reader must keep as text
        extensions: accepted file extensions; other files are ignored
        on_file_start: called before each file is parsed (progress reporting)
        on_file_done: called after each file with its outcome

    Returns:
        LoadReport with per-file and per-family outcomes
    """
    start_time = datetime.now(UTC)
    t0 = time.perf_counter()

    ignored: list[str] = []
    groups: dict[ReportFamily, list[UploadedFile]] = {}
    for file in files:
        if not is_supported(file.name, extensions):
            logger.info("Ignoring unsupported file %s", file.name)
            ignored.append(file.name)
            continue
        groups.setdefault(classify(file.name), []).append(file)

    file_stats: list[FileStat] = []
    family_stats: list[FamilyStat] = []
    for family in PROCESSING_ORDER:
        group = groups.get(family)
        if not group:
            continue
        results = []
        for file in group:
            if on_file_start is not None:
                on_file_start(file)
            stat, result = _load_one(file, family, error_log, keep_na_strings)
            file_stats.append(stat)
            if result is not None:
                results.append(result)
            if on_file_done is not None:
                on_file_done(stat)

        committed = bool(results)
        if committed:
            state.commit(family.value, results)
        else:
            logger.warning("No %s file could be parsed (%d given); keeping previous data", family.value, len(group))
        family_stats.append(FamilyStat(family.value, len(group), len(results), committed))

    return LoadReport(
        start_time=start_time,
        end_time=datetime.now(UTC),
        elapsed_seconds=time.perf_counter() - t0,
        file_stats=file_stats,
        family_stats=family_stats,
        ignored_files=ignored,
    )
