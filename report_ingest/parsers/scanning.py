from __future__ import annotations

import logging

from ..excel.cells import fraction_to_percentage, is_empty, to_number, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..models.scanning import CategoryShare, ScanningFile, ScanningRow, SeasonShare
from .common import detect_region, strip_label

"""Acceptance-scanning ("Нет сканирования при приемке") report parser.

The three sheets share one fixed-position layout:

    row 2   "Период отчета: ..." in column A, season names from column K on
    row 3   direction per season column (Обувь / Кидс / ...)
    row 4   category per column from AQ on
    row 8+  data: region, subdivision, store, mall, then scan/bind metrics

Season and category blocks are sparse; a column is used only when its
header cells are filled with something other than "-" or "0". Numeric percentage
cells are always fractions, so an overshoot stored as 2.0 reads as 200%.
"""

__all__ = [
    "SHEETS",
    "parse",
]

logger = logging.getLogger(__name__)

SHEET_REGIONS = "Регионы"
SHEET_SUBDIVISIONS = "Подразделения"
SHEET_STORES = "Магазины"
SHEETS = (SHEET_REGIONS, SHEET_SUBDIVISIONS, SHEET_STORES)

PERIOD_ROW = 2
SEASON_ROW = 2
DIRECTION_ROW = 3
CATEGORY_ROW = 4
DATA_START_ROW = 8

SEASON_FIRST_COL = 10
SEASON_LAST_COL = 41
CATEGORY_FIRST_COL = 42

_PLACEHOLDERS = ("", "-", "0")
_HEADER_TEXTS = ("Region", "Регион")


def _header_text(sheet: RawSheet, r: int, c: int) -> str:
    return to_trimmed_string(sheet.cell(r, c))


def _season_columns(sheet: RawSheet) -> list[tuple[int, str, str]]:
    """(column, season, direction) for every filled season column."""
    columns = []
    for c in range(SEASON_FIRST_COL, min(SEASON_LAST_COL + 1, sheet.n_cols)):
        season = _header_text(sheet, SEASON_ROW, c).replace("/", "", 1).strip()
        direction = _header_text(sheet, DIRECTION_ROW, c)
        if season in _PLACEHOLDERS or direction in _PLACEHOLDERS:
            continue
        columns.append((c, season, direction))
    return columns


def _category_columns(sheet: RawSheet) -> list[tuple[int, str, str, str]]:
    """(column, season, direction, category) for every named category column."""
    columns = []
    for c in range(CATEGORY_FIRST_COL, sheet.n_cols):
        category = _header_text(sheet, CATEGORY_ROW, c)
        if category in _PLACEHOLDERS:
            continue
        season = _header_text(sheet, SEASON_ROW, c).replace("/", "", 1).strip()
        direction = _header_text(sheet, DIRECTION_ROW, c)
        columns.append((c, season, direction, category))
    return columns


def parse_sheet(sheet: RawSheet) -> list[ScanningRow]:
    """Parse the data rows of one scanning sheet.

    Args:
        sheet: one of the region/subdivision/store sheets

    Returns:
        One ``ScanningRow`` per non-blank row with a region; header rows
        repeated in the data are skipped
    """
    seasons = _season_columns(sheet)
    categories = _category_columns(sheet)
    rows: list[ScanningRow] = []
    for r in range(DATA_START_ROW, sheet.n_rows):
        row = sheet.row(r)
        if all(is_empty(v) for v in row):
            continue
        region = to_trimmed_string(sheet.cell(r, 0))
        if not region or region in _HEADER_TEXTS:
            continue

        season_shares = []
        for c, season, direction in seasons:
            value = fraction_to_percentage(sheet.cell(r, c))
            if value is not None:
                season_shares.append(SeasonShare(season=season, direction=direction, value=value))
        category_shares = []
        for c, season, direction, category in categories:
            value = fraction_to_percentage(sheet.cell(r, c))
            if value is not None:
                category_shares.append(
                    CategoryShare(season=season, direction=direction, category=category, value=value)
                )

        rows.append(ScanningRow(
            region=region,
            subdivision=to_trimmed_string(sheet.cell(r, 1)),
            store=to_trimmed_string(sheet.cell(r, 2)),
            mall=to_trimmed_string(sheet.cell(r, 3)),
            scan_pct=fraction_to_percentage(sheet.cell(r, 4)),
            scan_articles=to_number(sheet.cell(r, 5)),
            scan_qty=to_number(sheet.cell(r, 6)),
            bind_pct=fraction_to_percentage(sheet.cell(r, 7)),
            bind_articles=to_number(sheet.cell(r, 8)),
            seasons=tuple(season_shares),
            categories=tuple(category_shares),
            sheet=sheet.name,
        ))
    return rows


def parse(workbook: Workbook, file_name: str) -> ScanningFile | None:
    """Parse a scanning workbook; None when none of its three sheets is present."""
    present = [name for name in SHEETS if workbook.has_sheet(name)]
    if not present:
        return None

    parsed: dict[str, list[ScanningRow]] = {name: [] for name in SHEETS}
    period = ""
    for name in present:
        sheet = workbook.sheet(name)
        if not period:
            period = strip_label(sheet.cell(PERIOD_ROW, 0), "Период отчета: ", "Период отчета:")
        parsed[name] = parse_sheet(sheet)

    region_source = parsed[SHEET_SUBDIVISIONS] or parsed[SHEET_STORES]
    region = detect_region(row.region for row in region_source)
    logger.debug(
        "scanning %s: regions=%d subdivisions=%d stores=%d region=%s",
        file_name, len(parsed[SHEET_REGIONS]), len(parsed[SHEET_SUBDIVISIONS]), len(parsed[SHEET_STORES]), region,
    )
    return ScanningFile(
        file_name=file_name,
        region=region,
        period=period,
        regions=parsed[SHEET_REGIONS],
        subdivisions=parsed[SHEET_SUBDIVISIONS],
        stores=parsed[SHEET_STORES],
    )
