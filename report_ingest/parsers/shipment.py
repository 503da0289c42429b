from __future__ import annotations

import logging
import re
from typing import Any

from ..excel.cells import is_empty, to_date_string, to_percentage, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..excel.sections import MarkerSpec, find_markers, iter_section_rows, split_sections
from ..models.shipment import REGION_HEADER, STORE_HEADER, ShipmentFile, ShipmentRow
from .common import detect_region

"""Shipment / control report ("Отчет ДР Неделя", "Отчет ДР Месяц") parser.

Workbook layout:
    "Отчет"          row 0 title, row 1 period, then one or more blocks that
                     each start with a "Регион | Подразделение | Магазин | ..."
                     header row. Region total rows carry "ИТОГО" in the
                     subdivision column; the company total carries it in the
                     region column.
    "Детализация"    one header row, then one row per shipment order.
    "<group> Отчет" / "<group> Детализация"
                     the same two layouts for a sub-product group (e.g.
                     "Одежда для детей Отчет"); rows are tagged with <group>.
"""

__all__ = [
    "PCT_COLUMNS",
    "detect_product_group",
    "detect_report_type",
    "parse",
]

logger = logging.getLogger(__name__)

SUMMARY_SHEET = "Отчет"
DETAIL_SHEET = "Детализация"
DATE_COLUMN = "Дата создания"

GROUP_SHOES = "Обувь"
GROUP_KIDS = "Кидс"
TYPE_WEEK = "Неделя"
TYPE_MONTH = "Месяц"

TOTALS = "ИТОГО"
COMPANY_ROW = "Kari"

# Percentage columns stored as fractions (0.84 -> 84.0)
PCT_COLUMNS = (
    "Отгружено на чистку %",
    "Вычерк по сборке %",
    "Возврат от агрегатора %",
    "Отгружено товара %",
    "Вычерк + Возврат + Отменено %",
)

HEADER_MARKER = MarkerSpec.of(0, REGION_HEADER)

_KEY_PUNCT = re.compile(r"[,.]")
_KEY_SPACES = re.compile(r"\s+")


def normalize_key(key: str) -> str:
    """Header spelling-insensitive key: "Отгружено, шт" and "Отгружено шт" agree."""
    return _KEY_SPACES.sub(" ", _KEY_PUNCT.sub(" ", str(key).lower())).strip()


_PCT_KEYS = frozenset(normalize_key(c) for c in PCT_COLUMNS)


def is_pct_column(header: str) -> bool:
    """Whether a shipment column holds percentages.

    Args:
        header: column header as written in the sheet

    Returns:
        True for the known percentage columns (matched after key
        normalization) and for headers ending in "%" or containing ",%"
    """
    return normalize_key(header) in _PCT_KEYS or header.endswith("%") or ",%" in header


def detect_product_group(file_name: str) -> str:
    """Kids when the name says so, shoes otherwise."""
    if "кидс" in file_name or "Кидс" in file_name or "kids" in file_name.lower():
        return GROUP_KIDS
    return GROUP_SHOES


def detect_report_type(file_name: str) -> str:
    if "Неделя" in file_name or "week" in file_name.lower():
        return TYPE_WEEK
    return TYPE_MONTH


def _coerce(header: str, value: Any) -> Any:
    """Dates and percentages by column; other strings are trimmed."""
    if header == DATE_COLUMN:
        return to_date_string(value)
    if is_pct_column(header):
        return to_percentage(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _headers(sheet: RawSheet, row_index: int) -> list[str]:
    return [to_trimmed_string(h) for h in sheet.row(row_index)]


def _row_values(headers: list[str], row: list[Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for idx, header in enumerate(headers):
        if not header:
            continue
        value = row[idx] if idx < len(row) else None
        values[header] = _coerce(header, value)
    return values


def parse_summary_sheet(sheet: RawSheet) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Return (store rows, region total rows) as header -> value mappings."""
    markers = find_markers(sheet, HEADER_MARKER)
    if not markers:
        return [], []
    headers = _headers(sheet, markers[0].row)

    stores: list[dict[str, Any]] = []
    totals: list[dict[str, Any]] = []
    for section in split_sections(sheet, markers):
        for _, row in iter_section_rows(sheet, section):
            region = to_trimmed_string(row[0] if row else None)
            subdivision = to_trimmed_string(row[1] if len(row) > 1 else None)
            store_cell = row[2] if len(row) > 2 else None
            store = to_trimmed_string(store_cell)

            if TOTALS in subdivision and region and TOTALS not in store:
                values = _row_values(headers, row)
                values[REGION_HEADER] = region
                totals.append(values)
                continue
            if TOTALS in region or TOTALS in store or store == COMPANY_ROW:
                continue
            if is_empty(store_cell) or store == STORE_HEADER:
                continue
            stores.append(_row_values(headers, row))
    return stores, totals


def parse_detail_sheet(sheet: RawSheet) -> list[dict[str, Any]]:
    """Detail rows with a region or a store, keyed by the first header row."""
    markers = find_markers(sheet, HEADER_MARKER)
    if not markers:
        return []
    headers = _headers(sheet, markers[0].row)
    # Only the first header row counts here; later repeats are skipped as data.
    rows: list[dict[str, Any]] = []
    for r in range(markers[0].row + 1, sheet.n_rows):
        row = sheet.row(r)
        if all(is_empty(v) for v in row):
            continue
        if to_trimmed_string(row[0]) == REGION_HEADER:
            continue
        values = _row_values(headers, row)
        if not values.get(REGION_HEADER) and not values.get(STORE_HEADER):
            continue
        rows.append(values)
    return rows


def _meta(sheet: RawSheet) -> tuple[str, str]:
    """(title, period) from A1 and A2."""
    return to_trimmed_string(sheet.cell(0, 0)), to_trimmed_string(sheet.cell(1, 0))


def _variant_group(sheet_name: str, keyword: str, default: str) -> str:
    return sheet_name.replace(keyword, "").strip() or default


def parse(workbook: Workbook, file_name: str) -> ShipmentFile | None:
    """Parse one shipment workbook; None when it has no report or detail sheet."""
    report_sheets = [n for n in workbook.sheet_names if SUMMARY_SHEET in n or DETAIL_SHEET in n]
    if not report_sheets:
        return None

    product_group = detect_product_group(file_name)
    report_type = detect_report_type(file_name)

    def tag(values: dict[str, Any], group: str) -> ShipmentRow:
        return ShipmentRow(values=values, product_group=group, report_type=report_type, source_file=file_name)

    title, period = "", ""
    summary: list[ShipmentRow] = []
    detail: list[ShipmentRow] = []
    region_totals: list[ShipmentRow] = []

    # Base sheets first, then sub-group variants in workbook order.
    ordered = [n for n in (SUMMARY_SHEET, DETAIL_SHEET) if n in report_sheets]
    ordered += [n for n in report_sheets if n not in (SUMMARY_SHEET, DETAIL_SHEET)]
    for name in ordered:
        sheet = workbook.sheet(name)
        if sheet is None:
            continue
        if SUMMARY_SHEET in name:
            group = product_group if name == SUMMARY_SHEET else _variant_group(name, SUMMARY_SHEET, product_group)
            if name == SUMMARY_SHEET:
                title, period = _meta(sheet)
            stores, totals = parse_summary_sheet(sheet)
            summary.extend(tag(v, group) for v in stores)
            region_totals.extend(tag(v, group) for v in totals)
        else:
            group = product_group if name == DETAIL_SHEET else _variant_group(name, DETAIL_SHEET, product_group)
            detail.extend(tag(v, group) for v in parse_detail_sheet(sheet))

    logger.debug(
        "shipment %s: group=%s type=%s summary=%d detail=%d totals=%d",
        file_name, product_group, report_type, len(summary), len(detail), len(region_totals),
    )
    return ShipmentFile(
        file_name=file_name,
        title=title,
        period=period,
        product_group=product_group,
        report_type=report_type,
        region=detect_region(r.region for r in summary),
        summary=summary,
        detail=detail,
        region_totals=region_totals,
    )
