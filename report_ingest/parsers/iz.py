from __future__ import annotations

import logging

from ..excel.cells import fraction_to_percentage, is_empty, to_number, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..models.iz import IZFile, IZSheet, IZStoreRow
from .common import detect_region

"""Address-based orders ("ИЗ") report parser.

Sheets "День", "Неделя", "Месяц": period text in A1, chart area above row
21, store table header on row 21 (index 20) and stores below it.
"""

__all__ = [
    "SHEET_NAMES",
    "parse",
]

logger = logging.getLogger(__name__)

SHEET_NAMES = ("День", "Неделя", "Месяц")
STORE_HEADER_ROW = 20


def parse_sheet(sheet: RawSheet) -> IZSheet:
    """Store rows below header row 20, plus the period text from A1."""
    stores = []
    for r in range(STORE_HEADER_ROW + 1, sheet.n_rows):
        store = sheet.cell(r, 2)
        if is_empty(store):
            continue
        stores.append(IZStoreRow(
            region=to_trimmed_string(sheet.cell(r, 0)),
            subdivision=to_trimmed_string(sheet.cell(r, 1)),
            store=to_trimmed_string(store),
            mall=to_trimmed_string(sheet.cell(r, 3)),
            rating=to_number(sheet.cell(r, 4), default=None),
            ready_orders=to_number(sheet.cell(r, 5), default=None),
            scan_share=fraction_to_percentage(sheet.cell(r, 6)),
            clicks=to_number(sheet.cell(r, 7), default=None),
        ))
    return IZSheet(period=to_trimmed_string(sheet.cell(0, 0)), stores=stores)


def parse(workbook: Workbook, file_name: str) -> IZFile | None:
    """Parse an address-orders workbook.

    Args:
        workbook: the opened workbook
        file_name: base name, used for logging

    Returns:
        ``IZFile`` keyed by the day/week/month sheets present, or None when
        the workbook has none of them
    """
    sheets = {name: parse_sheet(workbook.sheet(name)) for name in SHEET_NAMES if workbook.has_sheet(name)}
    if not sheets:
        return None
    region = detect_region(row.region for sheet in sheets.values() for row in sheet.stores)
    logger.debug(
        "iz %s: %s",
        file_name, ", ".join(f"{name}={len(sheet.stores)}" for name, sheet in sheets.items()),
    )
    return IZFile(file_name=file_name, region=region, sheets=sheets)
