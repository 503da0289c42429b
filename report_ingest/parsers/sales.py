from __future__ import annotations

import logging
from typing import Any

from ..excel.cells import is_empty, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..excel.sections import (
    HeaderMarker,
    MarkerSpec,
    Section,
    SectionLayout,
    Sentinels,
    assign_roles,
    find_markers,
    iter_section_rows,
    split_sections,
)
from ..models.sales import SalesFile, SalesRow
from .common import REGION_ALL, detect_region, region_from_name

"""Sales KPI ("Продажи") report parser.

Sheet "Рег":

    rows 0..2   period lines
    row 4       column headers
    row 5+      stores, then (after a repeated "Регион" header row)
                subdivisions, then regions and the company total

The number of repeated header rows decides which blocks are present: one
block is stores only, two are stores and regions, three are stores,
subdivisions and regions. Extra trailing blocks are read as regions.

``parse_sales_sheet`` is shared with the jewelry sales report, which uses
the same layout on its own sheet.
"""

__all__ = [
    "COLS_HIGH_BAD",
    "COLS_HIGH_GOOD",
    "PERIOD_DAY",
    "PERIOD_MONTH",
    "SALES_LAYOUT",
    "gradient_direction",
    "parse",
    "parse_sales_sheet",
]

logger = logging.getLogger(__name__)

SHEET_NAME = "Рег"

PERIOD_DAY = "ДЕНЬ"
PERIOD_MONTH = "МЕСЯЦ"

HEADER_ROW = 4
REPEATED_HEADER = MarkerSpec.of(0, "Регион", start_row=HEADER_ROW + 1)

SALES_LAYOUT = SectionLayout({
    1: ("stores",),
    2: ("stores", "regions"),
    3: ("stores", "subdivisions", "regions"),
})

# Company / region / online-shop total rows inside store and subdivision blocks
TOTAL_ROWS = Sentinels.of("КОМПАНИЯ", "РЕГИОН", "ИМ", upper=True)
TOTALS_KEY_COL = 3
BLANK_KEY_COLS = (0, 3)

# Colour-scale direction per column of "Рег"
COLS_HIGH_GOOD = frozenset({5, 7, 8, 9, 10, 11, *range(13, 49), *range(50, 71), 72, 73, 74, 75})
COLS_HIGH_BAD = frozenset({6, 12, 49, 71})


def gradient_direction(col: int, good: frozenset[int] = COLS_HIGH_GOOD, bad: frozenset[int] = COLS_HIGH_BAD) -> str | None:
    """Colour-scale direction of a column: "good" if higher is better, "bad" if worse, else None."""
    if col in good:
        return "good"
    if col in bad:
        return "bad"
    return None


def detect_period_type(file_name: str) -> str:
    """Day or month from the file name; day when neither is named."""
    upper = file_name.upper()
    if "ДЕНЬ" in upper or "DAY" in upper:
        return PERIOD_DAY
    if "МЕСЯЦ" in upper or "MONTH" in upper:
        return PERIOD_MONTH
    return PERIOD_DAY


def _display(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _headers(sheet: RawSheet) -> list[str]:
    """Header row labels; blank header cells become ``_col<N>``."""
    headers = []
    for c in range(sheet.n_cols):
        cell = sheet.cell(HEADER_ROW, c)
        headers.append(f"_col{c}" if is_empty(cell) else to_trimmed_string(cell))
    return headers


def _section_rows(sheet: RawSheet, section: Section, headers: list[str], summary: bool) -> list[SalesRow]:
    """Rows of one section keyed by header.

    Args:
        sheet: the sales sheet
        section: block between two header rows
        headers: labels from ``_headers``
        summary: the region block keeps its total rows; other blocks stop
            at the first total row

    Returns:
        ``SalesRow`` list with trimmed display values and the raw cells
    """
    rows = []
    sentinels = None if summary else TOTAL_ROWS
    for r, row in iter_section_rows(
        sheet, section, key_column=TOTALS_KEY_COL, sentinels=sentinels, blank_columns=BLANK_KEY_COLS,
    ):
        raw = {c: sheet.cell(r, c) for c in range(len(headers))}
        values = {header: _display(raw[c]) for c, header in enumerate(headers)}
        rows.append(SalesRow(values=values, raw=raw, column_count=len(headers), source_row=r))
    return rows


def parse_sales_sheet(sheet: RawSheet) -> dict[str, Any]:
    """Periods, headers and the store / subdivision / region rows of a sales sheet."""
    periods = [to_trimmed_string(sheet.cell(r, 0)) for r in range(3) if not is_empty(sheet.cell(r, 0))]
    headers = _headers(sheet)

    markers = [HeaderMarker(row=HEADER_ROW, column=0, value=to_trimmed_string(sheet.cell(HEADER_ROW, 0)))]
    markers += find_markers(sheet, REPEATED_HEADER)
    roles = assign_roles(split_sections(sheet, markers), SALES_LAYOUT)

    parsed: dict[str, Any] = {"periods": periods, "headers": headers}
    for role in ("stores", "subdivisions", "regions"):
        parsed[role] = [
            row
            for section in roles.get(role, [])
            for row in _section_rows(sheet, section, headers, summary=role == "regions")
        ]
    return parsed


def parse(workbook: Workbook, file_name: str) -> SalesFile | None:
    """Parse a sales workbook; None without its "Рег" sheet.

    The region and period type come from the file name.
    """
    sheet = workbook.sheet(SHEET_NAME)
    if sheet is None:
        return None
    parsed = parse_sales_sheet(sheet)

    region = region_from_name(file_name)
    if region == REGION_ALL:
        region = detect_region(row.column(0) for row in parsed["stores"])
    logger.debug(
        "sales %s: stores=%d subdivisions=%d regions=%d",
        file_name, len(parsed["stores"]), len(parsed["subdivisions"]), len(parsed["regions"]),
    )
    return SalesFile(
        file_name=file_name,
        region=region,
        period_type=detect_period_type(file_name),
        **parsed,
    )
