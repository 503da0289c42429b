from __future__ import annotations

import logging
from typing import Any

from ..excel.cells import to_number, to_percentage, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..excel.sections import MarkerSpec, Section, find_markers, iter_section_rows, split_sections
from ..models.capsule import CapsuleFile, CapsuleRow
from .common import detect_region, strip_label

"""Capsule audit ("Отчет капсулы") parser.

Column A is always empty (merged-cell artifact), so every table starts in B.

"Итоги": two blocks under repeated "Регион" header rows. The first lists
region rows (no subdivision) and then totals; the template repeats the
region rows after the totals, so reading stops at the first ИТОГО. The
second block lists subdivisions.

"Магазины" (optional): one store table with the metrics in columns J..M.
"""

__all__ = [
    "parse",
]

logger = logging.getLogger(__name__)

TOTALS_SHEET = "Итоги"
STORES_SHEET = "Магазины"

HEADER_MARKER = MarkerSpec.of(1, "Регион")
STORES_DEFAULT_START = 6


def _text(row: list, c: int) -> str:
    return to_trimmed_string(row[c] if c < len(row) else None)


def _cell(row: list, c: int) -> Any:
    """Cell ``c`` of a raw row, or None past its end."""
    return row[c] if c < len(row) else None


def _metrics(row: list, first: int) -> dict[str, float | None]:
    """Read the four capsule metrics that start at column ``first``.

    Args:
        row: raw sheet row
        first: column of the unscanned share; the previous-period share,
            not-scanned count and available count follow it

    Returns:
        Keyword arguments for ``CapsuleRow``
    """
    return {
        "unscanned_pct": to_percentage(_cell(row, first)),
        "unscanned_pct_prev": to_percentage(_cell(row, first + 1)),
        "not_scanned": to_number(_cell(row, first + 2)),
        "available": to_number(_cell(row, first + 3)),
    }


def _period(sheet: RawSheet) -> str:
    """Period text from the first "Период" label in rows 2-4 of column B."""
    for r in range(2, 5):
        text = to_trimmed_string(sheet.cell(r, 1))
        if "Период" in text:
            return strip_label(text, "Период:", "Период: ")
    return ""


def _is_totals(region: str) -> bool:
    return region == "ИТОГО" or region.startswith("ИТОГО ")


def _region_rows(sheet: RawSheet, section: Section) -> list[CapsuleRow]:
    """Region-level rows of one block; stops at the grand total row."""
    rows = []
    for _, row in iter_section_rows(sheet, section):
        region = _text(row, 1)
        if not region:
            continue
        if _is_totals(region):
            break
        if _text(row, 2):
            continue
        rows.append(CapsuleRow(region=region, **_metrics(row, 3)))
    return rows


def _subdivision_rows(sheet: RawSheet, section: Section) -> list[CapsuleRow]:
    rows = []
    for _, row in iter_section_rows(sheet, section):
        region, subdivision = _text(row, 1), _text(row, 2)
        if not region and not subdivision:
            continue
        rows.append(CapsuleRow(region=region, subdivision=subdivision, **_metrics(row, 3)))
    return rows


def _store_rows(sheet: RawSheet) -> list[CapsuleRow]:
    markers = find_markers(sheet, HEADER_MARKER)
    start = markers[0].row + 1 if markers else STORES_DEFAULT_START
    section = Section(index=0, header_row=start - 1, start=start, end=sheet.n_rows - 1)
    rows = []
    for _, row in iter_section_rows(sheet, section):
        region = _text(row, 1)
        if not region:
            continue
        rows.append(CapsuleRow(
            region=region,
            subdivision=_text(row, 2),
            store=_text(row, 3),
            mall=_text(row, 4),
            **_metrics(row, 9),
        ))
    return rows


def parse(workbook: Workbook, file_name: str) -> CapsuleFile | None:
    """Parse a capsule workbook; None without an "Итоги" sheet."""
    totals = workbook.sheet(TOTALS_SHEET)
    if totals is None:
        return None

    sections = split_sections(totals, find_markers(totals, HEADER_MARKER))
    # Anything after the second block is not part of the template.
    regions = _region_rows(totals, sections[0]) if sections else []
    subdivisions = _subdivision_rows(totals, sections[1]) if len(sections) > 1 else []

    store_sheet = workbook.sheet(STORES_SHEET)
    stores = _store_rows(store_sheet) if store_sheet is not None else []

    logger.debug(
        "capsule %s: regions=%d subdivisions=%d stores=%d",
        file_name, len(regions), len(subdivisions), len(stores),
    )
    return CapsuleFile(
        file_name=file_name,
        region=detect_region(row.region for row in stores),
        period=_period(totals),
        regions=regions,
        subdivisions=subdivisions,
        stores=stores,
    )
