from __future__ import annotations

import logging

from ..excel.cells import is_empty, to_percentage, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..models.pricing import PricingColumn, PricingFile, PricingRow
from .common import detect_region

"""Pricing audit ("Рейтинг переоценки и выставления полупарков") parser.

Sheets "Регионы", "Подразделения" and "Магазины" share one layout: a header
row, then region / subdivision / store in A..C and six share columns in D..I.
"""

__all__ = [
    "COLUMNS",
    "parse",
]

logger = logging.getLogger(__name__)

SHEET_REGIONS = "Регионы"
SHEET_SUBDIVISIONS = "Подразделения"
SHEET_STORES = "Магазины"

COLUMNS = [
    PricingColumn("c0", "% ПП без ценников"),
    PricingColumn("c1", "% не отскан. ценников на полупарок"),
    PricingColumn("c2", "% не напечатанных ценников при приёмке"),
    PricingColumn("c3", "% не напечатанных цен при переоценке"),
    PricingColumn("c4", "% не отскан. ценников навесной обуви"),
    PricingColumn("c5", "% ПП с правильным ценником"),
]
FIRST_METRIC_COL = 3


def parse_sheet(sheet: RawSheet | None) -> list[PricingRow]:
    """Rows with a region from one pricing sheet; an absent sheet yields no rows."""
    if sheet is None:
        return []
    rows = []
    for r in range(1, sheet.n_rows):
        if all(is_empty(v) for v in sheet.row(r)):
            continue
        region = to_trimmed_string(sheet.cell(r, 0))
        if not region:
            continue
        rows.append(PricingRow(
            region=region,
            subdivision=to_trimmed_string(sheet.cell(r, 1)),
            store=to_trimmed_string(sheet.cell(r, 2)),
            metrics=tuple(to_percentage(sheet.cell(r, FIRST_METRIC_COL + i)) for i in range(len(COLUMNS))),
        ))
    return rows


def parse(workbook: Workbook, file_name: str) -> PricingFile | None:
    """Parse a pricing audit workbook.

    Args:
        workbook: the opened workbook
        file_name: base name of the file

    Returns:
        ``PricingFile`` with one row list per sheet, or None when none of
        the region/subdivision/store sheets is present
    """
    if not any(workbook.has_sheet(n) for n in (SHEET_REGIONS, SHEET_SUBDIVISIONS, SHEET_STORES)):
        return None
    stores = parse_sheet(workbook.sheet(SHEET_STORES))
    result = PricingFile(
        file_name=file_name,
        region=detect_region(row.region for row in stores),
        columns=list(COLUMNS),
        regions=parse_sheet(workbook.sheet(SHEET_REGIONS)),
        subdivisions=parse_sheet(workbook.sheet(SHEET_SUBDIVISIONS)),
        stores=stores,
    )
    logger.debug(
        "pricing %s: regions=%d subdivisions=%d stores=%d",
        file_name, len(result.regions), len(result.subdivisions), len(stores),
    )
    return result
