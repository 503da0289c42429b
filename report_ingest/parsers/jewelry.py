from __future__ import annotations

import logging

from ..excel.cells import is_empty, to_date_string, to_number, to_percentage, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..excel.sections import MarkerSpec, find_markers
from ..models.jewelry import (
    JewelryItogiFile,
    JewelryRow,
    UnexposedFile,
    UnexposedItem,
    UnexposedSummaryRow,
)
from .common import detect_region, strip_label

"""Jewelry (ЮИ) report parsers.

Two report kinds arrive under this family:

- itogi ("Итоги ЮИ"): unexposed share per subdivision and store, sheet "OUT".
  The current template is one flat store table (row 1 header with "Магазин"
  in column C); the legacy template has a subdivision block at the top
  followed by a separate store table with its own header row.
- unexposed ("Невыставленные ЮИ"): per-store totals on "Итог по магазину"
  and the item list on "OUT".
"""

__all__ = [
    "KIND_ITOGI",
    "KIND_UNEXPOSED",
    "detect_kind",
    "parse",
    "parse_itogi",
    "parse_unexposed",
]

logger = logging.getLogger(__name__)

KIND_ITOGI = "itogi"
KIND_UNEXPOSED = "unexposed"

OUT_SHEET = "OUT"
STORE_TOTALS_SHEET = "Итог по магазину"

_PERIOD_LABELS = ("Период отчета: ", "Период отчета:")

# Legacy store table header: "Регион" in A and "Магазин" in C, below row 2.
LEGACY_STORE_HEADER = MarkerSpec.of(0, "Регион", also={2: ("Магазин",)}, start_row=3)


def detect_kind(file_name: str) -> str | None:
    """Tell the two jewelry report kinds apart by file name.

    The unexposed keyword is checked first: "Невыставленные ЮИ" also contains
    "юи", and checking the itogi keywords first would never yield the
    unexposed kind for such names.

    Args:
        file_name: base name of the uploaded file

    Returns:
        ``KIND_UNEXPOSED``, ``KIND_ITOGI``, or None for neither
    """
    lower = file_name.lower()
    if "невыставленн" in lower:
        return KIND_UNEXPOSED
    if "юи" in lower or "ювелир" in lower or "итог" in lower:
        return KIND_ITOGI
    return None


def _text(sheet: RawSheet, r: int, c: int) -> str:
    return to_trimmed_string(sheet.cell(r, c))


def _store_row(sheet: RawSheet, r: int, art_col: int, pct_col: int, date_col: int) -> JewelryRow:
    """Store row ``r``; the metric columns differ between the two layouts."""
    return JewelryRow(
        region=_text(sheet, r, 0),
        subdivision=_text(sheet, r, 1),
        store=_text(sheet, r, 2),
        article_count=to_number(sheet.cell(r, art_col)),
        unexposed_pct=to_percentage(sheet.cell(r, pct_col)),
        last_scan=to_date_string(sheet.cell(r, date_col)),
    )


def _aggregate_subdivisions(stores: list[JewelryRow]) -> list[JewelryRow]:
    """Subdivision rows derived from store rows, in first-seen order."""
    groups: dict[tuple[str, str], list[JewelryRow]] = {}
    for row in stores:
        groups.setdefault((row.region, row.subdivision), []).append(row)

    subdivisions = []
    for (region, subdivision), rows in groups.items():
        pcts = [r.unexposed_pct for r in rows if r.unexposed_pct is not None]
        subdivisions.append(JewelryRow(
            region=region,
            subdivision=subdivision,
            article_count=sum(r.article_count for r in rows),
            unexposed_pct=round(sum(pcts) / len(pcts), 2) if pcts else None,
            last_scan=rows[0].last_scan,
        ))
    return subdivisions


def _is_data_row(sheet: RawSheet, r: int) -> bool:
    """Not blank, not a repeated header, and has a region or a subdivision."""
    if all(is_empty(v) for v in sheet.row(r)):
        return False
    if _text(sheet, r, 0) == "Регион":
        return False
    return not (is_empty(sheet.cell(r, 0)) and is_empty(sheet.cell(r, 1)))


def _parse_current(sheet: RawSheet) -> tuple[list[JewelryRow], list[JewelryRow]]:
    """Current layout: store rows only, subdivisions are aggregated from them."""
    stores = [
        _store_row(sheet, r, art_col=3, pct_col=4, date_col=5)
        for r in range(2, sheet.n_rows)
        if _is_data_row(sheet, r)
    ]
    return _aggregate_subdivisions(stores), stores


def _parse_legacy(sheet: RawSheet) -> tuple[list[JewelryRow], list[JewelryRow]]:
    """Legacy layout: subdivision table on top, store table below its own header."""
    markers = find_markers(sheet, LEGACY_STORE_HEADER)
    header = markers[0].row if markers else sheet.n_rows

    subdivisions = [
        JewelryRow(
            region=_text(sheet, r, 0),
            subdivision=_text(sheet, r, 1),
            article_count=to_number(sheet.cell(r, 2)),
            unexposed_pct=to_percentage(sheet.cell(r, 3)),
            last_scan=to_date_string(sheet.cell(r, 4)),
        )
        for r in range(2, header)
        if _is_data_row(sheet, r)
    ]
    stores = [
        _store_row(sheet, r, art_col=3, pct_col=4, date_col=5)
        for r in range(header + 1, sheet.n_rows)
        if _is_data_row(sheet, r)
    ]
    return subdivisions, stores


def parse_itogi(workbook: Workbook, file_name: str) -> JewelryItogiFile | None:
    """Parse an "Итоги ЮИ" workbook.

    Args:
        workbook: the opened workbook
        file_name: base name of the file

    Returns:
        ``JewelryItogiFile``, or None without an "OUT" sheet
    """
    sheet = workbook.sheet(OUT_SHEET)
    if sheet is None:
        return None
    period = strip_label(sheet.cell(0, 0), *_PERIOD_LABELS)
    legacy = _text(sheet, 1, 2) != "Магазин"
    subdivisions, stores = _parse_legacy(sheet) if legacy else _parse_current(sheet)
    return JewelryItogiFile(
        file_name=file_name,
        region=detect_region(row.region for row in subdivisions + stores),
        period=period,
        legacy_layout=legacy,
        subdivisions=subdivisions,
        stores=stores,
    )


def parse_unexposed(workbook: Workbook, file_name: str) -> UnexposedFile | None:
    """Parse a "Невыставленные ЮИ" workbook; None unless both of its sheets exist."""
    totals = workbook.sheet(STORE_TOTALS_SHEET)
    out = workbook.sheet(OUT_SHEET)
    if totals is None or out is None:
        return None

    summary = []
    for r in range(1, totals.n_rows):
        if is_empty(totals.cell(r, 0)):
            continue
        summary.append(UnexposedSummaryRow(
            region=_text(totals, r, 0),
            subdivision=_text(totals, r, 1),
            store=_text(totals, r, 2),
            mall=_text(totals, r, 3),
            stock_qty=to_number(totals.cell(r, 4)),
            click_qty=to_number(totals.cell(r, 5)),
            unexposed_qty=to_number(totals.cell(r, 6)),
        ))

    detail = []
    for r in range(2, out.n_rows):
        if is_empty(out.cell(r, 0)):
            continue
        group = _text(out, r, 4)
        lowered = group.lower()
        detail.append(UnexposedItem(
            region=_text(out, r, 0),
            subdivision=_text(out, r, 1),
            store=_text(out, r, 2),
            mall=_text(out, r, 3),
            group=group,
            is_gold="золот" in lowered or "gold" in lowered,
            article=_text(out, r, 5),
            name=_text(out, r, 6),
            cell=_text(out, r, 7),
            photo_url=_text(out, r, 8),
        ))

    return UnexposedFile(
        file_name=file_name,
        region=detect_region(row.region for row in summary),
        period=strip_label(out.cell(0, 0), *_PERIOD_LABELS),
        summary=summary,
        detail=detail,
    )


def parse(workbook: Workbook, file_name: str) -> JewelryItogiFile | UnexposedFile | None:
    """Dispatch on the file name; None when the name or the sheets don't fit either kind."""
    kind = detect_kind(file_name)
    if kind == KIND_ITOGI:
        result = parse_itogi(workbook, file_name)
    elif kind == KIND_UNEXPOSED:
        result = parse_unexposed(workbook, file_name)
    else:
        result = None
    logger.debug("jewelry %s: kind=%s parsed=%s", file_name, kind, result is not None)
    return result
