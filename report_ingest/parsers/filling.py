from __future__ import annotations

import logging
from typing import NamedTuple

from ..excel.cells import fraction_to_percentage, is_empty, to_number, to_trimmed_string
from ..excel.reader import RawSheet, Workbook
from ..models.filling import FillingFile, FillingStore, SeasonMetrics, TransitTotal
from .common import detect_region

"""Store filling ("Наполненность") parser.

"Наполненность" rows 1..3 are headers, the grand total and the region total;
stores start at row 4. "В пути" has one header row less. Both sheets key
stores by the number in column I, and seasonal blocks sit at fixed column
offsets (8 sub-columns per season on "Наполненность", 6 on "В пути").
"""

__all__ = [
    "FILLING_SEASONS",
    "FILLING_SUB_KEYS",
    "TRANSIT_SEASONS",
    "TRANSIT_SUB_KEYS",
    "parse",
]

logger = logging.getLogger(__name__)

FILLING_SHEET = "Наполненность"
TRANSIT_SHEET = "В пути"


class Season(NamedTuple):
    key: str
    label: str
    start_col: int


FILLING_SEASONS = (
    Season("vsesez", "Всесезонный", 31),
    Season("vsesez_tap", "Всесезонный (тапочки)", 39),
    Season("demi_high", "Демисезонный (высокий)", 47),
    Season("demi_low", "Демисезонный (низкий)", 55),
    Season("demi_boot", "Демисезонный (сапоги)", 63),
    Season("zima", "Зима", 71),
    Season("leto_cl", "Лето (закрытое)", 79),
    Season("leto_op", "Лето (открытое)", 87),
)

# (key, label) in column order within a season block
FILLING_SUB_KEYS = (
    ("limit", "Лимит по плану продаж, пар"),
    ("inStore", "В магазинах, пар"),
    ("reserve", "Запас к лимиту"),
    ("sharePct", "Доля в остатке, %"),
    ("remSale", "Остаток к продаже"),
    ("sales7", "Продажи за 7 дней"),
    ("turnover", "Оборачиваемость"),
    ("sellout", "Текущий Sell Out"),
)
FRACTION_SUB_KEYS = frozenset({"sharePct", "sellout"})

TRANSIT_SEASONS = (
    Season("vsesez", "Всесезонный", 10),
    Season("vsesez_tap", "Всесезонный (тапочки)", 16),
    Season("demi_high", "Демисезонный (высокий)", 22),
    Season("demi_low", "Демисезонный (низкий)", 28),
    Season("demi_boot", "Демисезонный (сапоги)", 34),
    Season("zima", "Зима", 40),
    Season("leto_cl", "Лето (закрытое)", 46),
    Season("leto_op", "Лето (открытое)", 52),
)

TRANSIT_SUB_KEYS = (
    ("shipped", "В заказах Отгружено"),
    ("created", "В заказах Создано"),
    ("assembling", "В журналах сборки"),
    ("stock", "ВК ПП на складе"),
    ("crossdok", "В Кросс-dok заказах"),
    ("total", "В пути всего"),
)

TRANSIT_TOTAL_COLS = {
    "total_in_transit": 63,
    "shipped": 58,
    "created": 59,
}

FILLING_START_ROW = 4
TRANSIT_START_ROW = 3
STORE_COL = 8


def _num(sheet: RawSheet, r: int, c: int) -> float | None:
    return to_number(sheet.cell(r, c), default=None)


def _filling_seasons(sheet: RawSheet, r: int) -> SeasonMetrics:
    """Per-season filling metrics of row ``r``; share columns are scaled to percent."""
    seasons: SeasonMetrics = {}
    for season in FILLING_SEASONS:
        metrics = {}
        for offset, (key, _) in enumerate(FILLING_SUB_KEYS):
            cell = sheet.cell(r, season.start_col + offset)
            metrics[key] = fraction_to_percentage(cell) if key in FRACTION_SUB_KEYS else to_number(cell, default=None)
        seasons[season.key] = metrics
    return seasons


def _transit_seasons(sheet: RawSheet, r: int) -> SeasonMetrics:
    return {
        season.key: {
            key: _num(sheet, r, season.start_col + offset)
            for offset, (key, _) in enumerate(TRANSIT_SUB_KEYS)
        }
        for season in TRANSIT_SEASONS
    }


def parse_transit(sheet: RawSheet) -> dict[str, tuple[SeasonMetrics, TransitTotal]]:
    """Store key -> (seasonal transit, transit totals); a repeated store keeps its last row."""
    transit = {}
    for r in range(TRANSIT_START_ROW, sheet.n_rows):
        store = sheet.cell(r, STORE_COL)
        if is_empty(store):
            continue
        total = TransitTotal(**{name: _num(sheet, r, c) for name, c in TRANSIT_TOTAL_COLS.items()})
        transit[to_trimmed_string(store)] = (_transit_seasons(sheet, r), total)
    return transit


def parse_filling(sheet: RawSheet, transit: dict[str, tuple[SeasonMetrics, TransitTotal]]) -> list[FillingStore]:
    """Parse the filling sheet and attach each store's transit data.

    Args:
        sheet: the filling sheet
        transit: result of ``parse_transit`` for the same workbook

    Returns:
        One ``FillingStore`` per row with a store code; stores missing from
        the transit sheet get None for both transit fields
    """
    stores = []
    for r in range(FILLING_START_ROW, sheet.n_rows):
        store_cell = sheet.cell(r, STORE_COL)
        if is_empty(store_cell):
            continue
        store = to_trimmed_string(store_cell)
        transit_seasons, transit_total = transit.get(store, (None, None))
        stores.append(FillingStore(
            subdivision=to_trimmed_string(sheet.cell(r, 2)),
            store=store,
            name=to_trimmed_string(sheet.cell(r, 4)),
            category=to_trimmed_string(sheet.cell(r, 7)),
            fill_pct_max=fraction_to_percentage(sheet.cell(r, 11)),
            plan_pairs_max=_num(sheet, r, 12),
            plan_pairs=_num(sheet, r, 13),
            last_pairs=_num(sheet, r, 26),
            seasons=_filling_seasons(sheet, r),
            transit_seasons=transit_seasons,
            transit_total=transit_total,
        ))
    return stores


def parse(workbook: Workbook, file_name: str) -> FillingFile | None:
    """Parse a filling workbook; None without a "Наполненность" sheet.

    "В пути" is optional; stores it does not list get no transit data.
    """
    sheet = workbook.sheet(FILLING_SHEET)
    if sheet is None:
        return None
    transit_sheet = workbook.sheet(TRANSIT_SHEET)
    transit = parse_transit(transit_sheet) if transit_sheet is not None else {}
    stores = parse_filling(sheet, transit)

    subdivisions = sorted({s.subdivision for s in stores if s.subdivision})
    matched = sum(1 for s in stores if s.transit_total is not None)
    logger.debug("filling %s: stores=%d with_transit=%d", file_name, len(stores), matched)
    return FillingFile(
        file_name=file_name,
        region=detect_region(subdivisions),
        stores=stores,
        subdivisions=subdivisions,
    )
