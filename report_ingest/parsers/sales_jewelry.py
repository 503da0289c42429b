from __future__ import annotations

import logging

from ..excel.cells import to_trimmed_string
from ..excel.reader import Workbook
from ..models.sales import SalesFile
from .common import REGION_ALL, REGION_BEL, REGION_SPB, region_from_name
from .sales import PERIOD_DAY, PERIOD_MONTH, gradient_direction, parse_sales_sheet

"""Jewelry sales share ("Доля в продажах ЮИ") report parser.

Same block layout as the sales report, on sheet "Доля в продажах", with its
own column meanings (share, plan, turnover and margin metrics for silver and
gold).
"""

__all__ = [
    "YUI_COLS_HIGH_BAD",
    "YUI_COLS_HIGH_GOOD",
    "YUI_INTEGER_COLS",
    "YUI_PERCENT_COLS",
    "jewelry_gradient_direction",
    "parse",
]

logger = logging.getLogger(__name__)

SHEET_NAME = "Доля в продажах"
FIRST_DATA_ROW = 5

YUI_COLS_HIGH_GOOD = frozenset({*range(4, 28), *range(31, 41)})
YUI_COLS_HIGH_BAD = frozenset({28, 29, 30})
# Stored as fractions; rendered as percentages
YUI_PERCENT_COLS = frozenset({4, 5, 6, 7, 8, 9, 10, 11, 15, 16, 18, 21, 22, 26, 27, 30, 31, 32, 33, 34, 35, 36, 39})
# Rendered without decimals
YUI_INTEGER_COLS = frozenset({12, 13, 14, 17, 19, 20, 23, 24, 25, 37, 38, 40})


def jewelry_gradient_direction(col: int) -> str | None:
    """"good", "bad" or None for a jewelry sales column."""
    return gradient_direction(col, good=YUI_COLS_HIGH_GOOD, bad=YUI_COLS_HIGH_BAD)


def detect_period_type(file_name: str) -> str:
    """Day or month from a "День_..." / "Месяц_..." style name; day by default."""
    upper = file_name.upper()
    if upper.startswith("ДЕНЬ") or "ДЕНЬ_" in upper or "DAY" in upper:
        return PERIOD_DAY
    if upper.startswith("МЕСЯЦ") or "МЕСЯЦ_" in upper or "MONTH" in upper:
        return PERIOD_MONTH
    return PERIOD_DAY


def parse(workbook: Workbook, file_name: str) -> SalesFile | None:
    """Parse a jewelry-sales workbook.

    Args:
        workbook: the opened workbook
        file_name: base name; carries the region and period type

    Returns:
        ``SalesFile``, or None without the sales sheet. When the name has no
        region, the first data row decides between SPB and BEL.
    """
    sheet = workbook.sheet(SHEET_NAME)
    if sheet is None:
        return None

    region = region_from_name(file_name)
    if region == REGION_ALL:
        first_region = to_trimmed_string(sheet.cell(FIRST_DATA_ROW, 0)).upper()
        if REGION_SPB in first_region:
            region = REGION_SPB
        elif REGION_BEL in first_region:
            region = REGION_BEL

    parsed = parse_sales_sheet(sheet)
    logger.debug("sales_jewelry %s: stores=%d region=%s", file_name, len(parsed["stores"]), region)
    return SalesFile(
        file_name=file_name,
        region=region,
        period_type=detect_period_type(file_name),
        **parsed,
    )
