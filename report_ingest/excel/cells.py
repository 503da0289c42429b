from __future__ import annotations

import math
import re
from collections import Counter
from datetime import date, datetime
from typing import Any

from openpyxl.utils.datetime import from_excel

"""Cell coercion primitives.

Every function here is total: malformed input degrades to ``None``, ``0`` or
the ``"—"`` placeholder instead of raising. Human-maintained report workbooks
mix encodings freely (``0.823`` vs ``"82,3%"`` vs ``82.3``; Excel serial dates
vs real dates; ``"1 234,5"``), and one odd cell must never lose a whole file.

Cells that land on a fallback path are counted per primitive so a caller can
notice systematically malformed uploads (see ``fallback_counts``).
"""

__all__ = [
    "EMPTY_DATE",
    "DISPLAY_DATE_FORMAT",
    "PERCENT_FRACTION_LIMIT",
    "fallback_counts",
    "fraction_to_percentage",
    "is_empty",
    "reset_fallback_counts",
    "to_date_string",
    "to_number",
    "to_percentage",
    "to_trimmed_string",
]

EMPTY_DATE = "—"
DISPLAY_DATE_FORMAT = "%d.%m.%Y"

# Bare numbers up to this magnitude are read as fractions of one (0.823 -> 82.3).
PERCENT_FRACTION_LIMIT = 1.5

_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_SPACES = re.compile(r"\s")

_fallbacks: Counter[str] = Counter()


def fallback_counts() -> dict[str, int]:
    """Number of cells per primitive that hit a fallback path since the last reset."""
    return dict(_fallbacks)


def reset_fallback_counts() -> None:
    _fallbacks.clear()


def is_empty(cell: Any) -> bool:
    if cell is None:
        return True
    if isinstance(cell, float) and math.isnan(cell):
        return True
    if isinstance(cell, str) and cell.strip() == "":
        return True
    return False


def _parse_float(text: str) -> float | None:
    """Leading-numeric-prefix parse: "82,3%" -> 82.3, "1 234" -> 1234.0."""
    cleaned = _SPACES.sub("", text).replace(",", ".", 1)
    m = _NUMBER_PREFIX.match(cleaned)
    if m is None:
        return None
    value = float(m.group(0))
    if math.isinf(value):
        return None
    return value


def _numeric(cell: Any) -> float | None:
    if isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        value = float(cell)
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(cell, str):
        return _parse_float(cell)
    return None


def to_number(cell: Any, default: float | None = 0.0) -> float | None:
    """Parse a numeric cell.

    ``default`` is returned for empty or unparseable cells. Columns that feed a
    sum keep the zero default; columns where "unknown" differs from "zero"
    pass ``default=None``.
    """
    if is_empty(cell):
        return default
    value = _numeric(cell)
    if value is None:
        _fallbacks["to_number"] += 1
        return default
    return value


def to_percentage(cell: Any) -> float | None:
    """Normalize a percentage cell to the 0-100 scale.

    A literal ``%`` makes the cell self-describing: the sign is stripped and
    the number is used as is. Without it, a non-zero magnitude up to 1.5 is
    taken as a fraction and multiplied by 100. Zero stays zero. The result is
    rounded to 2 decimals.
    """
    if is_empty(cell):
        return None
    has_percent = isinstance(cell, str) and "%" in cell
    value = _numeric(cell.replace("%", "") if has_percent else cell)
    if value is None:
        _fallbacks["to_percentage"] += 1
        return None
    if not has_percent and value != 0 and abs(value) <= PERCENT_FRACTION_LIMIT:
        value = value * 100
    return round(value, 2)


def fraction_to_percentage(cell: Any) -> float | None:
    """Scale a cell the template always stores as a fraction (1.27 -> 127.0).

    Unlike ``to_percentage`` there is no magnitude heuristic: a fill rate of
    160% is stored as 1.6 and must not stay 1.6. Literal ``%`` strings are
    still taken as already scaled.
    """
    if is_empty(cell):
        return None
    if isinstance(cell, str) and "%" in cell:
        return to_percentage(cell)
    value = _numeric(cell)
    if value is None:
        _fallbacks["fraction_to_percentage"] += 1
        return None
    return round(value * 100, 2)


def to_date_string(cell: Any, date_format: str = DISPLAY_DATE_FORMAT) -> str:
    """Render a date-like cell as ``DD.MM.YYYY`` (or ``"—"`` when empty).

    Accepts real dates, Excel 1900-system serials, and pre-formatted strings,
    which are passed through trimmed.
    """
    if is_empty(cell):
        return EMPTY_DATE
    if isinstance(cell, (datetime, date)):
        return cell.strftime(date_format)
    if isinstance(cell, str):
        text = cell.strip()
        if text in ("-", EMPTY_DATE):
            return EMPTY_DATE
        return text
    value = _numeric(cell)
    if value is None:
        _fallbacks["to_date_string"] += 1
        return str(cell)
    try:
        return from_excel(value).strftime(date_format)
    except (OverflowError, ValueError):
        _fallbacks["to_date_string"] += 1
        return EMPTY_DATE


def to_trimmed_string(cell: Any) -> str:
    """Stringify and trim; integral floats lose the trailing ``.0``."""
    if cell is None:
        return ""
    if isinstance(cell, float):
        if math.isnan(cell):
            return ""
        if cell.is_integer():
            return str(int(cell))
    return str(cell).strip()
