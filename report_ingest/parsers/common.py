from __future__ import annotations

from collections.abc import Iterable

from ..excel.cells import to_trimmed_string

"""Helpers shared by the per-report parsers: region and period tagging."""

__all__ = [
    "REGION_ALL",
    "REGION_BEL",
    "REGION_SPB",
    "detect_region",
    "region_from_name",
    "strip_label",
]

REGION_SPB = "СПБ"
REGION_BEL = "БЕЛ"
# Combined file, or no known region mentioned: applies to either region's view.
REGION_ALL = "ALL"

_REGION_ALIASES = {
    REGION_SPB: ("СПБ", "SPB"),
    REGION_BEL: ("БЕЛ", "BEL"),
}


def _mentions(text: str, region: str) -> bool:
    upper = text.upper()
    return any(alias in upper for alias in _REGION_ALIASES[region])


def detect_region(values: Iterable[object]) -> str:
    """Tri-state region tag from the region-like column values of parsed rows.

    Only СПБ mentioned -> СПБ; only БЕЛ -> БЕЛ; both or neither -> ALL.
    """
    has_spb = False
    has_bel = False
    for value in values:
        text = to_trimmed_string(value)
        if not text:
            continue
        has_spb = has_spb or _mentions(text, REGION_SPB)
        has_bel = has_bel or _mentions(text, REGION_BEL)
        if has_spb and has_bel:
            return REGION_ALL
    if has_spb:
        return REGION_SPB
    if has_bel:
        return REGION_BEL
    return REGION_ALL


def region_from_name(file_name: str) -> str:
    """Region code named in a file name; СПБ wins when both appear."""
    if _mentions(file_name, REGION_SPB):
        return REGION_SPB
    if _mentions(file_name, REGION_BEL):
        return REGION_BEL
    return REGION_ALL


def strip_label(cell: object, *labels: str) -> str:
    """Cell text with the first label found removed ("Период отчета: 01.03 - 07.03" -> "01.03 - 07.03")."""
    text = to_trimmed_string(cell)
    for label in labels:
        if label in text:
            return text.replace(label, "", 1).strip()
    return text
