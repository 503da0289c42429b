from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from ..excel.cells import to_number
from ..models.filling import FillingStore
from ..models.shipment import REGION_HEADER, STORE_HEADER, SUBDIVISION_HEADER, ShipmentRow
from ..parsers.common import REGION_ALL, region_from_name
from ..parsers.filling import TRANSIT_SEASONS

"""Derived views over committed state: lookups, group-bys and KPI totals.

Everything here is a pure function of its arguments.
"""

__all__ = [
    "GroupTotals",
    "PRODUCT_GROUP",
    "average_percentage",
    "files_for_region",
    "filter_tracked_regions",
    "get_field",
    "get_number",
    "group_shipments",
    "region_breakdown",
    "shipment_kpis",
    "transit_row_total",
    "unique_values",
]

T = TypeVar("T")

UNKNOWN = "Неизвестно"
# Pseudo-key for grouping by the row's product group tag
PRODUCT_GROUP = "_productGroup"

SHIPPED = "Отгружено шт"
TO_SHIP = "Всего к вывозу шт"
RECEIVED = "Получено шт"
SHIPMENTS = "Кол-во вывозов"
RETURNED = "Возврат от агрегатора шт"
WRITTEN_OFF = "Вычерк шт"
REMAINING = "Осталось отгрузить пар шт"
SHIPPED_PCT = "Отгружено товара %"
WRITEOFF_PCT = "Вычерк по сборке %"

# Problem store: shipped share below this (but above zero) ...
PROBLEM_SHIPPED_PCT = 80
# ... or assembly write-off share above this
PROBLEM_WRITEOFF_PCT = 15

_KEY_PUNCT = re.compile(r"[,.]")
_KEY_SPACES = re.compile(r"\s+")


def _normalize(key: str) -> str:
    return _KEY_SPACES.sub(" ", _KEY_PUNCT.sub(" ", str(key).lower())).strip()


def _values(row: ShipmentRow | Mapping[str, Any]) -> Mapping[str, Any]:
    return row.values if isinstance(row, ShipmentRow) else row


def get_field(row: ShipmentRow | Mapping[str, Any], key: str) -> Any:
    """Header lookup tolerant of spelling: "Отгружено, шт" finds "Отгружено шт" and "Отгружено,шт".

    Tries the exact key, then the two comma variants, then a comparison with
    commas, dots and repeated whitespace folded. Returns None if nothing
    matches with a non-null value.
    """
    values = _values(row)
    for candidate in (key, key.replace(", ", " ", 1), key.replace(", ", ",", 1)):
        value = values.get(candidate)
        if value is not None:
            return value
    wanted = _normalize(key)
    for header, value in values.items():
        if value is not None and _normalize(header) == wanted:
            return value
    return None


def get_number(row: ShipmentRow | Mapping[str, Any], key: str) -> float:
    return to_number(get_field(row, key), default=0.0)


def unique_values(rows: Iterable[ShipmentRow | Mapping[str, Any]], key: str) -> list[str]:
    """Sorted distinct non-empty values of a column."""
    found = set()
    for row in rows:
        value = get_field(row, key)
        if value is not None and value != "":
            found.add(str(value))
    return sorted(found)


def filter_tracked_regions(rows: Iterable[ShipmentRow]) -> list[ShipmentRow]:
    """Rows whose region names one of the tracked regions (СПБ or БЕЛ)."""
    return [row for row in rows if region_from_name(row.region) != REGION_ALL]


@dataclass(frozen=True)
class GroupTotals:
    name: str
    shipped: float
    to_ship: float
    received: float
    shipments: float
    store_count: int

    @property
    def pct(self) -> float:
        """Shipped share of the to-ship volume, from the summed totals."""
        return self.shipped / self.to_ship * 100 if self.to_ship > 0 else 0.0


def _group_key(row: ShipmentRow, key: str) -> str:
    if key == PRODUCT_GROUP:
        return row.product_group or UNKNOWN
    value = row.values.get(key)
    if not value:
        value = get_field(row, key)
    return str(value) if value else UNKNOWN


def _sum_groups(rows: Iterable[ShipmentRow], key: str) -> tuple[dict[str, dict[str, float]], dict[str, set[str]]]:
    sums: dict[str, dict[str, float]] = {}
    stores: dict[str, set[str]] = {}
    for row in rows:
        name = _group_key(row, key)
        acc = sums.setdefault(name, {"shipped": 0.0, "to_ship": 0.0, "received": 0.0, "shipments": 0.0})
        acc["shipped"] += get_number(row, SHIPPED)
        acc["to_ship"] += get_number(row, TO_SHIP)
        acc["received"] += get_number(row, RECEIVED)
        acc["shipments"] += get_number(row, SHIPMENTS)
        stores.setdefault(name, set()).add(row.store)
    return sums, stores


def _sorted(groups: Iterable[GroupTotals]) -> list[GroupTotals]:
    return sorted(groups, key=lambda g: g.shipped, reverse=True)


def group_shipments(rows: Iterable[ShipmentRow], key: str) -> list[GroupTotals]:
    """Totals per distinct value of ``key`` (a header or PRODUCT_GROUP), largest shipped first."""
    sums, stores = _sum_groups(rows, key)
    return _sorted(GroupTotals(name=name, store_count=len(stores[name]), **acc) for name, acc in sums.items())


def region_breakdown(summary: Sequence[ShipmentRow], region_totals: Sequence[ShipmentRow]) -> list[GroupTotals]:
    """Per-region totals.

    The report's own region total rows are used when present; store counts
    still come from the store rows. Without total rows the store rows are
    grouped by region.
    """
    if not region_totals:
        return group_shipments(summary, REGION_HEADER)
    sums, _ = _sum_groups(region_totals, REGION_HEADER)
    _, stores = _sum_groups(summary, REGION_HEADER)
    return _sorted(
        GroupTotals(name=name, store_count=len(stores.get(name, ())), **acc) for name, acc in sums.items()
    )


def shipment_kpis(summary: Sequence[ShipmentRow], region_totals: Sequence[ShipmentRow]) -> dict[str, Any]:
    """Dashboard headline figures for a set of shipment rows.

    Totals come from region total rows when the reports carry them, else from
    the store rows. Problem stores and store counts only consider stores in
    tracked regions.
    """
    source = region_totals if region_totals else summary

    def total(header: str) -> float:
        return sum(get_number(row, header) for row in source)

    tracked = filter_tracked_regions(summary)
    to_ship = total(TO_SHIP)
    shipped = total(SHIPPED)
    problem_stores = 0
    for row in tracked:
        shipped_pct = get_number(row, SHIPPED_PCT)
        writeoff_pct = get_number(row, WRITEOFF_PCT)
        if 0 < shipped_pct < PROBLEM_SHIPPED_PCT or writeoff_pct > PROBLEM_WRITEOFF_PCT:
            problem_stores += 1

    return {
        "total_to_ship": to_ship,
        "total_shipped": shipped,
        "total_received": total(RECEIVED),
        "total_returned": total(RETURNED),
        "total_written_off": total(WRITTEN_OFF),
        "total_shipments": total(SHIPMENTS),
        "total_remaining": total(REMAINING),
        "avg_pct": shipped / to_ship * 100 if to_ship > 0 else 0.0,
        "problem_stores": problem_stores,
        "stores_count": len({row.get(STORE_HEADER) for row in tracked}),
        "by_region": region_breakdown(summary, region_totals),
        "by_subdivision": group_shipments(tracked, SUBDIVISION_HEADER),
        "by_product_group": group_shipments(summary, PRODUCT_GROUP),
    }


def files_for_region(files: Iterable[T], region: str) -> list[T]:
    """Files tagged with ``region``; when there are none, the files tagged ALL."""
    files = list(files)
    exact = [f for f in files if getattr(f, "region", None) == region]
    if exact:
        return exact
    return [f for f in files if getattr(f, "region", None) == REGION_ALL]


def average_percentage(values: Iterable[float | None]) -> float | None:
    """Mean of the known percentages, rounded to 2 decimals; None when there are none."""
    known = [v for v in values if v is not None]
    if not known:
        return None
    return round(sum(known) / len(known), 2)


def transit_row_total(store: FillingStore, sub_key: str) -> float | None:
    """One transit sub-metric summed over all seasons; None when the store has no transit data or it sums to 0."""
    if store.transit_seasons is None:
        return None
    total = sum(store.transit_seasons.get(s.key, {}).get(sub_key) or 0 for s in TRANSIT_SEASONS)
    return total or None
