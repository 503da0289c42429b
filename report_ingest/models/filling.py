from __future__ import annotations

from dataclasses import dataclass, field

"""Store filling ("Наполненность") models.

Seasonal metrics are nested mappings: season key -> sub-metric key -> value,
with the keys listed in ``parsers.filling`` (FILLING_SEASONS, FILLING_SUB_KEYS,
TRANSIT_SEASONS, TRANSIT_SUB_KEYS).
"""

__all__ = [
    "FillingFile",
    "FillingStore",
    "SeasonMetrics",
    "TransitTotal",
]

SeasonMetrics = dict[str, dict[str, float | None]]


@dataclass(frozen=True)
class TransitTotal:
    total_in_transit: float | None
    shipped: float | None
    created: float | None


@dataclass(frozen=True)
class FillingStore:
    subdivision: str
    store: str
    name: str
    category: str
    fill_pct_max: float | None
    plan_pairs_max: float | None
    plan_pairs: float | None
    last_pairs: float | None
    seasons: SeasonMetrics = field(default_factory=dict)
    # None when the store has no row on the "В пути" sheet
    transit_seasons: SeasonMetrics | None = None
    transit_total: TransitTotal | None = None


@dataclass(frozen=True)
class FillingFile:
    file_name: str
    region: str
    stores: list[FillingStore] = field(default_factory=list)
    subdivisions: list[str] = field(default_factory=list)
