from __future__ import annotations

from dataclasses import dataclass, field

"""Scanning/acceptance ("Нет сканирования") report models."""

__all__ = [
    "CategoryShare",
    "ScanningFile",
    "ScanningRow",
    "SeasonShare",
]


@dataclass(frozen=True)
class SeasonShare:
    season: str
    direction: str
    value: float


@dataclass(frozen=True)
class CategoryShare:
    season: str
    direction: str
    category: str
    value: float


@dataclass(frozen=True)
class ScanningRow:
    region: str
    subdivision: str
    store: str
    mall: str
    scan_pct: float | None
    scan_articles: float
    scan_qty: float
    bind_pct: float | None
    bind_articles: float
    seasons: tuple[SeasonShare, ...] = ()
    categories: tuple[CategoryShare, ...] = ()
    sheet: str = ""


@dataclass(frozen=True)
class ScanningFile:
    file_name: str
    region: str
    period: str
    regions: list[ScanningRow] = field(default_factory=list)
    subdivisions: list[ScanningRow] = field(default_factory=list)
    stores: list[ScanningRow] = field(default_factory=list)
