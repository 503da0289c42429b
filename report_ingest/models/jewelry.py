from __future__ import annotations

from dataclasses import dataclass, field

"""Jewelry (ЮИ) models: the unexposed-share summary and the unexposed-item report."""

__all__ = [
    "JewelryItogiFile",
    "JewelryRow",
    "UnexposedFile",
    "UnexposedItem",
    "UnexposedSummaryRow",
]


@dataclass(frozen=True)
class JewelryRow:
    """Subdivision row (store == "") or store row of the summary report."""
    region: str
    subdivision: str
    article_count: float
    unexposed_pct: float | None
    last_scan: str
    store: str = ""


@dataclass(frozen=True)
class JewelryItogiFile:
    file_name: str
    region: str
    period: str
    legacy_layout: bool
    subdivisions: list[JewelryRow] = field(default_factory=list)
    stores: list[JewelryRow] = field(default_factory=list)


@dataclass(frozen=True)
class UnexposedSummaryRow:
    region: str
    subdivision: str
    store: str
    mall: str
    stock_qty: float
    click_qty: float
    unexposed_qty: float


@dataclass(frozen=True)
class UnexposedItem:
    region: str
    subdivision: str
    store: str
    mall: str
    group: str
    is_gold: bool
    article: str
    name: str
    cell: str
    photo_url: str


@dataclass(frozen=True)
class UnexposedFile:
    file_name: str
    region: str
    period: str
    summary: list[UnexposedSummaryRow] = field(default_factory=list)
    detail: list[UnexposedItem] = field(default_factory=list)

