from __future__ import annotations

from dataclasses import dataclass, field

"""Address-based order (ИЗ) report models."""

__all__ = [
    "IZFile",
    "IZSheet",
    "IZStoreRow",
]


@dataclass(frozen=True)
class IZStoreRow:
    region: str
    subdivision: str
    store: str
    mall: str
    rating: float | None
    ready_orders: float | None
    scan_share: float | None
    clicks: float | None


@dataclass(frozen=True)
class IZSheet:
    period: str
    stores: list[IZStoreRow] = field(default_factory=list)


@dataclass(frozen=True)
class IZFile:
    file_name: str
    region: str
    sheets: dict[str, IZSheet] = field(default_factory=dict)  # "День" / "Неделя" / "Месяц"
