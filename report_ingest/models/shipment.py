from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Shipment ("Отчет ДР") report models.

The shipment template carries a free-form set of KPI columns, so a row keeps
its coerced values keyed by the header text of the sheet it came from. The
columns every view relies on are exposed as properties.
"""

__all__ = [
    "ShipmentRow",
    "ShipmentFile",
]

REGION_HEADER = "Регион"
SUBDIVISION_HEADER = "Подразделение"
STORE_HEADER = "Магазин"


@dataclass(frozen=True)
class ShipmentRow:
    """One store row, region-total row, or order-detail row."""
    values: dict[str, Any]  # header -> coerced value
    product_group: str      # "Обувь" / "Кидс" / sheet-variant group
    report_type: str        # "Неделя" / "Месяц"
    source_file: str

    @property
    def region(self) -> str:
        return str(self.values.get(REGION_HEADER) or "")

    @property
    def subdivision(self) -> str:
        return str(self.values.get(SUBDIVISION_HEADER) or "")

    @property
    def store(self) -> str:
        return str(self.values.get(STORE_HEADER) or "")

    def get(self, header: str, default: Any = None) -> Any:
        return self.values.get(header, default)


@dataclass(frozen=True)
class ShipmentFile:
    file_name: str
    title: str
    period: str
    product_group: str
    report_type: str
    region: str
    summary: list[ShipmentRow] = field(default_factory=list)
    detail: list[ShipmentRow] = field(default_factory=list)
    region_totals: list[ShipmentRow] = field(default_factory=list)
