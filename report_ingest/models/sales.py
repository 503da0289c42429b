from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Sales report models (shared by the sales and sales-jewelry families).

A sales row keeps two views of every cell:

- ``values``: display value keyed by the header text of row 4
- ``raw``: untouched cell value keyed by column index

The export layer recomputes colour scales and number formats from ``raw``,
so ``as_record()`` flattens it to ``_c{index}`` keys next to the headers.
"""

__all__ = [
    "SalesFile",
    "SalesRow",
]


@dataclass(frozen=True)
class SalesRow:
    values: dict[str, Any]
    raw: dict[int, Any]
    column_count: int
    source_row: int

    def column(self, index: int) -> Any:
        return self.raw.get(index)

    def as_record(self) -> dict[str, Any]:
        record: dict[str, Any] = dict(self.values)
        for index, value in self.raw.items():
            record[f"_c{index}"] = value
        record["_colCount"] = self.column_count
        return record


@dataclass(frozen=True)
class SalesFile:
    file_name: str
    region: str
    period_type: str  # "ДЕНЬ" / "МЕСЯЦ"
    periods: list[str] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    stores: list[SalesRow] = field(default_factory=list)
    subdivisions: list[SalesRow] = field(default_factory=list)
    regions: list[SalesRow] = field(default_factory=list)
