from __future__ import annotations

from dataclasses import dataclass, field

"""Pricing audit ("Рейтинг переоценки") models."""

__all__ = [
    "PricingColumn",
    "PricingFile",
    "PricingRow",
]


@dataclass(frozen=True)
class PricingColumn:
    key: str
    label: str


@dataclass(frozen=True)
class PricingRow:
    region: str
    subdivision: str
    store: str
    metrics: tuple[float | None, ...]  # one percentage per PricingColumn, same order

    def metric(self, key: str, columns: list[PricingColumn]) -> float | None:
        for i, col in enumerate(columns):
            if col.key == key:
                return self.metrics[i] if i < len(self.metrics) else None
        raise KeyError(key)


@dataclass(frozen=True)
class PricingFile:
    file_name: str
    region: str
    columns: list[PricingColumn]
    regions: list[PricingRow] = field(default_factory=list)
    subdivisions: list[PricingRow] = field(default_factory=list)
    stores: list[PricingRow] = field(default_factory=list)
