from __future__ import annotations

from dataclasses import dataclass, field

"""Capsule audit ("Отчет капсулы") models."""

__all__ = [
    "CapsuleFile",
    "CapsuleRow",
]


@dataclass(frozen=True)
class CapsuleRow:
    """Region, subdivision or store level row; finer levels fill more fields."""
    region: str
    unscanned_pct: float | None
    unscanned_pct_prev: float | None
    not_scanned: float
    available: float
    subdivision: str = ""
    store: str = ""
    mall: str = ""


@dataclass(frozen=True)
class CapsuleFile:
    file_name: str
    region: str
    period: str
    regions: list[CapsuleRow] = field(default_factory=list)
    subdivisions: list[CapsuleRow] = field(default_factory=list)
    stores: list[CapsuleRow] = field(default_factory=list)
