from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..models.jewelry import JewelryItogiFile, UnexposedFile
from ..models.shipment import ShipmentRow

"""In-memory dashboard state: one slice of parsed files per report family.

Slices are tuples and are only ever swapped whole inside ``commit``, so a
reader never sees a half-updated family. Shipment files accumulate across
loads (weekly and monthly, shoes and kids reports live side by side); every
other family is replaced by its latest batch.
"""

__all__ = [
    "APPEND_FAMILIES",
    "DashboardState",
    "SLICES",
]

logger = logging.getLogger(__name__)

APPEND_FAMILIES = frozenset({"shipment"})

# families whose slice attribute carries the family name
_FLAT_FAMILIES = frozenset({"shipment", "scanning", "capsule", "pricing", "filling", "iz", "sales", "sales_jewelry"})

SLICES = ("shipment", "scanning", "jewelry_itogi", "jewelry_unexposed", "capsule",
          "pricing", "filling", "iz", "sales", "sales_jewelry")


class DashboardState:
    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        self.shipment: tuple = ()
        self.scanning: tuple = ()
        self.jewelry_itogi: tuple = ()
        self.jewelry_unexposed: tuple = ()
        self.capsule: tuple = ()
        self.pricing: tuple = ()
        self.filling: tuple = ()
        self.iz: tuple = ()
        self.sales: tuple = ()
        self.sales_jewelry: tuple = ()

    def commit(self, family: str, results: Iterable[Any]) -> None:
        """Store one family's parsed files.

        The jewelry family feeds two slices; a jewelry batch with only one
        report kind replaces that kind and leaves the other one alone.
        """
        results = tuple(results)
        if family == "jewelry":
            itogi = tuple(r for r in results if isinstance(r, JewelryItogiFile))
            unexposed = tuple(r for r in results if isinstance(r, UnexposedFile))
            if itogi:
                self.jewelry_itogi = itogi
            if unexposed:
                self.jewelry_unexposed = unexposed
            logger.debug("committed jewelry: itogi=%d unexposed=%d", len(itogi), len(unexposed))
            return

        if family not in _FLAT_FAMILIES:
            raise ValueError(f"Unknown report family: {family}")
        if family in APPEND_FAMILIES:
            setattr(self, family, getattr(self, family) + results)
        else:
            setattr(self, family, results)
        logger.debug("committed %s: %d file(s), slice now %d", family, len(results), len(getattr(self, family)))

    @property
    def summary_data(self) -> list[ShipmentRow]:
        """Store rows of every loaded shipment file, in load order."""
        return [row for f in self.shipment for row in f.summary]

    @property
    def detail_data(self) -> list[ShipmentRow]:
        return [row for f in self.shipment for row in f.detail]

    @property
    def region_totals(self) -> list[ShipmentRow]:
        return [row for f in self.shipment for row in f.region_totals]

    def counts(self) -> dict[str, int]:
        """Number of files held per slice."""
        return {name: len(getattr(self, name)) for name in SLICES}
