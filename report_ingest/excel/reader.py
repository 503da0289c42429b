from __future__ import annotations

import io
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reader.

Every sheet is read without a header row into a rectangular grid of raw cell
values. Parsers locate their own header rows by content, so nothing here
assumes a fixed layout. Empty cells become ``None``; pandas timestamps become
plain ``datetime`` objects; numpy scalars become Python scalars.
"""

__all__ = [
    "RawSheet",
    "Workbook",
    "WorkbookReadError",
    "read_workbook",
]


class WorkbookReadError(Exception):
    """Raised when the bytes cannot be opened as a workbook."""


@dataclass(frozen=True)
class RawSheet:
    """Zero-indexed 2D grid of raw cell values for one worksheet."""
    name: str
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    def row(self, r: int) -> list[Any]:
        if 0 <= r < len(self.rows):
            return self.rows[r]
        return []

    def cell(self, r: int, c: int) -> Any:
        """Cell lookup by address; anything out of range is ``None``."""
        row = self.row(r)
        if 0 <= c < len(row):
            return row[c]
        return None


@dataclass(frozen=True)
class Workbook:
    sheet_names: list[str]
    sheets: dict[str, RawSheet]

    def has_sheet(self, name: str) -> bool:
        return name in self.sheets

    def sheet(self, name: str) -> RawSheet | None:
        return self.sheets.get(name)


def _plain(value: Any) -> Any:
    """Convert a pandas/numpy cell value into a plain Python value."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    # numpy scalars (int64, float64, bool_)
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        try:
            value = value.item()
        except (ValueError, TypeError):
            return value
        if isinstance(value, float) and math.isnan(value):
            return None
    return value


def _na_options(keep_na_strings: list[str] | None) -> tuple[list[str] | None, bool]:
    # Strings listed in keep_na_strings are removed from pandas' default NA set
    # so that e.g. a store literally named "NA" survives the read.
    import pandas._libs.parsers as parsers

    if keep_na_strings:
        custom_na = parsers.STR_NA_VALUES.copy() - set(keep_na_strings)
        return list(custom_na), False
    return None, True


def read_workbook(
    source: bytes | Path,
    target_sheets: Iterable[str] | None = None,
    keep_na_strings: list[str] | None = None,
) -> Workbook:
    """Open a workbook and return every (or every requested) sheet as a RawSheet.

    Parameters
    ----------
    source: workbook bytes (uploaded buffer) or a path on disk
    target_sheets: restrict to these sheet names (None means all sheets)
    keep_na_strings: strings that must not be converted to empty cells
    """
    na_values, keep_default_na = _na_options(keep_na_strings)
    handle: Any = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    try:
        xls = pd.ExcelFile(handle)
    except Exception as e:
        raise WorkbookReadError(f"cannot open workbook: {e}") from e

    wanted = set(target_sheets) if target_sheets is not None else None
    names = [str(n) for n in xls.sheet_names]
    sheets: dict[str, RawSheet] = {}
    with xls:
        for name in names:
            if wanted is not None and name not in wanted:
                continue
            df = xls.parse(
                name,
                header=None,
                dtype=object,
                keep_default_na=keep_default_na,
                na_values=na_values,
            )
            rows = [[_plain(v) for v in raw] for raw in df.itertuples(index=False, name=None)]
            sheets[name] = RawSheet(name=name, rows=rows)
    return Workbook(sheet_names=names, sheets=sheets)
