from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .cells import is_empty, to_trimmed_string
from .reader import RawSheet

"""Header/section locator.

Report sheets repeat their column-header row at the top of every aggregation
block (stores, then subdivisions, then regions). A header row is recognised by
exact text in a known column; every match opens a new section, and the last
section runs to the end of the sheet.

    MarkerSpec(column=0, values={"Регион"})       -> markers at rows 4, 60, 75
    split_sections(...)                           -> [5..59], [61..74], [76..end]
    assign_roles(sections, SALES_LAYOUT)          -> stores / subdivisions / regions
"""

__all__ = [
    "HeaderMarker",
    "MarkerSpec",
    "Section",
    "SectionLayout",
    "Sentinels",
    "assign_roles",
    "find_markers",
    "is_blank_row",
    "iter_section_rows",
    "preamble",
    "split_sections",
]


@dataclass(frozen=True)
class MarkerSpec:
    """Declarative header-row pattern.

    A row is a marker when the trimmed text at ``column`` equals one of
    ``values`` and, for each ``(column, values)`` pair in ``also``, that
    column matches too. ``also`` tells apart header rows that look alike at
    different aggregation levels.
    """
    column: int
    values: frozenset[str]
    also: tuple[tuple[int, frozenset[str]], ...] = ()
    start_row: int = 0

    @classmethod
    def of(
        cls,
        column: int,
        *values: str,
        also: dict[int, Iterable[str]] | None = None,
        start_row: int = 0,
    ) -> MarkerSpec:
        extra = tuple((c, frozenset(v)) for c, v in (also or {}).items())
        return cls(column=column, values=frozenset(values), also=extra, start_row=start_row)

    def matches(self, row: list[Any]) -> bool:
        if not _cell_in(row, self.column, self.values):
            return False
        return all(_cell_in(row, c, vals) for c, vals in self.also)


@dataclass(frozen=True)
class HeaderMarker:
    row: int
    column: int
    value: str


@dataclass(frozen=True)
class Section:
    """Data rows between two header markers (``start``..``end`` inclusive)."""
    index: int
    header_row: int
    start: int
    end: int

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)

    def row_indices(self) -> range:
        return range(self.start, self.end + 1)


@dataclass(frozen=True)
class Sentinels:
    """Totals/header texts that exclude a row from a section.

    Matching is case-sensitive on the trimmed key-column text unless
    ``upper`` is set, in which case the upper-cased text is compared.
    """
    exact: frozenset[str] = frozenset()
    prefixes: tuple[str, ...] = ()
    contains: tuple[str, ...] = ()
    upper: bool = False

    @classmethod
    def of(cls, *exact: str, prefixes: Iterable[str] = (), contains: Iterable[str] = (), upper: bool = False) -> Sentinels:
        return cls(exact=frozenset(exact), prefixes=tuple(prefixes), contains=tuple(contains), upper=upper)

    def matches(self, cell: Any) -> bool:
        text = to_trimmed_string(cell)
        if self.upper:
            text = text.upper()
        if text in self.exact:
            return True
        if any(text.startswith(p) for p in self.prefixes):
            return True
        return any(c in text for c in self.contains)


@dataclass(frozen=True)
class SectionLayout:
    """Semantic role names per number of sections found.

    ``roles[count]`` names the sections in order. Sheets with more sections
    than the largest configured count use that mapping; surplus trailing
    sections then belong to the last role.
    """
    roles: dict[int, tuple[str, ...]] = field(default_factory=dict)

    def for_count(self, count: int) -> tuple[str, ...]:
        if count <= 0 or not self.roles:
            return ()
        if count in self.roles:
            return self.roles[count]
        largest = max(self.roles)
        if count > largest:
            return self.roles[largest]
        # No exact entry below the maximum: take the nearest smaller one.
        smaller = [k for k in self.roles if k < count]
        return self.roles[max(smaller)] if smaller else ()


def _cell_in(row: list[Any], column: int, values: frozenset[str]) -> bool:
    if column >= len(row):
        return False
    cell = row[column]
    if is_empty(cell):
        return False
    return to_trimmed_string(cell) in values


def find_markers(sheet: RawSheet, spec: MarkerSpec) -> list[HeaderMarker]:
    """Every row matching ``spec``, in sheet order (the scan never stops early)."""
    markers: list[HeaderMarker] = []
    for r in range(spec.start_row, sheet.n_rows):
        row = sheet.rows[r]
        if spec.matches(row):
            markers.append(HeaderMarker(row=r, column=spec.column, value=to_trimmed_string(row[spec.column])))
    return markers


def split_sections(sheet: RawSheet, markers: list[HeaderMarker]) -> list[Section]:
    """k markers -> k sections; the last one is open-ended."""
    sections: list[Section] = []
    for i, marker in enumerate(markers):
        end = markers[i + 1].row - 1 if i + 1 < len(markers) else sheet.n_rows - 1
        sections.append(Section(index=i, header_row=marker.row, start=marker.row + 1, end=end))
    return sections


def preamble(sheet: RawSheet, markers: list[HeaderMarker]) -> list[list[Any]]:
    """Rows above the first marker (titles, period lines)."""
    stop = markers[0].row if markers else sheet.n_rows
    return sheet.rows[:stop]


def is_blank_row(row: list[Any], columns: Iterable[int] | None = None) -> bool:
    if columns is None:
        return all(is_empty(v) for v in row)
    return all(is_empty(row[c]) if c < len(row) else True for c in columns)


def iter_section_rows(
    sheet: RawSheet,
    section: Section,
    key_column: int | None = None,
    sentinels: Sentinels | None = None,
    blank_columns: Iterable[int] | None = None,
) -> Iterator[tuple[int, list[Any]]]:
    """Yield ``(row_index, row)`` for the data rows of a section.

    Blank rows are skipped (all cells, or only ``blank_columns`` when given),
    as are rows whose ``key_column`` matches ``sentinels``.
    """
    blank_cols = list(blank_columns) if blank_columns is not None else None
    for r in section.row_indices():
        row = sheet.row(r)
        if is_blank_row(row, blank_cols):
            continue
        if key_column is not None and sentinels is not None:
            key = row[key_column] if key_column < len(row) else None
            if sentinels.matches(key):
                continue
        yield r, row


def assign_roles(sections: list[Section], layout: SectionLayout) -> dict[str, list[Section]]:
    """Map sections to roles by how many were found.

    Returns role -> sections; a role normally holds one section, the last role
    collects any surplus sections beyond the layout's largest count.
    """
    names = layout.for_count(len(sections))
    assigned: dict[str, list[Section]] = {name: [] for name in names}
    if not names:
        return assigned
    for i, section in enumerate(sections):
        role = names[i] if i < len(names) else names[-1]
        assigned[role].append(section)
    return assigned
