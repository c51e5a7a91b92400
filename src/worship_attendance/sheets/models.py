"""Spreadsheet data types and A1-notation helpers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

# Right-hand column bound used when reading a whole tab
READ_COLUMN_BOUND = "ZZ"


@dataclass
class Sheet:
    """Represents a sheet (tab) within a spreadsheet."""

    id: int
    title: str
    index: int
    row_count: int = 1000
    column_count: int = 26


@dataclass
class Spreadsheet:
    """Represents a Google Spreadsheet."""

    id: str
    title: str
    sheets: list[Sheet] = field(default_factory=list)

    @property
    def default_sheet(self) -> Sheet | None:
        """Get the first sheet."""
        if self.sheets:
            return self.sheets[0]
        return None

    def find_sheet(self, sheet_id: int | None = None) -> Sheet | None:
        """Find a tab by numeric id, or the first tab when no id is given."""
        if sheet_id is None:
            return self.default_sheet
        for sheet in self.sheets:
            if int(sheet.id) == int(sheet_id):
                return sheet
        return None


@dataclass(frozen=True)
class RowRecord:
    """One data row of a sheet tab, addressed by its 1-based sheet row."""

    row_index: int
    values: tuple[str, ...]

    def value(self, column: int) -> str:
        if 0 <= column < len(self.values):
            return self.values[column]
        return ""


@dataclass(frozen=True)
class SheetSnapshot:
    """Header row and data rows of a tab, as fetched for one request."""

    title: str
    headers: tuple[str, ...]
    rows: tuple[RowRecord, ...]
    values: tuple[tuple[str, ...], ...] = ()

    @property
    def width(self) -> int:
        return len(self.headers)

    @classmethod
    def from_values(cls, title: str, values: Sequence[Sequence[Any]]) -> SheetSnapshot:
        """Build a snapshot from a raw value grid.

        The first row is the header. Data row ``i`` of the grid (0-based) lives
        at sheet row ``i + 1``.
        """
        raw = tuple(tuple(_cell(c) for c in row) for row in values)
        headers = raw[0] if raw else ()
        width = len(headers)
        rows = tuple(
            RowRecord(row_index=r + 1, values=pad_row(raw[r], width))
            for r in range(1, len(raw))
        )
        return cls(title=title, headers=headers, rows=rows, values=raw)


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def pad_row(values: Sequence[Any], width: int) -> tuple[str, ...]:
    """Pad a row with empty strings, or truncate it, to exactly ``width`` cells."""
    cells = [_cell(v) for v in values[:width]]
    cells.extend([""] * (width - len(cells)))
    return tuple(cells)


def column_letter(index: int) -> str:
    """Convert a 0-based column index to spreadsheet letters (0 -> A, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")

    letters = ""
    while index >= 0:
        letters = chr(65 + index % 26) + letters
        index = index // 26 - 1
    return letters


def quote_sheet_title(title: str) -> str:
    """Quote a tab title for A1 notation, doubling embedded single quotes."""
    return "'" + title.replace("'", "''") + "'"


def full_sheet_range(title: str) -> str:
    """Range covering a whole tab, e.g. ``'Attendance'!A1:ZZ``."""
    return f"{quote_sheet_title(title)}!A1:{READ_COLUMN_BOUND}"


def row_range(title: str, row_index: int, width: int) -> str:
    """Range covering one row from column A to the last header column."""
    if width < 1:
        raise ValueError("Row range needs at least one column")
    last = column_letter(width - 1)
    return f"{quote_sheet_title(title)}!A{row_index}:{last}{row_index}"
