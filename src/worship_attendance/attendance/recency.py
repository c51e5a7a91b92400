"""Selection of the most recent attendance rows.

The date picker shows the last rows appended to the sheet, newest service
date first. Rows are taken from the physical tail of the sheet before they
are ordered by date, so a row entered out of order far up the sheet is never
surfaced.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from dateutil.parser import parse as parse_dt

from worship_attendance.sheets.models import RowRecord

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10

# Column holding the service date
SORT_COLUMN = 1

_NUMERIC = re.compile(r"^\s*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$")


@dataclass(frozen=True)
class RecencyEntry:
    """A row offered in the date picker."""

    row_index: int
    values: tuple[str, ...]
    sort_key: float

    @property
    def label(self) -> str:
        if len(self.values) > SORT_COLUMN:
            return self.values[SORT_COLUMN]
        return ""


def parse_sort_key(value: str | None) -> float:
    """Turn a service-date cell into a sortable number.

    Empty cells and unparseable text sort as 0, plain numbers (e.g. a date
    serial) sort as themselves, and date strings sort by epoch seconds.
    """
    if value is None or value == "":
        return 0.0
    text = str(value)
    if _NUMERIC.match(text):
        return float(text)
    # Only ASCII digits count, in numbers and in dates
    if not text.isascii():
        return 0.0
    try:
        return parse_dt(text).timestamp()
    except (ValueError, OverflowError):
        return 0.0


def select_recent(rows: Sequence[RowRecord], limit: int = RECENT_LIMIT) -> list[RecencyEntry]:
    """Pick the last ``limit`` rows by position, newest service date first."""
    if limit <= 0:
        return []
    tail = rows[-limit:]
    entries = [
        RecencyEntry(
            row_index=row.row_index,
            values=row.values,
            sort_key=parse_sort_key(row.value(SORT_COLUMN)),
        )
        for row in tail
    ]
    entries.sort(key=lambda entry: entry.sort_key, reverse=True)
    logger.debug(f"Selected {len(entries)} of {len(rows)} rows")
    return entries
