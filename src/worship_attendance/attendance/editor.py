"""Editing a single attendance row.

The edit form is rendered for a campus and a 1-based sheet row and carries
both back on submit (``campus`` and ``last_row_index``). A submission is only
written when both still match the request it arrives on.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from worship_attendance.google.exceptions import (
    RemoteAPIError,
    RowNotFoundError,
    SaveError,
)
from worship_attendance.sheets.client import SheetsClient
from worship_attendance.sheets.models import pad_row

logger = logging.getLogger(__name__)

TIMESTAMP_HEADERS = frozenset({"timestamp"})
DATE_HEADERS = frozenset({"service date", "sunday date"})

_VALUE_FIELD = re.compile(r"^v\[(\d+)\]$")


class ColumnKind(Enum):
    HIDDEN = "hidden"  # carried in a hidden input, never shown
    READONLY = "readonly"  # shown as text
    EDITABLE = "editable"


def classify_header(header: Any) -> ColumnKind:
    name = str(header).strip().lower()
    if name in TIMESTAMP_HEADERS:
        return ColumnKind.HIDDEN
    if name in DATE_HEADERS:
        return ColumnKind.READONLY
    return ColumnKind.EDITABLE


@dataclass(frozen=True)
class EditField:
    """One column of the edit form."""

    index: int
    header: str
    value: str
    kind: ColumnKind

    @property
    def name(self) -> str:
        return f"v[{self.index}]"


def build_fields(headers: Sequence[str], row: Sequence[str]) -> list[EditField]:
    """Describe the form inputs for a row, in column order."""
    padded = pad_row(row, len(headers))
    return [
        EditField(index=i, header=str(header), value=padded[i], kind=classify_header(header))
        for i, header in enumerate(headers)
    ]


def load_for_edit(
    values: Sequence[Sequence[Any]], row_index: int, width: int
) -> tuple[str, ...]:
    """Fetch the row at a 1-based position of the full value grid.

    Args:
        values: Every fetched row, header row included.
        row_index: 1-based sheet row.
        width: Header width to pad or truncate to.

    Raises:
        RowNotFoundError: If the grid has no such row.
    """
    if row_index < 1 or row_index > len(values):
        raise RowNotFoundError(row_index)
    return pad_row(values[row_index - 1], width)


def parse_submitted_values(form: Mapping[str, Any]) -> dict[int, str]:
    """Collect ``v[<column>]`` fields from a submitted form."""
    submitted: dict[int, str] = {}
    for key in form:
        match = _VALUE_FIELD.match(key)
        if match:
            submitted[int(match.group(1))] = str(form[key])
    return submitted


def apply_edit(
    headers: Sequence[str],
    original: Sequence[str],
    submitted: Mapping[int, str],
) -> list[str]:
    """Build the full-width row to write back.

    Free-text columns take the submitted value (or "" when absent). Timestamp
    and service-date columns always keep the original value.
    """
    padded = pad_row(original, len(headers))
    new_row = []
    for i, header in enumerate(headers):
        if classify_header(header) is ColumnKind.EDITABLE:
            new_row.append(str(submitted.get(i, "")))
        else:
            new_row.append(padded[i])
    return new_row


def guard_matches(campus_id: str | None, row_index: int | None, form: Mapping[str, Any]) -> bool:
    """Check that a submission targets the campus and row it was rendered for."""
    if campus_id is None or row_index is None:
        return False
    if "campus" not in form or "last_row_index" not in form:
        return False
    if not any(_VALUE_FIELD.match(key) for key in form):
        return False
    if form["campus"] != campus_id:
        return False
    try:
        return int(form["last_row_index"]) == row_index
    except (TypeError, ValueError):
        return False


def commit(
    client: SheetsClient,
    spreadsheet_id: str,
    title: str,
    row_index: int,
    new_row: list[str],
) -> list[str]:
    """Write an edited row back to the sheet.

    Raises:
        SaveError: If the write fails; the remote row is presumed unchanged.
    """
    try:
        client.update_row(spreadsheet_id, title, row_index, new_row)
    except RemoteAPIError as e:
        logger.error(f"Save failed for row {row_index} of {title!r}: {e}")
        raise SaveError(f"Save failed: {e}", status_code=e.status_code) from e
    logger.info(f"Saved row {row_index} of {title!r}")
    return new_row
