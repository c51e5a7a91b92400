"""Attendance row selection and editing."""

from worship_attendance.attendance.editor import (
    ColumnKind,
    EditField,
    apply_edit,
    build_fields,
    commit,
    guard_matches,
    load_for_edit,
    parse_submitted_values,
)
from worship_attendance.attendance.recency import (
    RECENT_LIMIT,
    RecencyEntry,
    parse_sort_key,
    select_recent,
)

__all__ = [
    "ColumnKind",
    "EditField",
    "RecencyEntry",
    "RECENT_LIMIT",
    "apply_edit",
    "build_fields",
    "commit",
    "guard_matches",
    "load_for_edit",
    "parse_sort_key",
    "parse_submitted_values",
    "select_recent",
]
