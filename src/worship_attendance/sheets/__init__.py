"""Google Sheets access for attendance tabs.

Usage:
    from worship_attendance.sheets import SheetsClient

    client = SheetsClient(auth)
    title = client.find_sheet_title(spreadsheet_id, sheet_id)
    snapshot = client.read_snapshot(spreadsheet_id, title)
"""

from __future__ import annotations

from worship_attendance.sheets.client import SheetsClient
from worship_attendance.sheets.models import (
    RowRecord,
    Sheet,
    SheetSnapshot,
    Spreadsheet,
    column_letter,
    pad_row,
)

__all__ = [
    "SheetsClient",
    "Sheet",
    "Spreadsheet",
    "SheetSnapshot",
    "RowRecord",
    "column_letter",
    "pad_row",
]
