"""Google Sheets API client implementation."""

from __future__ import annotations

import logging
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from worship_attendance.google import GoogleOAuth
from worship_attendance.google.exceptions import (
    NoDataError,
    SheetNotFoundError,
    SheetsAPIError,
)
from worship_attendance.sheets.models import (
    Sheet,
    SheetSnapshot,
    Spreadsheet,
    full_sheet_range,
    row_range,
)

logger = logging.getLogger(__name__)


class SheetsClient:
    """Google Sheets API client with OAuth authentication.

    Reads attendance tabs and writes single edited rows back.

    Usage:
        auth = GoogleOAuth(credentials_path, client_secret_path, scopes=["sheets"])
        client = SheetsClient(auth)

        # Resolve the campus tab
        title = client.find_sheet_title(spreadsheet_id, sheet_id=None)

        # Read all rows
        snapshot = client.read_snapshot(spreadsheet_id, title)

        # Write one row
        client.update_row(spreadsheet_id, title, 5, ["a", "b", "c"])
    """

    def __init__(self, auth: GoogleOAuth | None = None, service: Any = None) -> None:
        """Initialize Sheets client.

        Args:
            auth: OAuth session used to build the service on first use.
            service: Prebuilt Sheets API resource (skips ``auth``).
        """
        if auth is None and service is None:
            raise ValueError("SheetsClient needs an auth session or a service")
        self._auth = auth
        self._service = service

    def _get_service(self) -> Any:
        """Get or create Sheets API service."""
        if self._service is None:
            self._service = self._auth.build_service("sheets", "v4")
        return self._service

    def _execute(self, request: Any, action: str) -> dict:
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.warning(f"Sheets API {action} failed ({status}): {e}")
            raise SheetsAPIError(_http_error_message(e), status_code=status) from e
        except (OSError, httplib2.HttpLib2Error, GoogleAuthError) as e:
            logger.warning(f"Sheets API {action} failed: {e}")
            raise SheetsAPIError(str(e)) from e

    # =========================================================================
    # Spreadsheets
    # =========================================================================

    def get_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        """Get a spreadsheet and its tabs.

        Args:
            spreadsheet_id: Google Sheets spreadsheet ID.

        Returns:
            Spreadsheet with its sheets.
        """
        service = self._get_service()
        result = self._execute(
            service.spreadsheets().get(spreadsheetId=spreadsheet_id), "get spreadsheet"
        )
        return self._parse_spreadsheet(result)

    def list_sheets(self, spreadsheet_id: str) -> list[Sheet]:
        """List the tabs of a spreadsheet in display order."""
        return self.get_spreadsheet(spreadsheet_id).sheets

    def find_sheet_title(self, spreadsheet_id: str, sheet_id: int | None = None) -> str:
        """Resolve the tab title for a campus.

        Args:
            spreadsheet_id: Spreadsheet ID.
            sheet_id: Numeric tab id, or None for the first tab.

        Raises:
            SheetNotFoundError: If no tab matches.
        """
        sheet = self.get_spreadsheet(spreadsheet_id).find_sheet(sheet_id)
        if sheet is None:
            raise SheetNotFoundError(spreadsheet_id, sheet_id)
        return sheet.title

    # =========================================================================
    # Reading Data
    # =========================================================================

    def read_range(
        self,
        spreadsheet_id: str,
        range_notation: str,
        value_render_option: str = "FORMATTED_VALUE",
    ) -> list[list[Any]]:
        """Read values from a range.

        Args:
            spreadsheet_id: Spreadsheet ID.
            range_notation: A1 notation (e.g., "'Sheet1'!A1:ZZ").
            value_render_option: How to render values ("FORMATTED_VALUE", "UNFORMATTED_VALUE", "FORMULA").

        Returns:
            2D list of cell values.
        """
        service = self._get_service()
        result = self._execute(
            service.spreadsheets()
            .values()
            .get(
                spreadsheetId=spreadsheet_id,
                range=range_notation,
                valueRenderOption=value_render_option,
            ),
            "read",
        )
        return result.get("values", [])

    def read_snapshot(self, spreadsheet_id: str, title: str) -> SheetSnapshot:
        """Read every row of a tab.

        Raises:
            NoDataError: If the tab is empty or holds only a header row.
        """
        values = self.read_range(spreadsheet_id, full_sheet_range(title))
        if len(values) < 2:
            raise NoDataError(title)
        return SheetSnapshot.from_values(title, values)

    # =========================================================================
    # Writing Data
    # =========================================================================

    def write_range(
        self,
        spreadsheet_id: str,
        range_notation: str,
        values: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
    ) -> int:
        """Write values to a range.

        Args:
            spreadsheet_id: Spreadsheet ID.
            range_notation: A1 notation (e.g., "'Sheet1'!A2:C2").
            values: 2D list of values to write.
            value_input_option: How to interpret input ("RAW" or "USER_ENTERED").

        Returns:
            Number of cells updated.
        """
        service = self._get_service()
        result = self._execute(
            service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=range_notation,
                valueInputOption=value_input_option,
                body={"values": values},
            ),
            "write",
        )
        return result.get("updatedCells", 0)

    def update_row(
        self,
        spreadsheet_id: str,
        title: str,
        row_index: int,
        values: list[str],
    ) -> int:
        """Overwrite one row, columns A through the last value, as typed by a user."""
        return self.write_range(
            spreadsheet_id,
            row_range(title, row_index, len(values)),
            [list(values)],
            value_input_option="USER_ENTERED",
        )

    def _parse_spreadsheet(self, data: dict) -> Spreadsheet:
        """Parse spreadsheet from API response."""
        sheets = []
        for sheet_data in data.get("sheets", []):
            props = sheet_data.get("properties")
            if not props:
                continue
            grid_props = props.get("gridProperties", {})
            sheets.append(
                Sheet(
                    id=props.get("sheetId", 0),
                    title=props.get("title", ""),
                    index=props.get("index", 0),
                    row_count=grid_props.get("rowCount", 1000),
                    column_count=grid_props.get("columnCount", 26),
                )
            )

        return Spreadsheet(
            id=data.get("spreadsheetId", ""),
            title=data.get("properties", {}).get("title", ""),
            sheets=sheets,
        )


def _http_error_message(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    if reason:
        return str(reason)
    return str(error)
