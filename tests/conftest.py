"""Shared fixtures."""

import json
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def client_secret(tmp_path):
    """Create a mock OAuth client secret file."""
    creds = {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }
    path = tmp_path / "client_secret.json"
    with open(path, "w") as f:
        json.dump(creds, f)
    return path


@pytest.fixture
def stored_token(tmp_path):
    """Create a mock credential store with a far-future expiry."""
    token = {
        "token": "test-access-token",
        "refresh_token": "test-refresh-token",
        "token_uri": "https://oauth2.googleapis.com/token",
        "expiry": "2099-01-01T00:00:00Z",
    }
    path = tmp_path / "credentials.json"
    with open(path, "w") as f:
        json.dump(token, f)
    return path


def make_sheets_service(values, sheets=None, update_result=None):
    """Build a mock Sheets API resource.

    Args:
        values: Value grid returned for every range read.
        sheets: Tab properties, defaults to one tab "Attendance" with id 0.
        update_result: Response of a values.update call.
    """
    service = MagicMock()
    spreadsheets = service.spreadsheets.return_value
    spreadsheets.get.return_value.execute.return_value = {
        "spreadsheetId": "sheet-123",
        "properties": {"title": "Worship Attendance"},
        "sheets": [
            {"properties": props}
            for props in (sheets or [{"sheetId": 0, "title": "Attendance", "index": 0}])
        ],
    }
    spreadsheets.values.return_value.get.return_value.execute.return_value = {
        "values": values
    }
    spreadsheets.values.return_value.update.return_value.execute.return_value = (
        update_result or {"updatedCells": 3}
    )
    return service


@pytest.fixture
def attendance_values():
    """Header plus 12 weekly rows, appended in date order."""
    values = [["Timestamp", "Service Date", "Attendance"]]
    for week in range(12):
        day = 7 + week * 7
        month, mday = (1, day) if day <= 31 else (2, day - 31) if day <= 60 else (3, day - 60)
        values.append([f"{month}/{mday}/2024 09:00:00", f"{month}/{mday}/2024", str(100 + week)])
    return values


@pytest.fixture
def sheets_service():
    """Factory for mock Sheets API resources."""
    return make_sheets_service
