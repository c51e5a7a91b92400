"""Worship attendance exceptions."""


class WorshipAttendanceError(Exception):
    """Base exception for all worship attendance errors."""

    pass


class ConfigError(WorshipAttendanceError):
    """Raised when required configuration is missing or invalid."""

    pass


class CredentialsNotFoundError(ConfigError):
    """Raised when a credential or client secret file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Credentials file not found at {path}.")


class AuthError(WorshipAttendanceError):
    """Base exception for Google authentication errors."""

    pass


class TokenError(AuthError):
    """Raised when there's an issue with the OAuth token."""

    pass


class RemoteAPIError(WorshipAttendanceError):
    """Raised when a Google API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class SheetsAPIError(RemoteAPIError):
    """Raised when the Sheets API returns an error."""

    pass


class DocsAPIError(RemoteAPIError):
    """Raised when the Docs API returns an error."""

    pass


class SaveError(RemoteAPIError):
    """Raised when an edited row could not be written back."""

    pass


class ValidationError(WorshipAttendanceError):
    """Raised when a request refers to something that does not exist."""

    pass


class SheetNotFoundError(ValidationError):
    """Raised when a campus spreadsheet has no matching tab."""

    def __init__(self, spreadsheet_id: str, sheet_id: int | None = None):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_id = sheet_id
        super().__init__("Sheet not found for this campus.")


class NoDataError(ValidationError):
    """Raised when a sheet is empty or holds only a header row."""

    def __init__(self, title: str):
        self.title = title
        super().__init__("Sheet has no data or only a header row.")


class RowNotFoundError(ValidationError):
    """Raised when the requested row does not exist."""

    def __init__(self, row_index: int):
        self.row_index = row_index
        super().__init__("Row not found.")
