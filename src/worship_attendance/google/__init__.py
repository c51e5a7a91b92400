"""Google OAuth session management and error types."""

from worship_attendance.google.exceptions import (
    AuthError,
    ConfigError,
    CredentialsNotFoundError,
    RemoteAPIError,
    TokenError,
    WorshipAttendanceError,
)
from worship_attendance.google.oauth import GoogleOAuth

__all__ = [
    "GoogleOAuth",
    "WorshipAttendanceError",
    "ConfigError",
    "CredentialsNotFoundError",
    "AuthError",
    "TokenError",
    "RemoteAPIError",
]
