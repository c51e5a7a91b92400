"""Web front end."""

from worship_attendance.web.app import create_app

__all__ = ["create_app"]
