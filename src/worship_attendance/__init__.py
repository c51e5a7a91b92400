"""Worship attendance: pick a campus, pick a recent service date, edit its row."""

__version__ = "0.1.0"
