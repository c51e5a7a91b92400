"""Flask front end for editing attendance rows.

A single page walks through four steps, driven by query parameters:

    /                          campus picker
    /?campus=<id>              the 10 most recent service dates
    /?campus=<id>&row=<n>      edit form for sheet row n (POST saves it)

Nothing is kept between requests; every step re-reads the sheet.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from flask import Flask, render_template, request

from worship_attendance.attendance import (
    EditField,
    RecencyEntry,
    apply_edit,
    build_fields,
    commit,
    guard_matches,
    load_for_edit,
    parse_submitted_values,
    select_recent,
)
from worship_attendance.campuses import Campus, CampusRegistry, load_registry
from worship_attendance.config import Settings
from worship_attendance.google import GoogleOAuth
from worship_attendance.google.exceptions import (
    AuthError,
    ConfigError,
    CredentialsNotFoundError,
    RemoteAPIError,
    SaveError,
    ValidationError,
)
from worship_attendance.sheets import SheetsClient

logger = logging.getLogger(__name__)

SheetsFactory = Callable[[Settings], SheetsClient]


def default_sheets_factory(settings: Settings) -> SheetsClient:
    """Build a Sheets client from the stored credentials."""
    auth = GoogleOAuth(
        credentials_path=settings.credentials_path,
        client_secret_path=settings.client_secret_path,
        scopes=["sheets"],
    )
    return SheetsClient(auth)


@dataclass
class PageState:
    """Everything the template needs for one request."""

    campus: Campus | None = None
    row_index: int | None = None
    sheet_title: str = ""
    headers: tuple[str, ...] = ()
    entries: list[RecencyEntry] = field(default_factory=list)
    fields: list[EditField] = field(default_factory=list)
    error: str | None = None
    saved: bool = False


def _requested_row() -> int | None:
    row = request.args.get("row", type=int)
    if row is None:
        row = request.form.get("last_row_index", type=int)
    return row


def _error_message(error: Exception) -> str:
    if isinstance(error, CredentialsNotFoundError):
        return "Credentials file not found."
    if isinstance(error, (ValidationError, SaveError, ConfigError)):
        return str(error)
    return f"Sheets API: {error}"


def load_page(
    settings: Settings,
    campus: Campus,
    row_index: int | None,
    sheets_factory: SheetsFactory,
) -> PageState:
    """Fetch the campus sheet, and apply a submitted edit when one is present."""
    state = PageState(campus=campus, row_index=row_index)

    try:
        settings.require_credentials()
        client = sheets_factory(settings)

        state.sheet_title = client.find_sheet_title(campus.spreadsheet_id, campus.sheet_id)
        snapshot = client.read_snapshot(campus.spreadsheet_id, state.sheet_title)
        state.headers = snapshot.headers
        state.entries = select_recent(snapshot.rows)

        if row_index is None:
            return state

        edit_row = load_for_edit(snapshot.values, row_index, snapshot.width)

        if request.method == "POST" and guard_matches(campus.id, row_index, request.form):
            new_row = apply_edit(
                snapshot.headers, edit_row, parse_submitted_values(request.form)
            )
            edit_row = tuple(
                commit(client, campus.spreadsheet_id, state.sheet_title, row_index, new_row)
            )
            state.saved = True
        elif request.method == "POST":
            logger.info(f"Ignoring stale submission for {campus.id} row {row_index}")

        state.fields = build_fields(snapshot.headers, edit_row)
    except (ConfigError, AuthError, RemoteAPIError, ValidationError) as e:
        logger.warning(f"{campus.id}: {e}")
        state.error = _error_message(e)

    return state


def create_app(
    settings: Settings | None = None,
    registry: CampusRegistry | None = None,
    sheets_factory: SheetsFactory | None = None,
) -> Flask:
    """Create the Flask application.

    Args:
        settings: Resolved settings. Defaults to ``Settings.from_env()``.
        registry: Campus registry. Defaults to the configured one.
        sheets_factory: Builds a Sheets client per request.
    """
    settings = settings or Settings.from_env()
    registry = registry if registry is not None else load_registry(settings.campuses_path)
    sheets_factory = sheets_factory or default_sheets_factory

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.config["CAMPUSES"] = registry

    @app.route("/", methods=["GET", "POST"])
    def index():
        campus = registry.resolve(request.args.get("campus") or request.form.get("campus"))

        if campus is None:
            return render_template("index.html", state=PageState(), campuses=registry.values())

        state = load_page(settings, campus, _requested_row(), sheets_factory)
        return render_template(
            "index.html",
            state=state,
            campuses=registry.values(),
            done_url=settings.done_url,
        )

    return app
