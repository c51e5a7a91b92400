"""CLI for worship-attendance.

Usage:
    worship-attendance serve                   # Run the attendance editor
    worship-attendance status                  # Show configuration and token status
    worship-attendance campuses                # List configured campuses
    worship-attendance tabs <campus>           # List a campus spreadsheet's tabs
    worship-attendance doc-check <doc_id>      # Print a doc and verify write access
"""

from __future__ import annotations

import argparse
import sys


def _settings():
    from worship_attendance.config import Settings, configure_logging

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


def cmd_serve(host: str, port: int, debug: bool) -> int:
    """Run the Flask development server."""
    from worship_attendance.web import create_app

    settings = _settings()
    app = create_app(settings)
    app.run(host=host, port=port, debug=debug)
    return 0


def cmd_status() -> int:
    """Show configuration and token status."""
    from worship_attendance.config import get_config_status
    from worship_attendance.google import GoogleOAuth, WorshipAttendanceError

    settings = _settings()
    status = get_config_status(settings)

    print("=" * 60)
    print("WORSHIP ATTENDANCE STATUS")
    print("=" * 60)
    print()
    print(f"Project root: {status['root']}")
    print(f"Environment : {status['environment']}")
    print(f".env        : {'[x]' if status['env_file'] else '[ ]'}")
    print()

    print("Files:")
    for name, present in status["files"].items():
        path = status["paths"].get(name) or "(built-in)"
        print(f"  {'[x]' if present else '[ ]'} {name:<14} {path}")
    if status["paths"]["autoload"]:
        print(f"  AUTOLOAD_PATH is set ({status['paths']['autoload']}) and ignored")
    print()

    try:
        auth = GoogleOAuth(
            credentials_path=settings.credentials_path,
            client_secret_path=settings.client_secret_path,
            scopes=["sheets"],
        )
    except WorshipAttendanceError as e:
        print(f"Token: {e}")
        return 1

    info = auth.get_token_info()
    print("Token:")
    print(f"  Status     : {info['status']}")
    print(f"  Expires in : {info['expires_in']}")
    print(f"  Refresh    : {'[x]' if info['has_refresh_token'] else '[ ]'}")
    return 0


def cmd_campuses() -> int:
    """List configured campuses."""
    from worship_attendance.campuses import load_registry
    from worship_attendance.google import ConfigError

    settings = _settings()
    try:
        registry = load_registry(settings.campuses_path)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    for campus in registry.values():
        tab = campus.sheet_id if campus.sheet_id is not None else "first tab"
        print(f"{campus.id:<14} {campus.label:<14} {campus.spreadsheet_id}  ({tab})")
    return 0


def cmd_tabs(campus_id: str) -> int:
    """List the tabs of a campus spreadsheet."""
    from worship_attendance.campuses import load_registry
    from worship_attendance.google import WorshipAttendanceError
    from worship_attendance.web.app import default_sheets_factory

    settings = _settings()
    try:
        campus = load_registry(settings.campuses_path).resolve(campus_id)
        if campus is None:
            print(f"Error: Unknown campus: {campus_id}")
            return 1

        settings.require_credentials()
        spreadsheet = default_sheets_factory(settings).get_spreadsheet(campus.spreadsheet_id)
    except WorshipAttendanceError as e:
        print(f"Error: {e}")
        return 1

    print(f"{campus.label}: {spreadsheet.title}")
    selected = spreadsheet.find_sheet(campus.sheet_id)
    for sheet in spreadsheet.sheets:
        mark = "*" if sheet is selected else " "
        size = f"{sheet.row_count}x{sheet.column_count}"
        print(f"{mark} {sheet.index:>3}  {sheet.id:<12} {size:<10} {sheet.title}")
    return 0


def cmd_doc_check(document_id: str) -> int:
    """Print a document's text, then verify write access with a marker round trip."""
    from worship_attendance.docs import DocsClient, verify_document
    from worship_attendance.google import GoogleOAuth, WorshipAttendanceError

    settings = _settings()
    try:
        settings.require_credentials()
        auth = GoogleOAuth(
            credentials_path=settings.credentials_path,
            client_secret_path=settings.client_secret_path,
            scopes=["docs", "drive_readonly"],
        )
        client = DocsClient(auth)
        document = client.get_document(document_id)
    except WorshipAttendanceError as e:
        print(f"Docs API error: {e}")
        return 1

    print(f"--- Document: {document.title} ---\n")
    print(document.body_text, end="")
    print("\n--- End ---")

    result = verify_document(client, document_id)
    if not result.inserted:
        print(f"\n[FAIL] Write failed: {result.error}")
        return 1

    print("\n[OK] Write verified: inserted then removing marker.")
    if result.removed:
        print("[OK] Marker removed; document unchanged.")
    else:
        print(
            f"[WARN] Could not remove marker: {result.error} (document was still written to)"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="worship-attendance",
        description="Edit campus worship attendance rows in Google Sheets",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    serve_parser = subparsers.add_parser("serve", help="Run the attendance editor")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    subparsers.add_parser("status", help="Show configuration and token status")

    subparsers.add_parser("campuses", help="List configured campuses")

    tabs_parser = subparsers.add_parser("tabs", help="List a campus spreadsheet's tabs")
    tabs_parser.add_argument("campus", help="Campus id (see 'campuses')")

    doc_parser = subparsers.add_parser("doc-check", help="Read a doc and verify write access")
    doc_parser.add_argument("document_id", help="Google Docs document ID")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "serve":
        return cmd_serve(args.host, args.port, args.debug)

    if args.command == "status":
        return cmd_status()

    if args.command == "campuses":
        return cmd_campuses()

    if args.command == "tabs":
        return cmd_tabs(args.campus)

    if args.command == "doc-check":
        return cmd_doc_check(args.document_id)

    return 0


if __name__ == "__main__":
    sys.exit(main())
