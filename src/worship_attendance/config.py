"""Centralized configuration.

Settings are read from the process environment, after loading the project's
``.env`` file:

    CREDENTIALS_PATH    - stored OAuth token (token, refresh_token, expiry)
    CLIENT_SECRET_PATH  - OAuth client secret downloaded from Google Cloud
    CAMPUSES_PATH       - optional JSON campus registry override
    ENVIRONMENT         - "development" or "production"
    DONE_URL            - target of the "I am done" button
    LOG_LEVEL           - logging level for the CLI and web server

Relative paths are resolved against the project root. Values already present
in the environment take precedence over the ``.env`` file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from worship_attendance.google.exceptions import CredentialsNotFoundError

# __file__ is src/worship_attendance/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent

DEFAULT_CREDENTIALS = "credentials.json"
DEFAULT_CLIENT_SECRET = "client_secret.json"
DEFAULT_DONE_URL = "https://crosspointchurchsv.org/gum"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip(" \t\"'")

            # Only set if not already in environment (env vars take precedence)
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def resolve_path(path: str, root: Path) -> Path:
    """Resolve a configured path against the project root.

    Empty and absolute paths (including Windows drive paths such as
    ``C:\\creds.json``) are returned unchanged.
    """
    if path == "" or path.startswith("/") or (len(path) > 1 and path[1] == ":"):
        return Path(path)
    return root / path.lstrip("/")


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    root: Path
    credentials_path: Path
    client_secret_path: Path
    environment: str = "development"
    autoload_path: Path | None = None
    campuses_path: Path | None = None
    done_url: str = DEFAULT_DONE_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, root: Path | None = None, env_file: Path | None = None) -> Settings:
        """Build settings from the environment.

        Args:
            root: Project root used to resolve relative paths. Defaults to the repo root.
            env_file: .env file to load first. Defaults to ``<root>/.env``.
        """
        root = Path(root) if root else REPO_ROOT
        load_env_file(env_file if env_file else root / ".env")

        def _optional(name: str) -> Path | None:
            value = os.environ.get(name, "")
            return resolve_path(value, root) if value else None

        return cls(
            root=root,
            credentials_path=resolve_path(
                os.environ.get("CREDENTIALS_PATH") or DEFAULT_CREDENTIALS, root
            ),
            client_secret_path=resolve_path(
                os.environ.get("CLIENT_SECRET_PATH") or DEFAULT_CLIENT_SECRET, root
            ),
            environment=os.environ.get("ENVIRONMENT") or "development",
            autoload_path=_optional("AUTOLOAD_PATH"),
            campuses_path=_optional("CAMPUSES_PATH"),
            done_url=os.environ.get("DONE_URL") or DEFAULT_DONE_URL,
            log_level=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
        )

    def require_credentials(self) -> Path:
        """Return the credential store path.

        Raises:
            CredentialsNotFoundError: If the credential file does not exist.
        """
        if not self.credentials_path.is_file():
            raise CredentialsNotFoundError(str(self.credentials_path))
        return self.credentials_path


def get_config_status(settings: Settings) -> dict:
    """Get status of all configured files.

    Returns:
        Dictionary with configuration status.
    """
    return {
        "root": str(settings.root),
        "environment": settings.environment,
        "env_file": (settings.root / ".env").exists(),
        "files": {
            "credentials": settings.credentials_path.is_file(),
            "client_secret": settings.client_secret_path.is_file(),
            "campuses": bool(settings.campuses_path and settings.campuses_path.is_file()),
        },
        "paths": {
            "credentials": str(settings.credentials_path),
            "client_secret": str(settings.client_secret_path),
            "autoload": str(settings.autoload_path) if settings.autoload_path else None,
            "campuses": str(settings.campuses_path) if settings.campuses_path else None,
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI and web server."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
