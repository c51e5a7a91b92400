"""Google OAuth session management using Authlib.

This module keeps a stored OAuth token usable across requests:
- Loads the credential store (token, refresh_token, expiry)
- Detects expiry and refreshes with the stored refresh token
- Persists the refreshed token back to the same file
- Creates Google API services (Sheets, Docs) from the current token

The credential store is the JSON file named by CREDENTIALS_PATH; the OAuth
client comes from the client secret file named by CLIENT_SECRET_PATH.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import requests
from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2 import OAuth2Error
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from worship_attendance.google.exceptions import (
    ConfigError,
    CredentialsNotFoundError,
    TokenError,
)

logger = logging.getLogger(__name__)


# Google OAuth scopes used by this project
SCOPES = {
    "docs": "https://www.googleapis.com/auth/documents",
    "drive_readonly": "https://www.googleapis.com/auth/drive.readonly",
    "sheets": "https://www.googleapis.com/auth/spreadsheets",
}

# Tokens this close to expiry are treated as expired
EXPIRY_LEEWAY = 30


class GoogleOAuth:
    """Google OAuth session backed by a stored refresh token.

    Example:
        >>> auth = GoogleOAuth(
        ...     credentials_path="credentials.json",
        ...     client_secret_path="client_secret.json",
        ...     scopes=["sheets"],
        ... )
        >>> sheets_service = auth.build_service("sheets", "v4")
    """

    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        credentials_path: str | Path,
        client_secret_path: str | Path,
        scopes: list[str] | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            credentials_path: Path to the stored token (token, refresh_token, expiry).
            client_secret_path: Path to the OAuth client secret file.
            scopes: List of scope names (e.g., ["sheets"]) or full URLs.
                   If None, defaults to ["sheets"].
            client_id: OAuth client ID (loaded from the client secret file if not provided).
            client_secret: OAuth client secret (loaded from the client secret file if not provided).

        Raises:
            CredentialsNotFoundError: If either file is missing.
            ConfigError: If either file is not valid JSON of the expected shape.
        """
        self.credentials_path = Path(credentials_path)
        self.client_secret_path = Path(client_secret_path)

        self.required_scopes = self._resolve_scopes(scopes or ["sheets"])

        self._store = self._load_store()

        if not client_id or not client_secret:
            client_id, client_secret = self._load_client_credentials()

        self.client_id = client_id
        self.client_secret = client_secret

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            token=self._load_token(),
            update_token=self._save_token,
            token_endpoint=self.TOKEN_URL,
            token_endpoint_auth_method="client_secret_post",
        )

        self.last_refresh: datetime | None = None
        self.refresh_count = 0

    def _resolve_scopes(self, scopes: list[str]) -> list[str]:
        """Resolve scope names to full URLs."""
        resolved = []
        for scope in scopes:
            if scope.startswith("https://"):
                resolved.append(scope)
            elif scope in SCOPES:
                resolved.append(SCOPES[scope])
            else:
                raise ValueError(
                    f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
                )
        return resolved

    def _load_store(self) -> dict[str, Any]:
        """Load the credential store."""
        if not self.credentials_path.is_file():
            raise CredentialsNotFoundError(str(self.credentials_path))

        try:
            with open(self.credentials_path) as f:
                store = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid {self.credentials_path.name}: {e}") from e

        if not isinstance(store, dict) or not store.get("refresh_token"):
            raise ConfigError(f"Invalid {self.credentials_path.name}: missing refresh_token")

        scopes = store.get("scopes")
        if scopes:
            missing = set(self.required_scopes) - set(scopes)
            if missing:
                logger.warning(f"Stored token missing scopes: {missing}")

        return store

    def _load_client_credentials(self) -> tuple[str, str]:
        """Load OAuth client credentials from file."""
        if not self.client_secret_path.is_file():
            raise CredentialsNotFoundError(str(self.client_secret_path))

        try:
            with open(self.client_secret_path) as f:
                creds = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid {self.client_secret_path.name}: {e}") from e

        # Handle both web and installed app credential formats
        if isinstance(creds, dict) and "installed" in creds:
            app_creds = creds["installed"]
        elif isinstance(creds, dict) and "web" in creds:
            app_creds = creds["web"]
        else:
            raise ConfigError(
                "Invalid client secret format. Expected 'installed' or 'web' key."
            )

        try:
            return app_creds["client_id"], app_creds["client_secret"]
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Invalid {self.client_secret_path.name}: missing {e}") from e

    def _load_token(self) -> dict[str, Any]:
        """Convert the stored token to Authlib format."""
        token = {
            "access_token": self._store.get("token"),
            "refresh_token": self._store.get("refresh_token"),
            "token_type": self._store.get("type", "Bearer"),
        }
        expires_at = parse_expiry(self._store.get("expiry"))
        if expires_at is not None:
            token["expires_at"] = expires_at
        return token

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Persist a refreshed token (Authlib callback).

        Only the token fields are rewritten; every other field of the store
        is kept as it was.
        """
        if access_token:
            token["access_token"] = access_token

        if not token.get("access_token"):
            return

        self._store["token"] = token["access_token"]
        if token.get("refresh_token"):
            self._store["refresh_token"] = token["refresh_token"]

        if token.get("expires_in"):
            expiry = datetime.now(timezone.utc) + timedelta(seconds=int(token["expires_in"]))
            self._store["expiry"] = expiry.isoformat(timespec="seconds")
        elif token.get("expires_at"):
            expiry = datetime.fromtimestamp(float(token["expires_at"]), tz=timezone.utc)
            self._store["expiry"] = expiry.isoformat(timespec="seconds")

        with open(self.credentials_path, "w") as f:
            json.dump(self._store, f, indent=2)

        self.last_refresh = datetime.now()
        self.refresh_count += 1

        logger.info(f"Token refreshed and saved to {self.credentials_path}")

    @property
    def expires_at(self) -> float | None:
        if not self.session.token:
            return None
        return self.session.token.get("expires_at")

    def is_expired(self) -> bool:
        """Check whether the access token needs a refresh.

        A token without a known expiry or without an access token counts as expired.
        """
        if not self.session.token or not self.session.token.get("access_token"):
            return True
        expires_at = self.expires_at
        if not expires_at:
            return True
        return expires_at - EXPIRY_LEEWAY < datetime.now().timestamp()

    def refresh(self) -> None:
        """Refresh the access token with the stored refresh token.

        Raises:
            TokenError: If the refresh request fails.
        """
        logger.info("Token expired, refreshing...")
        try:
            self.session.refresh_token(
                self.TOKEN_URL,
                refresh_token=self._store.get("refresh_token"),
            )
        except (OAuth2Error, requests.RequestException) as e:
            raise TokenError(f"Failed to refresh token: {e}") from e

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries.

        Returns:
            Google Credentials object with current token.

        Raises:
            TokenError: If token refresh fails.
        """
        if self.is_expired():
            self.refresh()

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token")
            or self._store.get("refresh_token"),
            token_uri=self.TOKEN_URL,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "sheets", version: str = "v4"):
        """Build a Google API service with current credentials.

        Args:
            service_name: Name of the service (e.g., 'sheets', 'docs').
            version: API version (e.g., 'v4').

        Returns:
            Google API service object.
        """
        creds = self.get_credentials()
        return build(service_name, version, credentials=creds, cache_discovery=False)

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the current token.

        Returns:
            Dictionary with token status, expiry, etc.
        """
        expires_at = self.expires_at

        if expires_at:
            expires_in = expires_at - datetime.now().timestamp()
            expires_str = str(timedelta(seconds=int(max(0, expires_in))))
        else:
            expires_str = "unknown"

        return {
            "status": "expired" if self.is_expired() else "valid",
            "scopes": self.required_scopes,
            "expires_in": expires_str,
            "has_refresh_token": bool(self._store.get("refresh_token")),
            "refresh_count": self.refresh_count,
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }


def parse_expiry(value: Any) -> float | None:
    """Convert a stored expiry (ISO-8601 string or epoch number) to a timestamp."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable token expiry: {value!r}")
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()
