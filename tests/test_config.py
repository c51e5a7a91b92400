"""Tests for configuration loading and the campus registry."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from worship_attendance.campuses import Campus, CampusRegistry, load_registry
from worship_attendance.config import (
    DEFAULT_DONE_URL,
    Settings,
    get_config_status,
    load_env_file,
    resolve_path,
)
from worship_attendance.google import ConfigError, CredentialsNotFoundError

CONFIG_KEYS = (
    "CREDENTIALS_PATH",
    "CLIENT_SECRET_PATH",
    "AUTOLOAD_PATH",
    "CAMPUSES_PATH",
    "ENVIRONMENT",
    "DONE_URL",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env():
    env = {k: v for k, v in os.environ.items() if k not in CONFIG_KEYS}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestLoadEnvFile:
    """Test .env parsing."""

    def test_parses_lines(self, tmp_path, clean_env):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\n"
            "\n"
            "CREDENTIALS_PATH=secrets/credentials.json\n"
            'CLIENT_SECRET_PATH="client secret.json"\n'
            "ENVIRONMENT = 'production'\n"
            "not a setting\n"
        )
        loaded = load_env_file(env_file)

        assert loaded == {
            "CREDENTIALS_PATH": "secrets/credentials.json",
            "CLIENT_SECRET_PATH": "client secret.json",
            "ENVIRONMENT": "production",
        }
        assert os.environ["ENVIRONMENT"] == "production"

    def test_environment_wins(self, tmp_path, clean_env):
        env_file = tmp_path / ".env"
        env_file.write_text("ENVIRONMENT=production\n")
        with patch.dict(os.environ, {"ENVIRONMENT": "development"}):
            assert load_env_file(env_file) == {}
            assert os.environ["ENVIRONMENT"] == "development"

    def test_missing_file(self, tmp_path):
        assert load_env_file(tmp_path / ".env") == {}


class TestResolvePath:
    """Test path resolution against the project root."""

    def test_relative(self):
        assert resolve_path("credentials.json", Path("/srv/app")) == Path("/srv/app/credentials.json")

    def test_leading_slash_absolute(self):
        assert resolve_path("/etc/creds.json", Path("/srv/app")) == Path("/etc/creds.json")

    def test_windows_drive(self):
        assert resolve_path("C:\\creds.json", Path("/srv/app")) == Path("C:\\creds.json")

    def test_empty(self):
        assert resolve_path("", Path("/srv/app")) == Path("")


class TestSettings:
    """Test building settings from the environment."""

    def test_defaults(self, tmp_path, clean_env):
        settings = Settings.from_env(root=tmp_path)

        assert settings.credentials_path == tmp_path / "credentials.json"
        assert settings.client_secret_path == tmp_path / "client_secret.json"
        assert settings.environment == "development"
        assert settings.autoload_path is None
        assert settings.campuses_path is None
        assert settings.done_url == DEFAULT_DONE_URL
        assert settings.log_level == "INFO"

    def test_from_env_file(self, tmp_path, clean_env):
        (tmp_path / ".env").write_text(
            "CREDENTIALS_PATH=private/token.json\n"
            "CAMPUSES_PATH=campuses.json\n"
            "AUTOLOAD_PATH=../vendor/autoload.php\n"
            "DONE_URL=https://example.org/done\n"
            "LOG_LEVEL=debug\n"
        )
        settings = Settings.from_env(root=tmp_path)

        assert settings.credentials_path == tmp_path / "private/token.json"
        assert settings.campuses_path == tmp_path / "campuses.json"
        assert settings.autoload_path == tmp_path / "../vendor/autoload.php"
        assert settings.done_url == "https://example.org/done"
        assert settings.log_level == "DEBUG"

    def test_require_credentials(self, tmp_path, clean_env, stored_token):
        settings = Settings.from_env(root=tmp_path)
        assert settings.require_credentials() == stored_token

    def test_require_credentials_missing(self, tmp_path, clean_env):
        settings = Settings.from_env(root=tmp_path)
        with pytest.raises(CredentialsNotFoundError):
            settings.require_credentials()

    def test_config_status(self, tmp_path, clean_env, stored_token):
        status = get_config_status(Settings.from_env(root=tmp_path))
        assert status["files"] == {"credentials": True, "client_secret": False, "campuses": False}
        assert status["paths"]["autoload"] is None


class TestCampusRegistry:
    """Test the campus registry."""

    def test_default_campuses(self):
        registry = load_registry()
        assert list(registry) == ["san-leandro", "milpitas", "peninsula", "tracy", "pleasanton"]
        assert registry["tracy"].sheet_id == 2068867284
        assert registry["milpitas"].sheet_id is None

    def test_resolve_unknown(self):
        registry = CampusRegistry()
        assert registry.resolve("tracy").label == "Tracy"
        assert registry.resolve("nowhere") is None
        assert registry.resolve("") is None
        assert registry.resolve(None) is None

    def test_read_only(self):
        registry = CampusRegistry()
        with pytest.raises(TypeError):
            registry["new"] = Campus("new", "New", "x")

    def test_duplicate_ids(self):
        with pytest.raises(ConfigError, match="Duplicate campus id"):
            CampusRegistry([Campus("a", "A", "1"), Campus("a", "A2", "2")])

    def test_from_file(self, tmp_path):
        path = tmp_path / "campuses.json"
        path.write_text(
            json.dumps(
                {
                    "north": {"label": "North", "spreadsheet_id": "sheet-n", "sheet_id": "42"},
                    "south": {"label": "South", "spreadsheet_id": "sheet-s"},
                }
            )
        )
        registry = load_registry(path)

        assert list(registry) == ["north", "south"]
        assert registry["north"] == Campus("north", "North", "sheet-n", 42)
        assert registry["south"].sheet_id is None

    def test_from_file_invalid(self, tmp_path):
        path = tmp_path / "campuses.json"
        path.write_text(json.dumps({"north": {"label": "North"}}))
        with pytest.raises(ConfigError, match="Invalid campus entry"):
            load_registry(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_registry(tmp_path / "missing.json")
