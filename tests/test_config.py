"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import AppSettings, get_user_config_dir, load_settings
from core.domain.models import Credentials
from core.errors import ConfigurationError

ENV_VARS = ("ANTITHESIS_USERNAME", "ANTITHESIS_PASSWORD", "ANTITHESIS_TENANT", "ANTITHESIS_BASE_URL")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadSettings:
    def test_reads_credentials(self, antithesis_env: None) -> None:
        settings = load_settings()
        assert settings.credentials == Credentials(username="testuser", password="testpass", tenant="testtenant")
        assert settings.base_url is None
        assert settings.http_timeout_seconds == 30.0

    def test_base_url_override(self, antithesis_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTITHESIS_BASE_URL", "http://127.0.0.1:8080")
        assert load_settings().base_url == "http://127.0.0.1:8080"

    def test_missing_variables_all_named(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()
        message = str(exc_info.value)
        assert message.startswith("missing environment variable")
        for name in ("ANTITHESIS_USERNAME", "ANTITHESIS_PASSWORD", "ANTITHESIS_TENANT"):
            assert name in message

    def test_empty_variable_counts_as_missing(self, antithesis_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTITHESIS_TENANT", "")
        with pytest.raises(ConfigurationError, match="ANTITHESIS_TENANT"):
            load_settings()

    def test_invalid_timeout(self, antithesis_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTITHESIS_HTTP_TIMEOUT_SECONDS", "-1")
        with pytest.raises(ConfigurationError, match="invalid environment variable: ANTITHESIS_HTTP_TIMEOUT_SECONDS"):
            load_settings()

    def test_reads_dotenv_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text(
            "ANTITHESIS_USERNAME=fromfile\nANTITHESIS_PASSWORD=pw\nANTITHESIS_TENANT=acme\n",
            encoding="utf-8",
        )
        settings = load_settings()
        assert settings.username == "fromfile"
        assert settings.tenant == "acme"

    def test_settings_are_frozen(self, antithesis_env: None) -> None:
        settings = load_settings()
        with pytest.raises(Exception):
            settings.tenant = "other"  # type: ignore[misc]


def test_user_config_dir_honours_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr("core.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_user_config_dir() == tmp_path / "snouty"


def test_explicit_values_skip_environment() -> None:
    settings = AppSettings(username="u", password="p", tenant="t", _env_file=None)
    assert settings.credentials.tenant == "t"
