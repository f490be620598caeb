"""Tests for the configuration system."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from zrshell.core.config import load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove client env vars so tests start clean."""
    for key in [
        "ZR_HOST", "ZR_PORT", "ZR_USERNAME", "ZR_PASSWORD",
        "ZR_CONNECT_TIMEOUT", "ZR_READ_TIMEOUT", "ZR_COMMAND_RETRY_LIMIT",
        "ZR_COMMAND_RETRY_DELAY", "ZR_STATUS_POLL_ATTEMPTS",
        "ZR_STATUS_POLL_INTERVAL", "LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_loads_from_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\nZR_HOST=10.0.0.5\n")

        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text("")

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        assert settings.password == "secret"
        assert settings.host == "10.0.0.5"

    def test_defaults_from_yaml(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\n")

        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text(dedent("""\
            device:
              host: room.example.com
              port: 22
            protocol:
              retry_limit: 3
            meeting:
              status_poll_interval: 0.5
        """))

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        assert settings.host == "room.example.com"
        assert settings.port == 22
        assert settings.command_retry_limit == 3
        assert settings.status_poll_interval == 0.5

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\nZR_PORT=2200\n")

        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text(dedent("""\
            device:
              port: 22
        """))

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        assert settings.port == 2200

    def test_hardcoded_defaults_when_no_yaml(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\n")

        yaml_file = tmp_path / "nonexistent.yaml"

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        assert settings.host == "localhost"
        assert settings.port == 2244
        assert settings.username == "zoom"
        assert settings.connect_timeout == 10.0
        assert settings.read_timeout == 5.0
        assert settings.command_retry_limit == 10
        assert settings.command_retry_delay == 0.0
        assert settings.status_poll_attempts == 5
        assert settings.status_poll_interval == 1.0
        assert settings.log_level == "INFO"

    def test_password_from_yaml(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("")
        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text(dedent("""\
            device:
              password: from-yaml
        """))

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        assert settings.password == "from-yaml"

    def test_missing_password_raises(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("")
        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text("")

        with pytest.raises(ValueError, match="ZR_PASSWORD is required"):
            load_settings(env_path=env_file, yaml_path=yaml_file)

    def test_zero_retry_limit_rejected(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\nZR_COMMAND_RETRY_LIMIT=0\n")
        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text("")

        with pytest.raises(ValueError, match="RETRY_LIMIT"):
            load_settings(env_path=env_file, yaml_path=yaml_file)

    def test_unknown_log_level_rejected(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\nLOG_LEVEL=verbose\n")
        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text("")

        with pytest.raises(ValueError, match="LOG_LEVEL"):
            load_settings(env_path=env_file, yaml_path=yaml_file)

    def test_log_level_normalized_to_upper_case(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\nLOG_LEVEL=debug\n")
        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text("")

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        assert settings.log_level == "DEBUG"

    def test_settings_is_frozen(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ZR_PASSWORD=secret\n")
        yaml_file = tmp_path / "default.yaml"
        yaml_file.write_text("")

        settings = load_settings(env_path=env_file, yaml_path=yaml_file)
        with pytest.raises(AttributeError):
            settings.password = "other"  # type: ignore[misc]
