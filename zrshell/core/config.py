"""Configuration loader for the Zoom Rooms shell client.

Loads settings from environment variables (.env file) and config/default.yaml,
with environment variables taking precedence over YAML defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


# Project root is two levels up from this file (zrshell/core/config.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for the Zoom Rooms shell client."""

    # Device
    host: str
    port: int
    username: str
    password: str
    connect_timeout: float
    read_timeout: float

    # Protocol
    command_retry_limit: int
    command_retry_delay: float

    # Meeting
    status_poll_attempts: int
    status_poll_interval: float

    # Logging
    log_level: str


def _load_yaml_defaults(yaml_path: Path) -> dict[str, Any]:
    """Load default values from a YAML config file.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Dictionary of configuration values. Empty dict if file not found.
    """
    if not yaml_path.exists():
        return {}
    with open(yaml_path) as f:
        data = yaml.safe_load(f)
    return data if data else {}


def _get(env_key: str, yaml_defaults: dict[str, Any], yaml_key: str, default: Any = None) -> Any:
    """Get a config value with precedence: env var > yaml default > hardcoded default.

    Args:
        env_key: Environment variable name.
        yaml_defaults: Dictionary from YAML config file.
        yaml_key: Dot-separated key path in YAML (e.g., "device.host").
        default: Fallback default value.

    Returns:
        The resolved configuration value.
    """
    env_val = os.environ.get(env_key)
    if env_val is not None and env_val != "":
        return env_val

    node = yaml_defaults
    for part in yaml_key.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            return default
    return node if node is not None else default


def load_settings(
    env_path: Path | None = None,
    yaml_path: Path | None = None,
) -> Settings:
    """Load settings from .env and config/default.yaml.

    Environment variables take precedence over YAML defaults.

    Args:
        env_path: Path to .env file. Defaults to PROJECT_ROOT/.env.
        yaml_path: Path to YAML config. Defaults to PROJECT_ROOT/config/default.yaml.

    Returns:
        Frozen Settings dataclass with all configuration values.

    Raises:
        ValueError: If the device password is missing or a numeric
            setting is out of range.
    """
    if env_path is None:
        env_path = PROJECT_ROOT / ".env"
    if yaml_path is None:
        yaml_path = PROJECT_ROOT / "config" / "default.yaml"

    load_dotenv(env_path, override=False)
    yaml_defaults = _load_yaml_defaults(yaml_path)

    password = _get("ZR_PASSWORD", yaml_defaults, "device.password", "")
    if not password:
        raise ValueError(
            "ZR_PASSWORD is required. Set it in .env or as an environment variable."
        )

    settings = Settings(
        host=str(_get("ZR_HOST", yaml_defaults, "device.host", "localhost")),
        port=int(_get("ZR_PORT", yaml_defaults, "device.port", 2244)),
        username=str(_get("ZR_USERNAME", yaml_defaults, "device.username", "zoom")),
        password=str(password),
        connect_timeout=float(
            _get("ZR_CONNECT_TIMEOUT", yaml_defaults, "device.connect_timeout", 10.0)
        ),
        read_timeout=float(
            _get("ZR_READ_TIMEOUT", yaml_defaults, "device.read_timeout", 5.0)
        ),
        command_retry_limit=int(
            _get("ZR_COMMAND_RETRY_LIMIT", yaml_defaults, "protocol.retry_limit", 10)
        ),
        command_retry_delay=float(
            _get("ZR_COMMAND_RETRY_DELAY", yaml_defaults, "protocol.retry_delay", 0.0)
        ),
        status_poll_attempts=int(
            _get("ZR_STATUS_POLL_ATTEMPTS", yaml_defaults,
                 "meeting.status_poll_attempts", 5)
        ),
        status_poll_interval=float(
            _get("ZR_STATUS_POLL_INTERVAL", yaml_defaults,
                 "meeting.status_poll_interval", 1.0)
        ),
        log_level=str(_get("LOG_LEVEL", yaml_defaults, "logging.level", "INFO")).upper(),
    )

    if settings.command_retry_limit < 1:
        raise ValueError("ZR_COMMAND_RETRY_LIMIT must be at least 1.")
    if settings.status_poll_attempts < 0:
        raise ValueError("ZR_STATUS_POLL_ATTEMPTS must not be negative.")
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ValueError(f"LOG_LEVEL '{settings.log_level}' is not a logging level.")

    return settings
