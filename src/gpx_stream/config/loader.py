"""
Config loader for transcode settings.

Supports:
- YAML or JSON files (chosen by suffix)
- GPX_STREAM_CONFIG environment variable for the file location
- GPX_STREAM_* environment overrides for individual settings
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gpx_stream.config.settings import TranscodeConfig
from gpx_stream.errors import ConfigError

CONFIG_ENV_VAR = "GPX_STREAM_CONFIG"

# Environment variable -> config field
_ENV_OVERRIDES = {
    "GPX_STREAM_CHUNK_SIZE": "chunk_size",
    "GPX_STREAM_NUMBER_MODE": "number_mode",
    "GPX_STREAM_LOG_LEVEL": "log_level",
}


def _load_file(path: Path) -> dict[str, Any]:
    """Load and parse a local config file.

    Args:
        path: Path to the file

    Returns:
        Parsed mapping (empty for an empty file)
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}", config_path=str(path)) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", config_path=str(path)) from e

    try:
        if path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            data = yaml.safe_load(content) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid config syntax: {e}", config_path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError(
            "Config root must be a mapping", config_path=str(path)
        ).with_hint("Write settings as key: value pairs")
    return data


def _env_overrides() -> dict[str, str]:
    """Collect settings overridden through the environment."""
    overrides: dict[str, str] = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            overrides[field_name] = value
    return overrides


def load_config(path: str | Path | None = None) -> TranscodeConfig:
    """Load transcode settings.

    The file is taken from ``path``, else from ``GPX_STREAM_CONFIG``; without
    either, defaults are used. Environment overrides are applied last.

    Args:
        path: Optional YAML or JSON config file

    Returns:
        Validated TranscodeConfig

    Raises:
        ConfigError: If the file is missing, unparseable or invalid
    """
    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        path = Path(env_path) if env_path else None

    data: dict[str, Any] = {}
    if path is not None:
        data = _load_file(Path(path))
    data.update(_env_overrides())

    try:
        return TranscodeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration: {e.error_count()} error(s)\n{e}",
            config_path=str(path) if path is not None else None,
        ) from e
