"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from nanobanana.core.config.models import AppConfig

logger = logging.getLogger(__name__)

_DEFAULT_APP_CONFIG_PATH = Path("nanobanana.yaml")
_API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file yields defaults. The API key is read from
    GEMINI_API_KEY (or GOOGLE_API_KEY) when the file does not set one.

    Args:
        path: Path to app config file (.json, .yaml, or .yml).
              Defaults to nanobanana.yaml in the working directory.

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If config is invalid
    """
    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
        logger.debug("Loaded app config from %s", path)
    else:
        config = AppConfig()

    _load_env_vars_into_config(config)
    return config


def get_api_key_from_env() -> str | None:
    """Return the first API key found in the environment."""
    for name in _API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def _load_env_vars_into_config(config: AppConfig) -> None:
    """Fill a missing API key from the environment (mutates config)."""
    if config.api.api_key:
        return
    api_key = get_api_key_from_env()
    if api_key:
        logger.debug("Loaded API key from environment")
        config.api = config.api.model_copy(update={"api_key": api_key})
