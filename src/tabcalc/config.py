"""Configuration loading from ``tabcalc.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from tabcalc.sheet import DEFAULT_MAX_DEPTH

CONFIG_FILENAME = "tabcalc.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "max_depth": DEFAULT_MAX_DEPTH,
    "logging_enabled": False,
    "logs_dir": "logs",
    "logging_fsync": False,
}


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, with defaults for missing keys.

    Args:
        config_path: YAML file to read.  ``None`` means ``tabcalc.yaml`` in
            the current directory, if it exists.

    Returns:
        Merged configuration dict.

    Raises:
        FileNotFoundError: *config_path* was given but does not exist.
        ValueError: The file has unknown keys or invalid values.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path is None:
        default_path = Path.cwd() / CONFIG_FILENAME
        if not default_path.exists():
            return config
        config_path = default_path
    elif not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    user_config = yaml.safe_load(config_path.read_text()) or {}
    if not isinstance(user_config, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")

    unknown = sorted(set(user_config) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"{config_path}: unknown config keys {unknown}")

    config.update(user_config)
    _validate(config, config_path)
    return config


def _validate(config: dict[str, Any], config_path: Path) -> None:
    max_depth = config["max_depth"]
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        raise ValueError(f"{config_path}: max_depth must be a positive integer, got {max_depth!r}")
    for key in ("logging_enabled", "logging_fsync"):
        if not isinstance(config[key], bool):
            raise ValueError(f"{config_path}: {key} must be true or false, got {config[key]!r}")
    if not isinstance(config["logs_dir"], str) or not config["logs_dir"]:
        raise ValueError(f"{config_path}: logs_dir must be a non-empty string")
