"""Configuration file loading and CLI overrides for runtime tunables.

Precedence, lowest to highest: built-in Constants, the YAML config file
(``--config`` or PLUGINDEX_CONFIG), then CLI flags.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a config file cannot be read or has the wrong shape."""


def _coerce(attr: str, value: Any) -> Any:
    current = getattr(Constants, attr)
    if isinstance(current, tuple):
        if isinstance(value, str):
            return (value,)
        return tuple(str(v) for v in value)
    if isinstance(current, (int, float)) and not isinstance(current, bool):
        return type(current)(value)
    return str(value)


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML config mapping.

    Raises:
        ConfigError: if the file is missing, unreadable, or not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not load config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def apply_config(data: Dict[str, Any]) -> None:
    """Apply known keys to Constants; unknown keys are logged and ignored."""
    for key, value in data.items():
        attr = Constants.CONFIG_KEYS.get(str(key).replace("-", "_"))
        if attr is None:
            logger.warning("Ignoring unknown config key '%s'", key)
            continue
        try:
            setattr(Constants, attr, _coerce(attr, value))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for '{key}': {value!r}") from exc


def resolve_config_path(args) -> Optional[str]:
    """Config path from CLI first, then the environment."""
    return getattr(args, "CONFIG", None) or os.environ.get(Constants.ENV_CONFIG) or None


def apply_cli_overrides(args) -> None:
    """Apply CLI flags over whatever the config file set."""
    if getattr(args, "ROOT_DIR", None):
        Constants.ROOT_DIR = args.ROOT_DIR
    if getattr(args, "OUTPUT", None):
        Constants.INDEX_FILE = args.OUTPUT
