"""
Configuration loader for vc_change_engine.

Settings are read from a JSON file named ``.smartcheckin.json`` in the
repository root. The file is optional; every key has a default. When the
file exists but is malformed or holds a value of the wrong type, a
:class:`ConfigError` is raised.

Recognised keys:

- ``remote`` (str): remote to analyse, default ``"origin"``
- ``similarity_threshold`` (number in [0, 1]): grouping threshold, default ``0.4``
- ``git_timeout`` (number > 0): seconds allowed per git command, default ``30``
- ``log_level`` (str): ``debug``, ``info``, ``warning`` or ``error``
- ``auto_approve`` (bool): commit every group without prompting
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILENAME = ".smartcheckin.json"
LOG_LEVELS = ("debug", "info", "warning", "error")

DEFAULT_CONFIG: Dict[str, Any] = {
    "remote": "origin",
    "similarity_threshold": 0.4,
    "git_timeout": 30,
    "log_level": "info",
    "auto_approve": False,
}


class ConfigError(Exception):
    """Raised when the configuration file is malformed or invalid."""

    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate(data: Dict[str, Any]) -> None:
    if "remote" in data and (not isinstance(data["remote"], str) or not data["remote"].strip()):
        raise ConfigError("'remote' must be a non-empty string")
    if "similarity_threshold" in data:
        value = data["similarity_threshold"]
        if not _is_number(value):
            raise ConfigError("'similarity_threshold' must be a number")
        if not 0 <= value <= 1:
            raise ConfigError("'similarity_threshold' must be between 0 and 1")
    if "git_timeout" in data:
        value = data["git_timeout"]
        if not _is_number(value):
            raise ConfigError("'git_timeout' must be a number")
        if value <= 0:
            raise ConfigError("'git_timeout' must be greater than 0")
    if "log_level" in data:
        value = data["log_level"]
        if not isinstance(value, str) or value.lower() not in LOG_LEVELS:
            raise ConfigError(f"'log_level' must be one of: {', '.join(LOG_LEVELS)}")
    if "auto_approve" in data and not isinstance(data["auto_approve"], bool):
        raise ConfigError("'auto_approve' must be a boolean")


def load_config(repo_root: Path) -> Dict[str, Any]:
    """Load the configuration for the repository at ``repo_root``.

    Returns:
        A dictionary holding every key of :data:`DEFAULT_CONFIG`, with the
        values from the file taking precedence.

    Raises:
        ConfigError: If the file exists but cannot be parsed or validated.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = Path(repo_root) / CONFIG_FILENAME

    if not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    _validate(data)

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        logger.debug("Ignoring unknown configuration keys: %s", unknown)

    for key in DEFAULT_CONFIG:
        if key in data:
            config[key] = data[key]
    config["log_level"] = str(config["log_level"]).lower()

    logger.debug("Loaded configuration from: %s", config_path)
    return config
