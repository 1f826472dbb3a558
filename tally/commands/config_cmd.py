"""The ``config`` subcommands."""

from __future__ import annotations

from typing import Any

from ..config_storage import ConfigStorage
from ..paths import ProjectPaths, TallyError


def _toml_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, dict):
        return "table"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _storage() -> ConfigStorage:
    return ConfigStorage(ProjectPaths.discover().config_file)


def cmd_config_set(key: str, value: str) -> None:
    """Set a dotted configuration key and save."""
    _storage().try_set_value(key, value)
    print(f"✓ Set {key} = {value}")


def cmd_config_get(key: str) -> None:
    """Print a configuration value; only string values can be shown."""
    value = _storage().try_get_value(key)
    if not isinstance(value, str):
        raise TallyError(
            f"Failed to deserialize '{key}': invalid type: {_toml_type(value)}, "
            "expected a string"
        )
    print(value)


def cmd_config_list() -> None:
    """Print every configuration key and value."""
    print("Configuration:")
    for key, value in _storage().get_flattened_config().items():
        print(f"  {key}: {value}")