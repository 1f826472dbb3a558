"""Loading, editing and saving config.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Iterator

import tomli_w

from .app_config import AppConfig
from .paths import TallyError

_MAX_DEPTH = 10


def _convert_value(value: str) -> Any:
    """Interpret ``value`` as a TOML literal, falling back to a plain string."""
    try:
        parsed = tomllib.loads(f"value = {value}")
    except tomllib.TOMLDecodeError:
        return value
    if list(parsed) != ["value"]:
        return value
    return parsed["value"]


def _flatten(value: Any, prefix: str, depth: int) -> Iterator[tuple[str, str]]:
    if depth >= _MAX_DEPTH:
        return
    if isinstance(value, bool):
        yield prefix, "true" if value else "false"
    elif isinstance(value, str):
        yield prefix, value
    elif isinstance(value, (int, float)):
        yield prefix, str(value)
    elif isinstance(value, dict):
        for key, child in sorted(value.items()):
            yield from _flatten(child, f"{prefix}.{key}" if prefix else key, depth + 1)


class ConfigStorage:
    """The configuration held in one config.toml file."""

    def __init__(self, config_file: str | Path) -> None:
        self.config_file = Path(config_file)
        self.config = AppConfig()
        self.load_config()

    def load_config(self) -> None:
        """Load the file, writing the defaults if it does not exist yet.

        Content that does not parse as a valid configuration yields the defaults.
        """
        if not self.config_file.exists():
            self.save_config()
            return
        try:
            text = self.config_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise OSError(f"Failed to load config: {exc}") from exc
        try:
            self.config = AppConfig.from_dict(tomllib.loads(text))
        except (tomllib.TOMLDecodeError, ValueError):
            self.config = AppConfig()

    def save_config(self) -> None:
        text = tomli_w.dumps(self.config.to_dict())
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise OSError(f"Failed to save config: {exc}") from exc

    def try_set_value(self, key_path: str, value: str) -> None:
        """Set a dotted key such as ``git.done_prefix`` and save."""
        if not key_path.strip():
            raise TallyError("Key path cannot be empty")

        root = self.config.to_dict()
        *path, final_key = key_path.split(".")
        current = root
        for key in path:
            child = current.get(key)
            if not isinstance(child, dict):
                raise TallyError(f"Key path not found: {key_path}")
            current = child

        current[final_key] = _convert_value(value)
        try:
            self.config = AppConfig.from_dict(root)
        except ValueError as exc:
            raise TallyError(f"Failed to update config: {exc}") from exc

        try:
            self.save_config()
        except OSError as exc:
            raise TallyError(f"Failed to save config: {exc}") from exc

    def try_get_value(self, key_path: str) -> Any:
        """Return the value at a dotted key path."""
        current: Any = self.config.to_dict()
        for key in key_path.split("."):
            if not isinstance(current, dict) or key not in current:
                raise TallyError(f"Key path not found: {key_path}")
            current = current[key]
        return current

    def get_flattened_config(self) -> dict[str, str]:
        """All settings as dotted keys mapped to their text form."""
        return dict(_flatten(self.config.to_dict(), "", 0))

    def reset_to_defaults(self) -> None:
        self.config = AppConfig()
        self.save_config()