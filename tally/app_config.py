"""User preferences stored in config.toml."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    if name not in data:
        raise ValueError(f"missing field `{name}`")
    section = data[name]
    if not isinstance(section, Mapping):
        raise ValueError(f"`{name}` must be a table")
    return section


def _value(section: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in section:
        raise ValueError(f"missing field `{key}` in `{where}`")
    value = section[key]
    if not isinstance(value, kind):
        raise ValueError(f"`{where}.{key}` must be of type {kind.__name__}")
    return value


@dataclass
class Preferences:
    auto_commit_todo: bool = False
    auto_complete_tasks: bool = False


@dataclass
class GitSettings:
    done_prefix: str = "done:"


@dataclass
class AppConfig:
    """The whole configuration: preferences and git settings."""

    preferences: Preferences = field(default_factory=Preferences)
    git: GitSettings = field(default_factory=GitSettings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "preferences": {
                "auto_commit_todo": self.preferences.auto_commit_todo,
                "auto_complete_tasks": self.preferences.auto_complete_tasks,
            },
            "git": {"done_prefix": self.git.done_prefix},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppConfig:
        """Build a config; every field is required, unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise ValueError("config root must be a table")
        prefs = _section(data, "preferences")
        git = _section(data, "git")
        return cls(
            preferences=Preferences(
                auto_commit_todo=_value(prefs, "auto_commit_todo", bool, "preferences"),
                auto_complete_tasks=_value(
                    prefs, "auto_complete_tasks", bool, "preferences"
                ),
            ),
            git=GitSettings(done_prefix=_value(git, "done_prefix", str, "git")),
        )