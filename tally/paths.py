"""Locating and creating a project's .tally directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir


class TallyError(Exception):
    """An error reported to the user."""


def _resolve_config_file(tally_dir: Path) -> Path:
    local = tally_dir / "config.toml"
    if local.exists():
        return local
    return Path(user_config_dir("tally", appauthor=False)) / "config.toml"


def find_project_root(start: str | Path | None = None) -> Path:
    """Return the nearest directory at or above ``start`` holding ``.tally/``."""
    current = (Path(start) if start is not None else Path.cwd()).absolute()
    for candidate in (current, *current.parents):
        if (candidate / ".tally").is_dir():
            return candidate
    raise TallyError("No .tally/ directory found. use 'tally init' to create a new one")


@dataclass(frozen=True)
class ProjectPaths:
    """Files and directories that make up a tally project."""

    todo_file: Path
    history_file: Path
    config_file: Path
    hooks_dir: Path
    ignore_file: Path
    tally_dir: Path
    root: Path

    @classmethod
    def _for_root(cls, root: Path, config_file: Path) -> ProjectPaths:
        tally_dir = root / ".tally"
        return cls(
            todo_file=root / "TODO.md",
            history_file=tally_dir / "history.json",
            config_file=config_file,
            hooks_dir=tally_dir / "hooks",
            ignore_file=tally_dir / "ignore",
            tally_dir=tally_dir,
            root=root,
        )

    @classmethod
    def discover(cls, start: str | Path | None = None) -> ProjectPaths:
        """Paths for the project containing ``start`` (default: the cwd)."""
        root = find_project_root(start)
        return cls._for_root(root, _resolve_config_file(root / ".tally"))

    @classmethod
    def init_here(cls, root: str | Path | None = None) -> ProjectPaths:
        """Create ``.tally/`` and its hooks directory in ``root`` (default: the cwd)."""
        root_path = (Path(root) if root is not None else Path.cwd()).absolute()
        tally_dir = root_path / ".tally"
        if tally_dir.exists():
            raise TallyError(f"Project already initialized at {tally_dir}")
        config_file = _resolve_config_file(tally_dir)
        tally_dir.mkdir(parents=True, exist_ok=True)
        (tally_dir / "hooks").mkdir(parents=True, exist_ok=True)
        return cls._for_root(root_path, config_file)