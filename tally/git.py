"""Committing tally's own files and checking the git working tree."""

from __future__ import annotations

import subprocess
from pathlib import Path

from .paths import ProjectPaths, TallyError

TALLY_FILES = ("TODO.md", ".tally/history.json")


def _root(root: str | Path | None) -> Path:
    return Path(root) if root is not None else ProjectPaths.discover().root


def _git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=False)


def _changed_files(args: list[str], cwd: Path) -> list[str]:
    output = _git(args, cwd).stdout.decode("utf-8")
    names = (line.strip() for line in output.splitlines())
    return [name for name in names if name not in TALLY_FILES]


def commit_tally_files(message: str, root: str | Path | None = None) -> None:
    """Commit TODO.md and .tally/history.json with ``message``."""
    cwd = _root(root)
    result = _git(["commit", "-m", message, "--", *TALLY_FILES], cwd)
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace")
        raise TallyError(f"Failed to commit: {stderr}")
    print("Committed TODO.md and .tally/history.json")


def check_for_non_tally_changes(root: str | Path | None = None) -> None:
    """Raise if files other than tally's own are modified or staged."""
    cwd = _root(root)

    dirty = _changed_files(["diff", "--name-only"], cwd)
    if dirty:
        raise TallyError(
            "Working tree has uncommitted changes:\n"
            + "\n".join(dirty)
            + "\nCommit or stash them first."
        )

    staged = _changed_files(["diff", "--cached", "--name-only"], cwd)
    if staged:
        raise TallyError(
            "Working tree has staged changes:\n"
            + "\n".join(staged)
            + "\nCommit or stash them first."
        )