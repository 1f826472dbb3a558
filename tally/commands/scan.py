"""The ``scan`` command: complete tasks named in git commit messages."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..config_storage import ConfigStorage
from ..fuzzy import fuzzy_match
from ..history_storage import HistoryStorage
from ..ignore_storage import IgnoreStorage
from ..paths import ProjectPaths, TallyError
from ..task_storage import ListStorage

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_GIT_LOG = ["git", "log", "--pretty=format:%h%x1f%ct%x1f%B%x1e", "-n", "50"]


@dataclass
class Commit:
    """A commit whose message lists finished items."""

    hash: str
    done_items: list[str] = field(default_factory=list)
    date: datetime = _EPOCH


def _ascii_lower(text: str) -> str:
    return "".join(c.lower() if c.isascii() else c for c in text)


def _commit_date(text: str) -> datetime:
    if not _INTEGER.fullmatch(text):
        return _EPOCH
    try:
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _EPOCH


def extract_done_items(message: str, done_marker: str) -> list[str]:
    """Items listed under the ``done_marker`` line, up to a blank line or header."""
    items: list[str] = []
    marker = _ascii_lower(done_marker)
    in_done = False
    for line in message.split("\n"):
        trimmed = line.strip()
        if _ascii_lower(trimmed) == marker:
            in_done = True
            continue
        if not in_done:
            continue
        if not trimmed or trimmed.endswith(":"):
            break
        cleaned = trimmed.lstrip("-*").strip()
        if cleaned:
            items.append(cleaned)
    return items


def parse_commits(text: str, done_marker: str) -> list[Commit]:
    """Parse ``git log`` output of hash/timestamp/body records into commits."""
    commits: list[Commit] = []
    for raw in text.split("\x1e"):
        record = raw.strip()
        if not record:
            continue
        parts = record.split("\x1f", 2)
        commit_hash = parts[0]
        timestamp = parts[1] if len(parts) > 1 else "0"
        body = parts[2].strip() if len(parts) > 2 else ""
        done_items = extract_done_items(body, done_marker)
        if done_items:
            commits.append(Commit(commit_hash, done_items, _commit_date(timestamp)))
    return commits


def _read_git_log(root) -> str:
    try:
        result = subprocess.run(_GIT_LOG, cwd=root, capture_output=True, check=False)
    except OSError as exc:
        raise TallyError(f"failed to run git: {exc}") from exc
    if result.returncode != 0:
        raise TallyError("failed to read git log")
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TallyError(f"git log is not valid UTF-8: {exc}") from exc


def _confirm() -> bool:
    try:
        answer = input("  Mark as done? [y/N]: ")
    except EOFError:
        answer = ""
    return answer.strip().lower() == "y"


def cmd_scan(auto: bool = False, dry_run: bool = False) -> None:
    """Match open tasks against recent commits' done items and complete them."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    history = HistoryStorage(paths.history_file)
    ignore = IgnoreStorage.load(paths.ignore_file)
    config = ConfigStorage(paths.config_file).config

    commits = parse_commits(_read_git_log(paths.root), config.git.done_prefix)
    matches_found = 0
    completed: list[tuple[int, str]] = []

    for index, task in enumerate(storage.tasks):
        if task.completed or ignore.is_ignored(task.description, task.tags):
            continue

        best: tuple[str, int, str] | None = None
        for commit in commits:
            if commit.date < task.created_at_time:
                continue
            for done in commit.done_items:
                score = fuzzy_match(task.description, done)
                if score is not None and (best is None or score > best[1]):
                    best = (commit.hash, score, done)

        if best is None:
            continue

        commit_hash, score, done_line = best
        matches_found += 1
        print(f"Match found (score: {score}):")
        print(f"  Task: {task.description}")
        print(f"  Done: {done_line}")
        print(f"  Commit: {commit_hash}")

        if dry_run:
            print("  (dry-run: would mark as done)\n")
            continue

        if auto or config.preferences.auto_complete_tasks or _confirm():
            completed.append((index, commit_hash))
        else:
            print("  → Skipped")
        print()

    for index, commit_hash in completed:
        storage.complete_task(index, None)
        storage.tasks[index].completed_at_commit = commit_hash
    storage.save_list()

    for index, _ in completed:
        history.record(storage.tasks[index])

    if matches_found == 0:
        print("No matches found.")