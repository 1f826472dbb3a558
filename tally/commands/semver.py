"""The ``semver`` and ``tag`` commands."""

from __future__ import annotations

import subprocess

from ..config_storage import ConfigStorage
from ..git import commit_tally_files
from ..history_storage import HistoryStorage
from ..paths import ProjectPaths, TallyError
from ..task_storage import ListStorage
from ..version import Version


def cmd_semver(
    version_str: str, dry_run: bool = False, summary: bool = False, auto: bool = False
) -> None:
    """Set the project version and give it to every unversioned completed task."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    history = HistoryStorage(paths.history_file)
    config = ConfigStorage(paths.config_file).config

    version = Version.parse(version_str)
    storage.set_project_version(version)
    print(f"Set project version to '{version}'")

    unversioned = storage.task_list.unversioned_completed_tasks()
    if not unversioned:
        print("Nothing to do: No completed tasks without a version.")
        return

    if dry_run:
        print(f"Would assign version {version} to {len(unversioned)} task(s):")
        for task in unversioned:
            print(f"  [x] {task.description}")
        return

    history.record_all(unversioned)
    count = storage.assign_version_to_completed(version)
    history.assign_version(version)

    print(f"Assigned version {version} to {count} task(s)")

    if summary:
        print()
        print(f"Tasks in {version}:")
        for entry in history.entries_for_version(version):
            print(f"  • {entry.change.description}")

    if auto or config.preferences.auto_commit_todo:
        commit_tally_files("update TODO: set semver", paths.root)


def cmd_tag(
    version_str: str,
    message: str | None = None,
    dry_run: bool = False,
    summary: bool = False,
    auto: bool = False,
) -> None:
    """Run ``semver`` and then create an annotated git tag prefixed with ``v``."""
    paths = ProjectPaths.discover()
    tag_name = version_str if version_str.startswith("v") else f"v{version_str}"

    cmd_semver(version_str, dry_run, summary, auto)

    msg = message if message is not None else f"Release {tag_name}"

    if dry_run:
        print()
        print("Would commit TODO.md and .tally/history.json")
        print(f"Would create git tag: {tag_name} — {msg}")
        return

    try:
        result = subprocess.run(
            ["git", "tag", "-a", tag_name, "-m", msg],
            cwd=paths.root,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise TallyError(f"Failed to create git tag: {exc}") from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace")
        raise TallyError(f"Failed to create git tag: {stderr}")

    print(f"✓ Created git tag: {tag_name}")