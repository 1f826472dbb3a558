"""The ``done`` command."""

from __future__ import annotations

from ..config_storage import ConfigStorage
from ..fuzzy import best_match
from ..git import commit_tally_files
from ..history_storage import HistoryStorage
from ..paths import ProjectPaths, TallyError
from ..task_storage import ListStorage
from ..version import Version


def cmd_done(
    description: str,
    commit: str | None = None,
    version: str | None = None,
    dry_run: bool = False,
    auto: bool = False,
) -> None:
    """Mark the open task that best fuzzy-matches ``description`` as done."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    history = HistoryStorage(paths.history_file)
    config = ConfigStorage(paths.config_file).config

    found = best_match(
        ((i, task.description) for i, task in enumerate(storage.tasks) if not task.completed),
        description,
    )
    if found is None:
        raise TallyError(f"No matching task found for: '{description}'")

    index, score = found
    task = storage.tasks[index]

    if dry_run:
        print(f"Would mark as done (score: {score}):")
        print(f"  [x] {task.description}")
        if commit is not None:
            print(f"      @completed_commit {commit}")
        if version is not None:
            print(f"      @completed_version {version}")
        return

    parsed_version = Version.parse(version) if version is not None else None

    print(f"Marked as done: {task.description}")

    if commit is not None:
        task.completed_at_commit = commit
        storage.save_list()

    storage.complete_task(index, parsed_version)
    history.record(storage.tasks[index])

    if auto or config.preferences.auto_commit_todo:
        commit_tally_files("update TODO: complete task", paths.root)