"""The ``remove`` command."""

from __future__ import annotations

from ..config_storage import ConfigStorage
from ..fuzzy import best_match
from ..git import commit_tally_files
from ..history_storage import HistoryStorage
from ..paths import ProjectPaths, TallyError
from ..task_storage import ListStorage

_MIN_SCORE = 50.0
_MAX_SCORE = 100.0


def cmd_remove(description: str, dry_run: bool = False, auto: bool = False) -> None:
    """Remove the task that best fuzzy-matches ``description``.

    A completed task is recorded to history first so changelogs keep it.
    """
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    history = HistoryStorage(paths.history_file)
    config = ConfigStorage(paths.config_file).config

    found = best_match(
        ((i, task.description) for i, task in enumerate(storage.tasks)), description
    )
    if found is None:
        raise TallyError(f"No matching task found for: '{description}'")

    index, score = found
    task = storage.tasks[index]
    score_pct = min(float(score), _MAX_SCORE)

    if score_pct < _MIN_SCORE:
        raise TallyError(f"Best match too low ({score_pct:.0f}%): '{task.description}'")

    if dry_run:
        checkbox = "x" if task.completed else " "
        print(f"Would remove (match: {score_pct:.0f}%):")
        print(f"  [{checkbox}] {task.description}")
        if task.completed:
            print("  (completed task — will be saved to history first)")
        return

    if task.completed:
        history.record(task)

    removed = storage.remove_task(index)
    if removed is not None:
        print(f"✓ Removed (match: {score_pct:.0f}%): {removed.description}")

    if auto or config.preferences.auto_commit_todo:
        commit_tally_files("update TODO: remove task", paths.root)