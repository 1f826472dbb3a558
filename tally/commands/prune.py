"""The ``prune`` command."""

from __future__ import annotations

from datetime import timedelta

from ..config_storage import ConfigStorage
from ..git import commit_tally_files
from ..history_storage import HistoryStorage
from ..paths import ProjectPaths
from ..task_storage import ListStorage
from ..tasks import _utcnow

_DEFAULT_HOURS = 30 * 24


def format_duration(total_hours: int) -> str:
    """Describe a number of hours as days and hours."""
    days, hours = divmod(total_hours, 24)
    if days == 0:
        return f"{hours} hour(s)"
    if hours == 0:
        return f"{days} day(s)"
    return f"{days} day(s) {hours} hour(s)"


def cmd_prune(
    days: int | None = None,
    hours: int | None = None,
    dry_run: bool = False,
    auto: bool = False,
) -> None:
    """Remove completed tasks older than the threshold, keeping them in history."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    history = HistoryStorage(paths.history_file)
    config = ConfigStorage(paths.config_file).config

    if days is None and hours is None:
        total_hours = _DEFAULT_HOURS
    else:
        total_hours = (days or 0) * 24 + (hours or 0)

    cutoff = _utcnow() - timedelta(hours=total_hours)
    duration = format_duration(total_hours)

    to_prune = [
        (index, task)
        for index, task in enumerate(storage.tasks)
        if task.completed
        and task.completed_at_time is not None
        and task.completed_at_time < cutoff
    ]

    if not to_prune:
        print(f"No completed tasks older than {duration} to prune.")
        return

    if dry_run:
        print(f"Would prune {len(to_prune)} completed task(s) older than {duration}:\n")
        for _, task in to_prune:
            completed = (
                task.completed_at_time.strftime("%Y-%m-%d %H:%M")
                if task.completed_at_time is not None
                else "unknown"
            )
            print(f"  [x] {task.description} (completed: {completed})")
        return

    history.record_all(task for _, task in to_prune)

    indices = sorted((index for index, _ in to_prune), reverse=True)
    for index in indices:
        storage.remove_task(index)

    if auto or config.preferences.auto_commit_todo:
        commit_tally_files("update TODO: prune tasks", paths.root)

    print(f"✓ Pruned {len(indices)} completed task(s) older than {duration}")
    print("  All pruned tasks saved to history.json")