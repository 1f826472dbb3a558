"""The ``add`` command."""

from __future__ import annotations

from typing import Iterable

from ..config_storage import ConfigStorage
from ..git import commit_tally_files
from ..paths import ProjectPaths
from ..task_storage import ListStorage
from ..tasks import Task
from ..version import Priority

_PRIORITY_SUFFIX = {Priority.HIGH: " (high)", Priority.MEDIUM: "", Priority.LOW: " (low)"}


def format_task_line(description: str, priority: Priority, tags: Iterable[str]) -> str:
    """Render an open task as ``  [ ] description (priority) #tag ...``."""
    tag_text = "".join(f" #{tag}" for tag in tags)
    return f"  [ ] {description}{_PRIORITY_SUFFIX[priority]}{tag_text}"


def cmd_add(
    description: str,
    priority: Priority = Priority.MEDIUM,
    tags: list[str] | None = None,
    dry_run: bool = False,
    auto: bool = False,
) -> None:
    """Add a task to TODO.md."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    config = ConfigStorage(paths.config_file).config

    tag_list = list(tags or [])
    task = Task(description, priority, tag_list)

    if dry_run:
        print("Would add task:")
        print(format_task_line(task.description, task.priority, task.tags))
        return

    storage.add_task(task)

    if auto or config.preferences.auto_commit_todo:
        commit_tally_files("update TODO: add task", paths.root)

    print("✓ Added task:")
    print(format_task_line(description, priority, tag_list))