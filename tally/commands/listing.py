"""The ``list`` command."""

from __future__ import annotations

import json

from ..paths import ProjectPaths
from ..task_storage import ListStorage
from ..version import Priority

_PRIORITY_SUFFIX = {Priority.HIGH: " (high)", Priority.MEDIUM: "", Priority.LOW: " (low)"}


def cmd_list(
    tags: list[str] | None = None,
    priority: Priority | None = None,
    as_json: bool = False,
) -> None:
    """Print tasks, optionally filtered by any of ``tags`` and by priority."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)

    numbered = list(enumerate(storage.tasks, start=1))
    if tags is not None:
        numbered = [(n, t) for n, t in numbered if t.has_any_tag(tags)]
    if priority is not None:
        numbered = [(n, t) for n, t in numbered if t.priority == priority]

    if as_json:
        print(json.dumps([t.to_dict() for _, t in numbered], indent=2, ensure_ascii=False))
        return

    if not numbered:
        print("No tasks found.")
        return

    for number, task in numbered:
        checkbox = "x" if task.completed else " "
        tag_text = "".join(f" #{tag}" for tag in task.tags)
        print(
            f"{number}. [{checkbox}] {task.description}"
            f"{_PRIORITY_SUFFIX[task.priority]}{tag_text}"
        )
        if task.completed:
            if task.completed_at_commit is not None:
                print(f"      @commit {task.completed_at_commit}")
            if task.completed_at_version is not None:
                print(f"      @version {task.completed_at_version}")