"""The ``status`` command."""

from __future__ import annotations

from collections import Counter

from ..paths import ProjectPaths
from ..task_storage import ListStorage
from ..version import Priority

_TOP_TAGS = 10


def _format_float(value: float) -> str:
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def cmd_status() -> None:
    """Print a summary of progress, open priorities and tag usage."""
    paths = ProjectPaths.discover()
    task_list = ListStorage(paths.todo_file).task_list
    tasks = task_list.tasks

    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    open_count = total - completed

    priority_counts = Counter(t.priority for t in tasks if not t.completed)

    tag_counts: dict[str, list[int]] = {}
    for task in tasks:
        for tag in task.tags:
            counts = tag_counts.setdefault(tag, [0, 0])
            counts[1 if task.completed else 0] += 1

    print(f"Project: {task_list.project_name} {task_list.project_version}\n")

    if total > 0:
        rate = completed / total * 100.0
        print(f"{total} Task(s), {_format_float(rate)}% done:")
    else:
        print(f"{completed} Task(s):")

    print(f"  Open: {open_count}")
    print(f"  Done: {completed}")

    if open_count > 0:
        print("\nOpen Tasks:")
        for priority, label in (
            (Priority.HIGH, "High:  "),
            (Priority.MEDIUM, "Medium:"),
            (Priority.LOW, "Low:   "),
        ):
            if priority_counts[priority] > 0:
                print(f"  {label} {priority_counts[priority]}")

    if tag_counts:
        print("\nTags:")
        ordered = sorted(tag_counts.items(), key=lambda item: (-sum(item[1]), item[0]))
        for tag, (open_tags, done_tags) in ordered[:_TOP_TAGS]:
            if open_tags > 0:
                print(
                    f"  #{tag}: {open_tags} open, {done_tags} done "
                    f"({open_tags + done_tags} total)"
                )
            else:
                print(f"  #{tag}: {done_tags} done")
        if len(ordered) > _TOP_TAGS:
            print(f"  ... and {len(ordered) - _TOP_TAGS} more")