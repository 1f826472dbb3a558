"""Reading and writing the TODO.md task list format."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from typing import Iterable

from .tasks import Task, TaskList
from .version import Priority, Version

_INDENT = " " * 6
_SECTION_HEADERS = ("## Tasks", "## Completed")
_PRIORITY_SUFFIX = {
    Priority.HIGH: " (high)",
    Priority.MEDIUM: "",
    Priority.LOW: " (low)",
}
_PRIORITY_MARKERS = {
    "(high)": Priority.HIGH,
    "(low)": Priority.LOW,
    "(medium)": Priority.MEDIUM,
}


class TodoFormatError(ValueError):
    """TODO.md content that cannot be parsed."""


def _format_date(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d")


def _format_datetime(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")


def _task_line(task: Task) -> str:
    checkbox = "x" if task.completed else " "
    tags = "".join(f" #{tag}" for tag in task.tags)
    return (
        f"- [{checkbox}] {task.description}"
        f"{_PRIORITY_SUFFIX[task.priority]}{tags}\n"
    )


def _task_metadata(task: Task) -> str:
    lines = [f"{_INDENT}@created {_format_datetime(task.created_at_time)}"]
    if task.created_at_version is not None:
        lines.append(f"{_INDENT}@created_version {task.created_at_version}")
    if task.created_at_commit is not None:
        lines.append(f"{_INDENT}@created_commit {task.created_at_commit}")
    if task.completed:
        if task.completed_at_time is not None:
            lines.append(
                f"{_INDENT}@completed {_format_datetime(task.completed_at_time)}"
            )
        if task.completed_at_version is not None:
            lines.append(f"{_INDENT}@completed_version {task.completed_at_version}")
        if task.completed_at_commit is not None:
            lines.append(f"{_INDENT}@completed_commit {task.completed_at_commit}")
    return "".join(f"{line}\n" for line in lines)


def _write_task(task: Task) -> str:
    return _task_line(task) + _task_metadata(task) + "\n"


def serialize(task_list: TaskList) -> str:
    """Render a task list as TODO.md text."""
    incomplete = sorted(
        (t for t in task_list.tasks if not t.completed),
        key=lambda t: t.created_at_time,
    )
    completed = sorted(
        (t for t in task_list.tasks if t.completed),
        key=lambda t: t.completed_at_time or t.created_at_time,
    )

    parts = [
        f"# TODO — {task_list.project_name} v{task_list.project_version}\n\n",
        f"@created: {_format_date(task_list.created_at)}\n",
        f"@modified: {_format_date(task_list.modified_at)}\n",
        "\n## Tasks\n\n",
    ]
    parts.extend(_write_task(task) for task in incomplete)
    if completed:
        parts.append("\n## Completed\n\n")
        parts.extend(_write_task(task) for task in completed)
    return "".join(parts)


def _split_lines(content: str) -> list[str]:
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _strip_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _parse_header(line: str) -> tuple[str, Version]:
    line = line.lstrip("#").strip()
    if not line.startswith(("TODO —", "TODO -")):
        raise TodoFormatError(
            "Invalid header format: expected 'TODO — [PROJECT] v[VERSION]'"
        )
    line = _strip_repeated(_strip_repeated(line, "TODO —"), "TODO -").strip()

    version_start = line.rfind(" v")
    if version_start < 0:
        raise TodoFormatError("No version found in header")

    project_name = line[:version_start].strip()
    try:
        version = Version.parse(line[version_start + 2:].strip())
    except ValueError as exc:
        raise TodoFormatError(f"Failed to parse version in header: {exc}") from exc
    return project_name, version


def _parse_date_line(line: str) -> datetime:
    pieces = line.split(":")
    if len(pieces) < 2:
        raise TodoFormatError("Invalid date line format")
    try:
        day = datetime.strptime(pieces[1].strip(), "%Y-%m-%d")
    except ValueError as exc:
        raise TodoFormatError(f"Failed to parse date: {exc}") from exc
    return day.replace(tzinfo=timezone.utc)


def _parse_datetime(text: str) -> datetime:
    try:
        moment = datetime.strptime(text, "%Y-%m-%d %H:%M")
    except ValueError as exc:
        raise TodoFormatError(f"Failed to parse datetime: {text}") from exc
    return moment.replace(tzinfo=timezone.utc)


def _parse_version(text: str) -> Version:
    try:
        return Version.parse(text)
    except ValueError as exc:
        raise TodoFormatError(str(exc)) from exc


def _parse_task_content(content: str) -> tuple[str, Priority, list[str]]:
    tags: list[str] = []
    words: list[str] = []
    priority = Priority.MEDIUM
    for part in content.split():
        if part.startswith("#"):
            tags.append(part.lstrip("#"))
        elif part in _PRIORITY_MARKERS:
            priority = _PRIORITY_MARKERS[part]
        else:
            words.append(part)
    description = " ".join(words)
    if not description:
        raise TodoFormatError("Task has no description")
    return description, priority, tags


def _parse_task(lines: list[str]) -> Task:
    first, *metadata = lines
    completed = "[x]" in first or "[X]" in first
    content = _strip_repeated(first, "- [").lstrip("xX ").lstrip("]").strip()
    description, priority, tags = _parse_task_content(content)

    fields: dict[str, object] = {}
    for raw in metadata:
        line = raw.strip()
        if line.startswith("@created "):
            fields["created_at_time"] = _parse_datetime(line[9:].strip())
        elif line.startswith("@created_version "):
            fields["created_at_version"] = _parse_version(line[17:].strip())
        elif line.startswith("@created_commit "):
            fields["created_at_commit"] = line[16:].strip()
        elif line.startswith("@completed "):
            fields["completed_at_time"] = _parse_datetime(line[11:].strip())
        elif line.startswith("@completed_version "):
            fields["completed_at_version"] = _parse_version(line[19:].strip())
        elif line.startswith("@completed_commit "):
            fields["completed_at_commit"] = line[18:].strip()

    if "created_at_time" not in fields:
        raise TodoFormatError("Task missing @created timestamp")

    return Task(
        description=description,
        priority=priority,
        tags=tags,
        completed=completed,
        **fields,  # type: ignore[arg-type]
    )


def _parse_tasks(lines: Iterable[str]) -> list[Task]:
    tasks: list[Task] = []
    current: list[str] = []
    for line in lines:
        if line.startswith("- ["):
            if current:
                tasks.append(_parse_task(current))
            current = [line]
        elif current and line.strip():
            current.append(line)
    if current:
        tasks.append(_parse_task(current))
    return tasks


def deserialize(content: str) -> TaskList:
    """Parse TODO.md text into a task list."""
    lines = _split_lines(content)
    if not lines:
        raise TodoFormatError("Empty TODO file")
    project_name, project_version = _parse_header(lines[0])

    pending = deque(lines[1:])
    created_at: datetime | None = None
    modified_at: datetime | None = None
    while pending:
        line = pending[0]
        if line.startswith("@created:"):
            created_at = _parse_date_line(pending.popleft())
        elif line.startswith("@modified:"):
            modified_at = _parse_date_line(pending.popleft())
        elif line.strip():
            break
        else:
            pending.popleft()

    if created_at is None:
        raise TodoFormatError("Missing @created metadata")
    if modified_at is None:
        raise TodoFormatError("Missing @modified metadata")

    tasks: list[Task] = []
    remaining = iter(pending)
    for line in remaining:
        if line.strip() in _SECTION_HEADERS:
            tasks = _parse_tasks(remaining)
            break

    return TaskList(project_name, project_version, created_at, modified_at, tasks)