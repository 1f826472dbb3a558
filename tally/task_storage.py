"""The task list kept in a project's TODO.md file."""

from __future__ import annotations

from pathlib import Path

from .paths import TallyError
from .tasks import Task, TaskList, _utcnow
from .todo_format import deserialize, serialize
from .version import Priority, Version

_DEFAULT_VERSION = Version(0, 1, 0)


class ListStorage:
    """A task list bound to a TODO.md file; every change is saved at once."""

    def __init__(self, list_file: str | Path) -> None:
        self.list_file = Path(list_file)
        self.task_list = TaskList.create("", _DEFAULT_VERSION)
        self.load_list()

    def load_list(self) -> None:
        """Read the file; a missing file gives an empty 'Untitled' list."""
        if not self.list_file.exists():
            self.task_list = TaskList.create("Untitled", _DEFAULT_VERSION)
            return
        try:
            content = self.list_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TallyError(f"Failed to read TODO file: {exc}") from exc
        try:
            self.task_list = deserialize(content)
        except ValueError as exc:
            raise TallyError(f"Failed to parse TODO file: {exc}") from exc

    def save_list(self) -> None:
        try:
            self.list_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TallyError(f"Failed to create directory: {exc}") from exc
        try:
            self.list_file.write_text(serialize(self.task_list), encoding="utf-8")
        except OSError as exc:
            raise TallyError(f"Failed to write TODO file: {exc}") from exc

    @property
    def tasks(self) -> list[Task]:
        return self.task_list.tasks

    @property
    def project_name(self) -> str:
        return self.task_list.project_name

    @property
    def project_version(self) -> Version:
        return self.task_list.project_version

    def __len__(self) -> int:
        return len(self.task_list.tasks)

    def _touch_and_save(self) -> None:
        self.task_list.modified_at = _utcnow()
        self.save_list()

    def _task_at(self, index: int) -> Task:
        if 0 <= index < len(self.task_list.tasks):
            return self.task_list.tasks[index]
        raise TallyError(f"Task index {index} out of bounds")

    def add_task(self, task: Task) -> None:
        self.task_list.add_task(task)
        self.save_list()

    def remove_task(self, index: int) -> Task | None:
        """Remove and return the task at ``index``; None if there is none."""
        if not 0 <= index < len(self.task_list.tasks):
            return None
        task = self.task_list.tasks.pop(index)
        self._touch_and_save()
        return task

    def complete_task(self, index: int, version: Version | None = None) -> None:
        task = self._task_at(index)
        task.completed = True
        task.completed_at_time = _utcnow()
        if version is not None:
            task.completed_at_version = version
        self._touch_and_save()

    def uncomplete_task(self, index: int) -> None:
        task = self._task_at(index)
        task.completed = False
        task.completed_at_time = None
        task.completed_at_version = None
        task.completed_at_commit = None
        self._touch_and_save()

    def update_task_description(self, index: int, description: str) -> None:
        self._task_at(index).description = description
        self._touch_and_save()

    def update_task_priority(self, index: int, priority: Priority) -> None:
        self._task_at(index).priority = priority
        self._touch_and_save()

    def add_task_tag(self, index: int, tag: str) -> None:
        """Add ``tag`` unless the task already has it."""
        task = self._task_at(index)
        if tag not in task.tags:
            task.tags.append(tag)
            self._touch_and_save()

    def remove_task_tag(self, index: int, tag: str) -> None:
        task = self._task_at(index)
        task.tags = [t for t in task.tags if t != tag]
        self._touch_and_save()

    def tasks_by_status(self, completed: bool) -> list[Task]:
        return [t for t in self.tasks if t.completed == completed]

    def tasks_by_priority(self, priority: Priority) -> list[Task]:
        return [t for t in self.tasks if t.priority == priority]

    def tasks_by_tag(self, tag: str) -> list[Task]:
        return [t for t in self.tasks if tag in t.tags]

    def tasks_for_version(self, version: Version) -> list[Task]:
        return self.task_list.tasks_for_version(version)

    def tasks_between_versions(self, start: Version, end: Version) -> list[Task]:
        return self.task_list.tasks_between_versions(start, end)

    def assign_version_to_completed(self, version: Version) -> int:
        """Version every unversioned completed task; save if any changed."""
        count = self.task_list.assign_version_to_completed(version)
        if count:
            self.save_list()
        return count

    def set_project_name(self, name: str) -> None:
        self.task_list.project_name = name
        self._touch_and_save()

    def set_project_version(self, version: Version) -> None:
        self.task_list.project_version = version
        self._touch_and_save()

    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    def pending_count(self) -> int:
        return sum(1 for t in self.tasks if not t.completed)

    def clear_tasks(self) -> None:
        self.task_list.tasks.clear()
        self._touch_and_save()

    def search_tasks(self, pattern: str) -> list[Task]:
        """Tasks whose description contains ``pattern``, ignoring case."""
        wanted = pattern.lower()
        return [t for t in self.tasks if wanted in t.description.lower()]