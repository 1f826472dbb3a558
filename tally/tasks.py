"""Tasks and the task list kept in TODO.md."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from .version import Priority, Version

_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _from_rfc3339(text: str) -> datetime:
    cleaned = _EXCESS_FRACTION.sub(r"\1", text.strip())
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    moment = datetime.fromisoformat(cleaned)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _version_to_dict(version: Version | None) -> dict[str, Any] | None:
    return None if version is None else asdict(version)


@dataclass
class Task:
    """A single TODO entry with creation and completion metadata."""

    description: str
    priority: Priority = Priority.MEDIUM
    tags: list[str] = field(default_factory=list)
    completed: bool = False
    created_at_time: datetime = field(default_factory=_utcnow)
    created_at_version: Version | None = None
    created_at_commit: str | None = None
    completed_at_time: datetime | None = None
    completed_at_version: Version | None = None
    completed_at_commit: str | None = None

    def mark_complete(
        self, commit: str | None = None, version: Version | None = None
    ) -> None:
        """Mark the task done now, recording the commit and version."""
        self.completed = True
        self.completed_at_time = _utcnow()
        self.completed_at_commit = commit
        self.completed_at_version = version

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return any(tag in self.tags for tag in tags)

    def has_all_tags(self, tags: Iterable[str]) -> bool:
        return all(tag in self.tags for tag in tags)

    def is_older_than_days(self, days: int) -> bool:
        """True if the task was completed more than ``days`` whole days ago."""
        if self.completed_at_time is None:
            return False
        age = _utcnow() - self.completed_at_time
        return int(age / timedelta(days=1)) > days

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "priority": self.priority.value,
            "tags": list(self.tags),
            "completed": self.completed,
            "created_at_time": _to_rfc3339(self.created_at_time),
            "created_at_version": _version_to_dict(self.created_at_version),
            "created_at_commit": self.created_at_commit,
            "completed_at_time": (
                None
                if self.completed_at_time is None
                else _to_rfc3339(self.completed_at_time)
            ),
            "completed_at_version": _version_to_dict(self.completed_at_version),
            "completed_at_commit": self.completed_at_commit,
        }


@dataclass
class TaskList:
    """A project's task list."""

    project_name: str
    project_version: Version
    created_at: datetime
    modified_at: datetime
    tasks: list[Task] = field(default_factory=list)

    @classmethod
    def create(cls, project_name: str, project_version: Version) -> TaskList:
        """Create an empty list stamped with the current time."""
        now = _utcnow()
        return cls(project_name, project_version, now, now, [])

    def add_task(self, task: Task) -> None:
        self.tasks.append(task)
        self.modified_at = _utcnow()

    def tasks_for_version(self, version: Version) -> list[Task]:
        return [t for t in self.tasks if t.completed_at_version == version]

    def tasks_between_versions(self, start: Version, end: Version) -> list[Task]:
        """Tasks completed in a version between ``start`` and ``end`` inclusive."""
        return [
            t
            for t in self.tasks
            if t.completed_at_version is not None
            and start <= t.completed_at_version <= end
        ]

    def unversioned_completed_tasks(self) -> list[Task]:
        return [
            t for t in self.tasks if t.completed and t.completed_at_version is None
        ]

    def tasks_by_version(self) -> dict[Version, list[Task]]:
        """Versioned tasks grouped by version, in ascending version order."""
        grouped: dict[Version, list[Task]] = {}
        for task in self.tasks:
            if task.completed_at_version is not None:
                grouped.setdefault(task.completed_at_version, []).append(task)
        return dict(sorted(grouped.items(), key=lambda item: item[0]))

    def assign_version_to_completed(self, version: Version) -> int:
        """Give ``version`` to every unversioned completed task; return the count."""
        targets = self.unversioned_completed_tasks()
        for task in targets:
            task.completed_at_version = version
        if targets:
            self.modified_at = _utcnow()
        return len(targets)