"""Changes, releases and changelogs built from completed tasks."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping

from .tasks import Task, _from_rfc3339, _to_rfc3339, _utcnow
from .version import Priority, Version


@dataclass
class Change:
    """A completed piece of work as it appears in a changelog."""

    description: str
    priority: Priority
    tags: list[str]
    commit: str | None
    completed_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> Change:
        completed_at = task.completed_at_time
        return cls(
            description=task.description,
            priority=task.priority,
            tags=list(task.tags),
            commit=task.completed_at_commit,
            completed_at=completed_at if completed_at is not None else _utcnow(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "priority": self.priority.value,
            "tags": list(self.tags),
            "commit": self.commit,
            "completed_at": _to_rfc3339(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Change:
        try:
            return cls(
                description=str(data["description"]),
                priority=Priority(data["priority"]),
                tags=[str(tag) for tag in data["tags"]],
                commit=data.get("commit"),
                completed_at=_from_rfc3339(data["completed_at"]),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid change record: {exc}") from exc


def _group(
    changes: Iterable[Change],
) -> tuple[dict[Priority, list[Change]], dict[str, list[Change]]]:
    by_priority: dict[Priority, list[Change]] = {}
    by_tag: dict[str, list[Change]] = {}
    for change in changes:
        by_priority.setdefault(change.priority, []).append(change)
        for tag in change.tags:
            by_tag.setdefault(tag, []).append(change)
    return dict(sorted(by_priority.items())), dict(sorted(by_tag.items()))


@dataclass
class Release:
    """The changes that went into one version."""

    version: Version
    date: datetime
    changes_by_priority: dict[Priority, list[Change]] = field(default_factory=dict)
    changes_by_tag: dict[str, list[Change]] = field(default_factory=dict)

    @classmethod
    def from_tasks(cls, version: Version, tasks: Iterable[Task]) -> Release:
        """Build a release dated at the latest completion among ``tasks``."""
        tasks = list(tasks)
        times = [t.completed_at_time for t in tasks if t.completed_at_time is not None]
        date = max(times) if times else _utcnow()
        by_priority, by_tag = _group(Change.from_task(t) for t in tasks)
        return cls(version, date, by_priority, by_tag)

    @classmethod
    def from_changes(
        cls, version: Version, date: datetime, changes: Iterable[Change]
    ) -> Release:
        by_priority, by_tag = _group(changes)
        return cls(version, date, by_priority, by_tag)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": asdict(self.version),
            "date": _to_rfc3339(self.date),
            "changes_by_priority": {
                priority.value: [c.to_dict() for c in changes]
                for priority, changes in self.changes_by_priority.items()
            },
            "changes_by_tag": {
                tag: [c.to_dict() for c in changes]
                for tag, changes in self.changes_by_tag.items()
            },
        }


@dataclass
class Log:
    """A changelog: releases of one project."""

    project_name: str
    releases: list[Release]
    generated_at: datetime

    @classmethod
    def from_tasks(
        cls, project_name: str, tasks_by_version: Mapping[Version, Iterable[Task]]
    ) -> Log:
        """Build one release per version, in ascending version order."""
        releases = [
            Release.from_tasks(version, tasks)
            for version, tasks in sorted(
                tasks_by_version.items(), key=lambda item: item[0]
            )
        ]
        return cls(project_name, releases, _utcnow())

    def filter_versions(
        self, start: Version | None = None, end: Version | None = None
    ) -> Log:
        """Keep only releases with ``start <= version <= end``; None is unbounded."""
        kept = [
            release
            for release in self.releases
            if (start is None or release.version >= start)
            and (end is None or release.version <= end)
        ]
        return Log(self.project_name, kept, self.generated_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_name": self.project_name,
            "releases": [release.to_dict() for release in self.releases],
            "generated_at": _to_rfc3339(self.generated_at),
        }