"""history.json: completed tasks kept for changelogs after they leave TODO.md."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from .changes import Change
from .paths import TallyError
from .tasks import Task
from .version import Version

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _version_from_dict(data: Mapping[str, Any] | None) -> Version | None:
    if data is None:
        return None
    return Version(
        int(data["major"]),
        int(data["minor"]),
        int(data["patch"]),
        bool(data.get("is_prerelease", False)),
    )


@dataclass
class HistoryEntry:
    """One recorded change and the version it shipped in, if any."""

    change: Change
    version: Version | None = None

    @classmethod
    def from_task(cls, task: Task) -> HistoryEntry:
        return cls(Change.from_task(task), task.completed_at_version)

    def to_dict(self) -> dict[str, Any]:
        return {
            "change": self.change.to_dict(),
            "version": None if self.version is None else asdict(self.version),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HistoryEntry:
        try:
            return cls(
                Change.from_dict(data["change"]),
                _version_from_dict(data.get("version")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid history entry: {exc}") from exc


class HistoryStorage:
    """The entries of one history.json file."""

    def __init__(self, history_file: str | Path) -> None:
        self.history_file = Path(history_file)
        self.entries: list[HistoryEntry] = []
        self._load()

    def _load(self) -> None:
        if not self.history_file.exists():
            self.entries = []
            return
        try:
            content = self.history_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TallyError(f"Failed to read history file: {exc}") from exc
        try:
            raw = json.loads(content)
            if not isinstance(raw, list):
                raise ValueError("history must be a list")
            self.entries = [HistoryEntry.from_dict(item) for item in raw]
        except ValueError:
            self.entries = []

    def _save(self) -> None:
        text = json.dumps(
            [entry.to_dict() for entry in self.entries], indent=2, ensure_ascii=False
        )
        try:
            self.history_file.parent.mkdir(parents=True, exist_ok=True)
            self.history_file.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise TallyError(f"Failed to write history file: {exc}") from exc

    def __len__(self) -> int:
        return len(self.entries)

    def record(self, task: Task) -> None:
        """Record a completed task unless it is already present."""
        if not task.completed:
            return

        def same(entry: HistoryEntry) -> bool:
            if entry.change.commit is not None and task.completed_at_commit is not None:
                return entry.change.commit == task.completed_at_commit
            return (
                entry.change.description == task.description
                and entry.version == task.completed_at_version
            )

        if any(same(entry) for entry in self.entries):
            return
        self.entries.append(HistoryEntry.from_task(task))
        self._save()

    def record_all(self, tasks: Iterable[Task]) -> None:
        """Record every completed task not yet present, then save."""
        for task in tasks:
            if not task.completed:
                continue
            completed_at = task.completed_at_time or _EPOCH
            if not any(
                e.change.description == task.description
                and e.change.completed_at == completed_at
                for e in self.entries
            ):
                self.entries.append(HistoryEntry.from_task(task))
        self._save()

    def assign_version(self, version: Version) -> int:
        """Give ``version`` to every unversioned entry; return the count."""
        targets = self.unversioned_entries()
        for entry in targets:
            entry.version = version
        if targets:
            self._save()
        return len(targets)

    def entries_for_version(self, version: Version) -> list[HistoryEntry]:
        return [e for e in self.entries if e.version == version]

    def entries_between_versions(
        self, start: Version, end: Version
    ) -> list[HistoryEntry]:
        return [
            e
            for e in self.entries
            if e.version is not None and start <= e.version <= end
        ]

    def entries_by_version(self) -> dict[Version, list[HistoryEntry]]:
        """Versioned entries grouped by version, in ascending version order."""
        grouped: dict[Version, list[HistoryEntry]] = {}
        for entry in self.entries:
            if entry.version is not None:
                grouped.setdefault(entry.version, []).append(entry)
        return dict(sorted(grouped.items(), key=lambda item: item[0]))

    def unversioned_entries(self) -> list[HistoryEntry]:
        return [e for e in self.entries if e.version is None]