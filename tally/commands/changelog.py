"""The ``changelog`` command."""

from __future__ import annotations

from ..changelog_format import to_markdown
from ..changes import Log, Release
from ..history_storage import HistoryStorage
from ..paths import ProjectPaths
from ..task_storage import ListStorage
from ..tasks import _utcnow
from ..version import Version


def cmd_changelog(start: str | None = None, end: str | None = None) -> None:
    """Print a markdown changelog from history, newest release first."""
    paths = ProjectPaths.discover()
    storage = ListStorage(paths.todo_file)
    history = HistoryStorage(paths.history_file)

    start_version = Version.parse(start) if start is not None else None
    end_version = Version.parse(end) if end is not None else None

    entries_by_version = history.entries_by_version()
    if not entries_by_version:
        print("No versioned entries found in history.")
        return

    releases = []
    for version, entries in reversed(list(entries_by_version.items())):
        if start_version is not None and version < start_version:
            continue
        if end_version is not None and version > end_version:
            continue
        changes = [entry.change for entry in entries]
        date = max((c.completed_at for c in changes), default=None) or _utcnow()
        releases.append(Release.from_changes(version, date, changes))

    if not releases:
        print("No releases found in the specified range.")
        return

    changelog = Log(storage.project_name, releases, _utcnow())
    print(to_markdown(changelog))