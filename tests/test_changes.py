from datetime import datetime, timezone

import pytest

from tally.changes import Change, Log, Release
from tally.tasks import Task
from tally.version import Priority, Version


def _task(description, priority=Priority.MEDIUM, tags=(), when=None, commit=None):
    task = Task(description, priority, list(tags))
    task.mark_complete(commit, None)
    task.completed_at_time = when
    return task


def test_change_from_task_copies_fields():
    when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    change = Change.from_task(_task("Fix", Priority.HIGH, ["bug"], when, "abc"))
    assert change.description == "Fix"
    assert change.priority is Priority.HIGH
    assert change.tags == ["bug"]
    assert change.commit == "abc"
    assert change.completed_at == when


def test_change_from_task_without_time_uses_now():
    before = datetime.now(timezone.utc)
    change = Change.from_task(_task("x"))
    assert change.completed_at >= before


def test_change_round_trip():
    change = Change(
        "Add", Priority.LOW, ["a", "b"], None,
        datetime(2024, 1, 2, 3, 4, 5, 678, tzinfo=timezone.utc),
    )
    assert Change.from_dict(change.to_dict()) == change


def test_change_from_dict_truncates_nanoseconds():
    change = Change.from_dict({
        "description": "d", "priority": "High", "tags": [], "commit": None,
        "completed_at": "2024-01-02T03:04:05.123456789Z",
    })
    assert change.completed_at == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)


def test_change_from_dict_missing_field():
    with pytest.raises(ValueError):
        Change.from_dict({"description": "d"})


def test_release_from_tasks_groups_and_dates():
    early = datetime(2024, 1, 1, tzinfo=timezone.utc)
    late = datetime(2024, 2, 1, tzinfo=timezone.utc)
    tasks = [
        _task("a", Priority.HIGH, ["ui"], early),
        _task("b", Priority.LOW, ["ui", "core"], late),
        _task("c", Priority.HIGH, [], early),
    ]
    release = Release.from_tasks(Version(1, 0, 0), tasks)
    assert release.date == late
    assert list(release.changes_by_priority) == [Priority.LOW, Priority.HIGH]
    assert [c.description for c in release.changes_by_priority[Priority.HIGH]] == ["a", "c"]
    assert list(release.changes_by_tag) == ["core", "ui"]
    assert [c.description for c in release.changes_by_tag["ui"]] == ["a", "b"]


def test_release_from_changes_keeps_date():
    date = datetime(2023, 6, 1, tzinfo=timezone.utc)
    change = Change("x", Priority.MEDIUM, ["t"], None, date)
    release = Release.from_changes(Version(0, 1, 0), date, [change])
    assert release.date == date
    data = release.to_dict()
    assert list(data["changes_by_priority"]) == ["Medium"]
    assert data["changes_by_tag"]["t"][0]["description"] == "x"


def test_log_from_tasks_orders_releases():
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    log = Log.from_tasks("proj", {
        Version(0, 3, 0): [_task("c", when=when)],
        Version(0, 1, 0): [_task("a", when=when)],
        Version(0, 2, 0): [_task("b", when=when)],
    })
    assert [r.version for r in log.releases] == [Version(0, 1, 0), Version(0, 2, 0), Version(0, 3, 0)]
    assert log.to_dict()["project_name"] == "proj"


def test_log_filter_versions():
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    log = Log.from_tasks("proj", {
        Version(0, v, 0): [_task(str(v), when=when)] for v in (1, 2, 3)
    })
    filtered = log.filter_versions(Version(0, 2, 0), None)
    assert [r.version for r in filtered.releases] == [Version(0, 2, 0), Version(0, 3, 0)]
    assert filtered.generated_at == log.generated_at
    bounded = log.filter_versions(None, Version(0, 1, 0))
    assert [r.version for r in bounded.releases] == [Version(0, 1, 0)]
    assert len(log.filter_versions().releases) == len(log.releases)