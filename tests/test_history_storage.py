import json
from datetime import datetime, timezone

import pytest

from tally.history_storage import HistoryEntry, HistoryStorage
from tally.tasks import Task
from tally.version import Version


def done_task(description, commit=None, version=None, minute=0):
    return Task(
        description,
        completed=True,
        completed_at_time=datetime(2024, 5, 1, 12, minute, tzinfo=timezone.utc),
        completed_at_commit=commit,
        completed_at_version=version,
    )


@pytest.fixture
def path(tmp_path):
    return tmp_path / ".tally" / "history.json"


def test_missing_file_is_empty(path):
    assert len(HistoryStorage(path)) == 0


def test_corrupt_file_is_empty(path):
    path.parent.mkdir(parents=True)
    path.write_text("", encoding="utf-8")
    assert HistoryStorage(path).entries == []


def test_record_persists_and_round_trips(path):
    history = HistoryStorage(path)
    history.record(done_task("Fix bug", commit="abc123f"))
    reloaded = HistoryStorage(path)
    assert reloaded.entries == history.entries
    assert reloaded.entries[0].change.commit == "abc123f"
    assert isinstance(json.loads(path.read_text(encoding="utf-8")), list)


def test_record_skips_incomplete(path):
    history = HistoryStorage(path)
    history.record(Task("Open"))
    assert len(history) == 0
    assert not path.exists()


def test_record_deduplicates(path):
    history = HistoryStorage(path)
    history.record(done_task("Same"))
    history.record(done_task("Same", minute=5))
    history.record(done_task("Other", commit="aaa"))
    history.record(done_task("Renamed", commit="aaa"))
    assert [e.change.description for e in history.entries] == ["Same", "Other"]


def test_record_distinct_commits_same_description(path):
    history = HistoryStorage(path)
    history.record(done_task("Task", commit="aaa"))
    history.record(done_task("Task", commit="bbb"))
    assert len(history) == 2


def test_record_all_deduplicates_by_time(path):
    history = HistoryStorage(path)
    first = done_task("A")
    history.record_all([first, first, done_task("A", minute=1), Task("open")])
    assert len(history) == 2
    assert len(HistoryStorage(path)) == 2


def test_assign_version_and_grouping(path):
    history = HistoryStorage(path)
    history.record(done_task("Old", version=Version(0, 1, 0)))
    history.record(done_task("New one"))
    history.record(done_task("New two"))
    v = Version(0, 2, 0)
    assigned = history.assign_version(v)
    assert assigned == len(history.entries_for_version(v))
    assert history.unversioned_entries() == []
    assert list(history.entries_by_version()) == [Version(0, 1, 0), v]
    assert history.assign_version(Version(0, 3, 0)) == 0
    between = history.entries_between_versions(Version(0, 1, 0), Version(0, 1, 5))
    assert [e.change.description for e in between] == ["Old"]


def test_entry_dict_round_trip():
    entry = HistoryEntry.from_task(done_task("X", commit="c", version=Version(1, 0, 0)))
    assert HistoryEntry.from_dict(entry.to_dict()) == entry


def test_entry_from_bad_dict():
    with pytest.raises(ValueError):
        HistoryEntry.from_dict({"version": None})