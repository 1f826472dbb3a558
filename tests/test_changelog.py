from datetime import datetime, timezone

import pytest

from tally.commands.changelog import cmd_changelog
from tally.config_storage import ConfigStorage
from tally.history_storage import HistoryStorage
from tally.paths import ProjectPaths
from tally.tasks import Task, TaskList
from tally.todo_format import serialize
from tally.version import Version


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    ProjectPaths.init_here(tmp_path)
    ConfigStorage(tmp_path / ".tally" / "config.toml")
    (tmp_path / "TODO.md").write_text(
        serialize(TaskList.create("demo", Version(0, 1, 0))), encoding="utf-8"
    )
    return ProjectPaths.discover(tmp_path)


def _record(paths, description, version):
    task = Task(
        description,
        completed=True,
        completed_at_time=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        completed_at_version=version,
    )
    HistoryStorage(paths.history_file).record(task)


def test_empty_history(project, capsys):
    cmd_changelog()
    assert capsys.readouterr().out == "No versioned entries found in history.\n"


def test_releases_newest_first(project, capsys):
    _record(project, "First change", Version(0, 1, 0))
    _record(project, "Second change", Version(0, 2, 0))
    cmd_changelog()
    out = capsys.readouterr().out
    assert out.startswith("# Changelog — demo\n")
    assert out.index("## 0.2.0") < out.index("## 0.1.0")
    assert "- First change" in out
    assert "- Second change" in out


def test_range_filter(project, capsys):
    _record(project, "First change", Version(0, 1, 0))
    _record(project, "Second change", Version(0, 2, 0))
    cmd_changelog(start="v0.2.0")
    out = capsys.readouterr().out
    assert "Second change" in out
    assert "First change" not in out


def test_range_with_no_releases(project, capsys):
    _record(project, "First change", Version(0, 1, 0))
    cmd_changelog(start="1.0.0", end="2.0.0")
    assert capsys.readouterr().out == "No releases found in the specified range.\n"


def test_invalid_version(project):
    with pytest.raises(ValueError):
        cmd_changelog(start="abc")