import subprocess
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from tally.commands.semver import cmd_semver, cmd_tag
from tally.history_storage import HistoryStorage
from tally.paths import TallyError
from tally.task_storage import ListStorage
from tally.tasks import Task, TaskList
from tally.todo_format import serialize
from tally.version import Version

CONFIG = """[preferences]
auto_commit_todo = false
auto_complete_tasks = false

[git]
done_prefix = "done:"
"""


def _project(root, tasks):
    (root / ".tally").mkdir()
    (root / ".tally" / "config.toml").write_text(CONFIG, encoding="utf-8")
    task_list = TaskList.create("demo", Version(0, 1, 0))
    task_list.tasks.extend(tasks)
    (root / "TODO.md").write_text(serialize(task_list), encoding="utf-8")


def _done(description):
    return Task(description, completed=True,
                completed_at_time=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_semver_assigns_version(project, capsys):
    _project(project, [_done("Ship it"), Task("Still open")])
    cmd_semver("v1.2.0", summary=True)
    storage = ListStorage(project / "TODO.md")
    assert storage.project_version == Version(1, 2, 0)
    versions = {t.description: t.completed_at_version for t in storage.tasks}
    assert versions == {"Ship it": Version(1, 2, 0), "Still open": None}
    history = HistoryStorage(project / ".tally" / "history.json")
    assert [e.change.description for e in history.entries_for_version(Version(1, 2, 0))] == [
        "Ship it"
    ]
    assert "  • Ship it" in capsys.readouterr().out


def test_semver_dry_run_sets_project_version_only(project, capsys):
    _project(project, [_done("Ship it")])
    cmd_semver("2.0", dry_run=True)
    storage = ListStorage(project / "TODO.md")
    assert storage.project_version == Version(2, 0, 0)
    assert storage.tasks[0].completed_at_version is None
    assert "  [x] Ship it" in capsys.readouterr().out


def test_semver_nothing_to_do(project, capsys):
    _project(project, [Task("Open")])
    cmd_semver("0.3.0")
    assert "Nothing to do" in capsys.readouterr().out
    assert not (project / ".tally" / "history.json").exists()


def test_semver_invalid_version(project):
    _project(project, [])
    with pytest.raises(ValueError):
        cmd_semver("not.a.version")


def test_tag_dry_run(project, capsys):
    _project(project, [_done("Ship it")])
    cmd_tag("1.0.0", dry_run=True)
    assert "Would create git tag: v1.0.0 — Release v1.0.0" in capsys.readouterr().out


def test_tag_runs_git(project, capsys):
    _project(project, [_done("Ship it")])
    ok = subprocess.CompletedProcess([], 0, stdout=b"", stderr=b"")
    with patch("subprocess.run", return_value=ok) as run:
        cmd_tag("v1.0.0", message="First stable release")
    assert run.call_args.args[0] == ["git", "tag", "-a", "v1.0.0", "-m", "First stable release"]
    assert "✓ Created git tag: v1.0.0" in capsys.readouterr().out


def test_tag_failure_raises(project):
    _project(project, [])
    failed = subprocess.CompletedProcess([], 1, stdout=b"", stderr=b"tag exists")
    with patch("subprocess.run", return_value=failed):
        with pytest.raises(TallyError, match="tag exists"):
            cmd_tag("v1.0.0")