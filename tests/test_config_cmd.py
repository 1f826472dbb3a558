import pytest

from tally.commands.config_cmd import cmd_config_get, cmd_config_list, cmd_config_set
from tally.config_storage import ConfigStorage
from tally.paths import ProjectPaths, TallyError


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    ProjectPaths.init_here(tmp_path)
    ConfigStorage(tmp_path / ".tally" / "config.toml")
    return ProjectPaths.discover(tmp_path)


def test_set_then_get(project, capsys):
    cmd_config_set("git.done_prefix", "finished:")
    cmd_config_get("git.done_prefix")
    out = capsys.readouterr().out.splitlines()
    assert out == ["✓ Set git.done_prefix = finished:", "finished:"]


def test_set_boolean_is_stored(project):
    cmd_config_set("preferences.auto_commit_todo", "true")
    assert ConfigStorage(project.config_file).config.preferences.auto_commit_todo is True


def test_get_non_string_fails(project):
    with pytest.raises(TallyError, match="Failed to deserialize"):
        cmd_config_get("preferences.auto_commit_todo")


def test_get_unknown_key(project):
    with pytest.raises(TallyError, match="Key path not found"):
        cmd_config_get("nope.missing")


def test_list_shows_defaults(project, capsys):
    cmd_config_list()
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Configuration:"
    assert "  git.done_prefix: done:" in lines
    assert "  preferences.auto_commit_todo: false" in lines
    assert len(lines) == 4