from tally.commands.init import cmd_init
from tally.todo_format import deserialize
from tally.version import Version


def test_init_creates_project(tmp_path, monkeypatch, capsys):
    root = tmp_path / "myproj"
    root.mkdir()
    monkeypatch.chdir(root)
    cmd_init()
    assert (root / ".tally").is_dir()
    assert (root / ".tally" / "hooks").is_dir()
    assert (root / ".tally" / "history.json").read_bytes() == b""
    task_list = deserialize((root / "TODO.md").read_text(encoding="utf-8"))
    assert task_list.project_name == "myproj"
    assert task_list.project_version == Version(0, 1, 0)
    assert task_list.tasks == []
    out = capsys.readouterr().out
    assert "Created TODO.md" in out


def test_init_twice_reports_existing(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".tally").mkdir()
    cmd_init()
    assert not (tmp_path / "TODO.md").exists()
    assert capsys.readouterr().out == (
        "Tally project already initialized in this directory\n"
    )