"""The ``init`` command."""

from __future__ import annotations

from pathlib import Path

from ..paths import ProjectPaths
from ..tasks import TaskList
from ..todo_format import serialize
from ..version import Version


def cmd_init() -> None:
    """Create .tally/, an empty history and a fresh TODO.md in the cwd."""
    current_dir = Path.cwd()

    if (current_dir / ".tally").exists():
        print("Tally project already initialized in this directory")
        return

    print("Initializing tally project...")

    paths = ProjectPaths.init_here(current_dir)
    project_name = current_dir.name or "Untitled"

    paths.history_file.write_bytes(b"")

    initial_list = TaskList.create(project_name, Version(0, 1, 0))
    paths.todo_file.write_text(serialize(initial_list), encoding="utf-8")

    print("Created .tally/ directory structure")
    print("Created .tally/history.json")
    print("Created TODO.md")
    print()
    print("Tally initialized! Try:")
    print('  tally add "My first task"')
    print("  tally list")