from datetime import datetime, timezone

import pytest

from tally.tasks import Task, TaskList
from tally.todo_format import TodoFormatError, deserialize, serialize
from tally.version import Priority, Version


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _list(tasks):
    return TaskList(
        project_name="demo",
        project_version=Version(0, 1, 0),
        created_at=_utc(2024, 1, 2),
        modified_at=_utc(2024, 1, 3),
        tasks=tasks,
    )


def test_serialize_pins_layout():
    task = Task(
        "Write docs",
        priority=Priority.HIGH,
        tags=["docs"],
        created_at_time=_utc(2024, 1, 2, 10, 30),
    )
    expected = (
        "# TODO — demo v0.1.0\n\n"
        "@created: 2024-01-02\n"
        "@modified: 2024-01-03\n"
        "\n## Tasks\n\n"
        "- [ ] Write docs (high) #docs\n"
        "      @created 2024-01-02 10:30\n"
        "\n"
    )
    assert serialize(_list([task])) == expected


def test_round_trip_preserves_tasks():
    open_a = Task(
        "Fix parser",
        priority=Priority.LOW,
        tags=["bug", "parser"],
        created_at_time=_utc(2024, 1, 2, 9, 0),
    )
    open_b = Task(
        "Add feature",
        created_at_time=_utc(2024, 1, 2, 11, 15),
        created_at_version=Version(0, 1, 0),
        created_at_commit="1234abc",
    )
    done = Task(
        "Ship release",
        priority=Priority.HIGH,
        tags=["release"],
        completed=True,
        created_at_time=_utc(2024, 1, 1, 8, 0),
        completed_at_time=_utc(2024, 1, 3, 17, 45),
        completed_at_version=Version(0, 2, 0),
        completed_at_commit="deadbee",
    )
    original = _list([done, open_b, open_a])

    parsed = deserialize(serialize(original))

    assert parsed.project_name == "demo"
    assert parsed.project_version == Version(0, 1, 0)
    assert parsed.created_at == _utc(2024, 1, 2)
    assert parsed.modified_at == _utc(2024, 1, 3)
    assert parsed.tasks == [open_a, open_b, done]


def test_serialize_is_stable_after_round_trip():
    tasks = [
        Task("One", created_at_time=_utc(2024, 1, 2, 9, 0)),
        Task(
            "Two",
            completed=True,
            created_at_time=_utc(2024, 1, 2, 9, 5),
            completed_at_time=_utc(2024, 1, 2, 10, 0),
        ),
    ]
    text = serialize(_list(tasks))
    assert serialize(deserialize(text)) == text


def test_completed_section_omitted_without_completed_tasks():
    text = serialize(_list([Task("Only", created_at_time=_utc(2024, 1, 2, 9, 0))]))
    assert "## Completed" not in text
    assert "## Tasks" in text


def test_incomplete_tasks_sorted_by_creation_time():
    later = Task("Later", created_at_time=_utc(2024, 2, 1, 12, 0))
    earlier = Task("Earlier", created_at_time=_utc(2024, 1, 1, 12, 0))
    parsed = deserialize(serialize(_list([later, earlier])))
    assert [t.description for t in parsed.tasks] == ["Earlier", "Later"]


def test_completed_tasks_sorted_by_completion_time():
    first = Task(
        "Finished second",
        completed=True,
        created_at_time=_utc(2024, 1, 1, 0, 0),
        completed_at_time=_utc(2024, 3, 1, 0, 0),
    )
    second = Task(
        "Finished first",
        completed=True,
        created_at_time=_utc(2024, 1, 2, 0, 0),
        completed_at_time=_utc(2024, 2, 1, 0, 0),
    )
    parsed = deserialize(serialize(_list([first, second])))
    assert [t.description for t in parsed.tasks] == ["Finished first", "Finished second"]


def test_deserialize_hyphen_header_and_markers():
    content = (
        "# TODO - my project v1.2\n"
        "\n"
        "@created: 2024-05-01\n"
        "@modified: 2024-05-02\n"
        "\n"
        "## Tasks\n"
        "\n"
        "- [X] Ship it (medium) #rel #v2\n"
        "      @created 2024-05-01 08:00\n"
        "      @completed 2024-05-02 09:30\n"
    )
    parsed = deserialize(content)
    assert parsed.project_name == "my project"
    assert parsed.project_version == Version(1, 2, 0)
    [task] = parsed.tasks
    assert task.description == "Ship it"
    assert task.completed is True
    assert task.priority is Priority.MEDIUM
    assert task.tags == ["rel", "v2"]
    assert task.completed_at_time == _utc(2024, 5, 2, 9, 30)


def test_deserialize_without_sections_has_no_tasks():
    content = "# TODO — demo v0.1.0\n@created: 2024-01-02\n@modified: 2024-01-03\n"
    assert deserialize(content).tasks == []


_HEAD = "# TODO — demo v0.1.0\n@created: 2024-01-02\n@modified: 2024-01-03\n## Tasks\n"


@pytest.mark.parametrize(
    "content",
    [
        "",
        "# Not a todo\n",
        "# TODO — demo\n@created: 2024-01-02\n@modified: 2024-01-03\n",
        "# TODO — demo v1.x\n@created: 2024-01-02\n@modified: 2024-01-03\n",
        "# TODO — demo v0.1.0\n@modified: 2024-01-03\n",
        "# TODO — demo v0.1.0\n@created: 2024-01-02\n",
        "# TODO — demo v0.1.0\n@created: someday\n@modified: 2024-01-03\n",
        _HEAD + "- [ ] No timestamp\n",
        _HEAD + "- [ ] #onlytag (high)\n      @created 2024-01-02 10:00\n",
        _HEAD + "- [ ] Bad time\n      @created 2024-01-02\n",
        _HEAD + "- [x] Bad version\n      @created 2024-01-02 10:00\n"
        "      @completed_version nope\n",
    ],
)
def test_deserialize_rejects_malformed_content(content):
    with pytest.raises(TodoFormatError):
        deserialize(content)