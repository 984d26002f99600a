# tests/test_task_models.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from taskmate.tasks.task_errors import ValidationError
from taskmate.tasks.task_models import (
    PRIORITY_ORDER,
    Task,
    TaskPriority,
    TaskStatus,
    parse_due_date,
    parse_position,
)


def test_render_contains_all_tokens() -> None:
    task = Task.create("Write report", priority=TaskPriority.HIGH, due_date=date(2025, 3, 1))

    assert task.render() == "[PENDING] [HIGH] [Due: 2025-03-01] Write report"
    assert str(task) == task.render()


def test_create_applies_defaults() -> None:
    task = Task.create("Buy milk", today=date(2025, 1, 1))

    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.due_date == date(2025, 1, 8)
    assert not task.completed


def test_create_honours_custom_due_offset() -> None:
    task = Task.create("Call bank", today=date(2025, 1, 30), due_in_days=3)
    assert task.due_date == date(2025, 2, 2)


def test_create_accepts_priority_text() -> None:
    assert Task.create("x", priority="High").priority is TaskPriority.HIGH


@pytest.mark.parametrize("description", ["", "   ", "\n\t"])
def test_create_rejects_blank_description(description: str) -> None:
    with pytest.raises(ValidationError):
        Task.create(description)


def test_create_rejects_bad_priority_and_date() -> None:
    with pytest.raises(ValidationError):
        Task.create("x", priority="urgent")
    with pytest.raises(ValidationError):
        Task.create("x", due_date=datetime(2025, 1, 1, 12, 0))
    with pytest.raises(ValidationError):
        Task.create("x", due_date="2025-01-01")  # type: ignore[arg-type]


def test_description_is_stripped() -> None:
    assert Task.create("  tidy desk  ").description == "tidy desk"


def test_fields_are_read_only() -> None:
    task = Task.create("Immutable", due_date=date(2025, 1, 1))

    with pytest.raises(AttributeError):
        task.description = "changed"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        task.status = TaskStatus.COMPLETED  # type: ignore[misc]
    with pytest.raises(AttributeError):
        task.priority = TaskPriority.HIGH  # type: ignore[misc]

    assert task.description == "Immutable"
    assert task.status is TaskStatus.PENDING


def test_set_status_allows_any_transition() -> None:
    task = Task.create("Loop", due_date=date(2025, 1, 1))

    task.set_status(TaskStatus.COMPLETED)
    assert task.completed
    task.set_status(TaskStatus.PENDING)
    assert task.status is TaskStatus.PENDING
    task.set_status(TaskStatus.PENDING)
    assert task.status is TaskStatus.PENDING
    task.set_status("in-progress")
    assert task.status is TaskStatus.IN_PROGRESS


def test_set_status_rejects_unknown_value() -> None:
    task = Task.create("Keep", due_date=date(2025, 1, 1))

    with pytest.raises(ValidationError):
        task.set_status("finished")
    assert task.status is TaskStatus.PENDING


def test_render_compact_tracks_completion() -> None:
    task = Task.create("Water plants", due_date=date(2025, 1, 1))
    assert task.render_compact() == "[ ] Water plants"

    task.set_status(TaskStatus.COMPLETED)
    assert task.render_compact() == "[X] Water plants"


def test_status_parse_spellings() -> None:
    for raw in ("in_progress", "IN_PROGRESS", "in-progress", "In Progress"):
        assert TaskStatus.parse(raw) is TaskStatus.IN_PROGRESS

    with pytest.raises(ValidationError):
        TaskStatus.parse("done")


def test_priority_ordering_table_is_ascending() -> None:
    assert sorted(TaskPriority, key=lambda p: p.sort_rank) == [
        TaskPriority.LOW,
        TaskPriority.MEDIUM,
        TaskPriority.HIGH,
    ]
    assert set(PRIORITY_ORDER) == set(TaskPriority)


def test_parse_helpers() -> None:
    assert parse_due_date(" 2025-02-28 ") == date(2025, 2, 28)
    assert parse_position("3") == 3

    with pytest.raises(ValidationError):
        parse_due_date("2025-02-30")
    with pytest.raises(ValidationError):
        parse_due_date("tomorrow")
    with pytest.raises(ValidationError):
        parse_position("two")


def test_record_codec_is_strict() -> None:
    task = Task.create("Pay rent", priority=TaskPriority.LOW, due_date=date(2025, 4, 1))
    task.set_status(TaskStatus.IN_PROGRESS)

    record = task.to_record()
    assert record == {
        "description": "Pay rent",
        "status": "in_progress",
        "priority": "low",
        "due_date": "2025-04-01",
    }
    assert Task.from_record(record) == task

    with pytest.raises(ValidationError):
        Task.from_record({**record, "completed": True})
    with pytest.raises(ValidationError):
        Task.from_record({k: v for k, v in record.items() if k != "priority"})
    with pytest.raises(ValidationError):
        Task.from_record({**record, "status": "archived"})
