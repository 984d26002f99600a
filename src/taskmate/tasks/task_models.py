# src/taskmate/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Any

from .task_errors import ValidationError

DEFAULT_DUE_IN_DAYS = 7


def _normalize_token(raw: str) -> str:
    return raw.strip().lower().replace("-", "_").replace(" ", "_")


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def sort_rank(self) -> int:
        return STATUS_ORDER[self]

    @classmethod
    def parse(cls, raw: str | TaskStatus) -> TaskStatus:
        """
        Accept "in_progress", "IN_PROGRESS", "in-progress" or "in progress".
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValidationError(f"Invalid status: {raw!r}")
        try:
            return cls(_normalize_token(raw))
        except ValueError:
            choices = ", ".join(s.name for s in cls)
            raise ValidationError(f"Invalid status: {raw!r}. Expected one of: {choices}.") from None


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def sort_rank(self) -> int:
        return PRIORITY_ORDER[self]

    @classmethod
    def parse(cls, raw: str | TaskPriority) -> TaskPriority:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValidationError(f"Invalid priority: {raw!r}")
        try:
            return cls(_normalize_token(raw))
        except ValueError:
            choices = ", ".join(p.name for p in cls)
            raise ValidationError(f"Invalid priority: {raw!r}. Expected one of: {choices}.") from None


# Total orderings used by sorting. Ascending rank == ascending severity/progress.
STATUS_ORDER: dict[TaskStatus, int] = {
    TaskStatus.PENDING: 0,
    TaskStatus.IN_PROGRESS: 1,
    TaskStatus.COMPLETED: 2,
}

PRIORITY_ORDER: dict[TaskPriority, int] = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
}


def parse_due_date(raw: str) -> date:
    """Parse an ISO calendar date (YYYY-MM-DD)."""
    try:
        return date.fromisoformat(raw.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid due date: {raw!r}. Use YYYY-MM-DD.") from None


def parse_position(raw: str) -> int:
    try:
        return int(raw.strip(), 10)
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid task number: {raw!r}") from None


_LOCKED_FIELDS = frozenset({"description", "status", "priority", "due_date"})
_RECORD_KEYS = frozenset({"description", "status", "priority", "due_date"})


@dataclass(slots=True)
class Task:
    """
    One unit of work.

    Fields are fixed once the task is built; the only mutation is
    set_status(). Equality is field-wise.
    """

    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date

    def __post_init__(self) -> None:
        if not isinstance(self.description, str) or not self.description.strip():
            raise ValidationError("Task description must not be empty.")
        if not isinstance(self.status, TaskStatus):
            raise ValidationError(f"Invalid status: {self.status!r}")
        if not isinstance(self.priority, TaskPriority):
            raise ValidationError(f"Invalid priority: {self.priority!r}")
        if not isinstance(self.due_date, date) or isinstance(self.due_date, datetime):
            raise ValidationError(f"Invalid due date: {self.due_date!r}")
        object.__setattr__(self, "description", self.description.strip())

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _LOCKED_FIELDS and hasattr(self, name):
            raise AttributeError(f"Task.{name} is read-only")
        object.__setattr__(self, name, value)

    @classmethod
    def create(
        cls,
        description: str,
        *,
        priority: TaskPriority | str | None = None,
        due_date: date | None = None,
        today: date | None = None,
        due_in_days: int = DEFAULT_DUE_IN_DAYS,
    ) -> Task:
        """
        Build a new PENDING task.

        priority defaults to MEDIUM; due_date defaults to today + due_in_days.
        """
        prio = TaskPriority.MEDIUM if priority is None else TaskPriority.parse(priority)
        if due_date is None:
            due_date = (today or date.today()) + timedelta(days=int(due_in_days))
        return cls(
            description=description,
            status=TaskStatus.PENDING,
            priority=prio,
            due_date=due_date,
        )

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def set_status(self, new_status: TaskStatus | str) -> None:
        status = TaskStatus.parse(new_status)
        object.__setattr__(self, "status", status)

    def render(self) -> str:
        return (
            f"[{self.status.name}] [{self.priority.name}] "
            f"[Due: {self.due_date.isoformat()}] {self.description}"
        )

    def render_compact(self) -> str:
        return ("[X] " if self.completed else "[ ] ") + self.description

    def __str__(self) -> str:
        return self.render()

    # ---- record codec ----

    def to_record(self) -> dict[str, str]:
        return {
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Task:
        if not isinstance(record, Mapping):
            raise ValidationError(f"Task record must be an object, got {type(record).__name__}")
        keys = set(record.keys())
        if keys != _RECORD_KEYS:
            missing = sorted(_RECORD_KEYS - keys)
            extra = sorted(keys - _RECORD_KEYS)
            raise ValidationError(f"Task record shape mismatch (missing={missing}, extra={extra})")
        if not isinstance(record["due_date"], str):
            raise ValidationError(f"Invalid due date: {record['due_date']!r}")
        return cls(
            description=record["description"],
            status=TaskStatus.parse(record["status"]),
            priority=TaskPriority.parse(record["priority"]),
            due_date=parse_due_date(record["due_date"]),
        )
