# src/taskmate/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import os
from collections.abc import Callable, Iterator
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Any

from .task_errors import StorageError, TaskIndexError, ValidationError
from .task_models import DEFAULT_DUE_IN_DAYS, Task, TaskPriority, TaskStatus

BLOB_FORMAT = "taskmate.tasks"
BLOB_VERSION = 1

EventListener = Callable[[str], None]
TaskPredicate = Callable[[Task], bool]


class SortKey(StrEnum):
    DUE_DATE = "due_date"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, raw: str | SortKey) -> SortKey:
        if isinstance(raw, cls):
            return raw
        aliases = {"due": cls.DUE_DATE, "date": cls.DUE_DATE, "prio": cls.PRIORITY}
        token = str(raw).strip().lower().replace("-", "_")
        if token in aliases:
            return aliases[token]
        try:
            return cls(token)
        except ValueError:
            raise ValidationError(f"Invalid sort key: {raw!r}. Use due_date or priority.") from None


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.DUE_DATE: lambda t: t.due_date,
    SortKey.PRIORITY: lambda t: t.priority.sort_rank,
}


def status_is(status: TaskStatus | str) -> TaskPredicate:
    wanted = TaskStatus.parse(status)
    return lambda task: task.status is wanted


def priority_is(priority: TaskPriority | str) -> TaskPredicate:
    wanted = TaskPriority.parse(priority)
    return lambda task: task.priority is wanted


class TaskStore:
    """
    Ordered in-memory task list with whole-collection JSON persistence.

    Positions are 1-based and recomputed from the current order; they are
    not stable identifiers. Persistence is explicit: nothing touches the
    disk outside save_all() / load_all().

    The store never logs. Events are reported as plain text to `listener`
    (if any); listener failures are ignored.
    """

    def __init__(
        self,
        path: str | Path = "tasks.json",
        *,
        due_in_days: int = DEFAULT_DUE_IN_DAYS,
        listener: EventListener | None = None,
    ) -> None:
        self._path = Path(path)
        self._due_in_days = int(due_in_days)
        self._listener = listener
        self._tasks: list[Task] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def due_in_days(self) -> int:
        return self._due_in_days

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    # ---- low-level helpers ----

    def _emit(self, message: str) -> None:
        if self._listener is None:
            return
        with contextlib.suppress(Exception):
            self._listener(message)

    def _index(self, position: int) -> int:
        if isinstance(position, bool) or not isinstance(position, int):
            raise TaskIndexError(position, len(self._tasks))
        if position < 1 or position > len(self._tasks):
            raise TaskIndexError(position, len(self._tasks))
        return position - 1

    # ---- public API ----

    def create_task(
        self,
        description: str,
        *,
        priority: TaskPriority | str | None = None,
        due_date: date | None = None,
    ) -> Task:
        """Build (but do not add) a task using this store's due-date offset."""
        return Task.create(
            description,
            priority=priority,
            due_date=due_date,
            due_in_days=self._due_in_days,
        )

    def add(self, task: Task) -> int:
        if not isinstance(task, Task):
            raise TypeError(f"expected Task, got {type(task).__name__}")
        self._tasks.append(task)
        position = len(self._tasks)
        self._emit(f"Task added: #{position} {task.render()}")
        return position

    def list(self) -> Iterator[tuple[int, Task]]:
        yield from enumerate(self._tasks, start=1)

    def get(self, position: int) -> Task:
        return self._tasks[self._index(position)]

    def update_status(self, position: int, new_status: TaskStatus | str) -> Task:
        task = self._tasks[self._index(position)]
        task.set_status(new_status)
        self._emit(f"Task status updated: #{position} {task.render()}")
        return task

    def mark_completed(self, position: int) -> Task:
        return self.update_status(position, TaskStatus.COMPLETED)

    def remove(self, position: int) -> Task:
        task = self._tasks.pop(self._index(position))
        self._emit(f"Task removed: #{position} {task.render()}")
        return task

    def sort_by(self, key: SortKey | str) -> None:
        """Stable ascending sort. Priority order is LOW < MEDIUM < HIGH."""
        sort_key = SortKey.parse(key)
        self._tasks.sort(key=_SORT_KEYS[sort_key])
        self._emit(f"Tasks sorted by {sort_key.value}")

    def filter_by(self, predicate: TaskPredicate) -> Iterator[Task]:
        for task in self._tasks:
            if predicate(task):
                yield task

    # ---- persistence ----

    def _encode(self) -> str:
        blob = {
            "format": BLOB_FORMAT,
            "version": BLOB_VERSION,
            "tasks": [t.to_record() for t in self._tasks],
        }
        return json.dumps(blob, ensure_ascii=False, indent=2)

    def _decode(self, raw: str) -> list[Task]:
        try:
            blob = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise StorageError(f"Task file is not valid JSON: {exc}", self._path) from exc

        if not isinstance(blob, dict):
            raise StorageError("Task file has an unexpected shape.", self._path)
        version = blob.get("version")
        if blob.get("format") != BLOB_FORMAT or type(version) is not int or version != BLOB_VERSION:
            raise StorageError(
                f"Unsupported task file format={blob.get('format')!r} "
                f"version={version!r}.",
                self._path,
            )
        records = blob.get("tasks")
        if not isinstance(records, list):
            raise StorageError("Task file has no task list.", self._path)

        tasks: list[Task] = []
        for i, record in enumerate(records, start=1):
            try:
                tasks.append(Task.from_record(record))
            except ValidationError as exc:
                raise StorageError(f"Bad task record #{i}: {exc}", self._path) from exc
        return tasks

    def save_all(self) -> int:
        """
        Write the whole collection (temp file + atomic replace).

        On failure the in-memory tasks are left as they are.
        """
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            payload = self._encode()
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError) as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            self._emit(f"Error saving tasks to {self._path}: {exc}")
            raise StorageError(f"Could not save tasks to {self._path}: {exc}", self._path) from exc

        count = len(self._tasks)
        self._emit(f"Tasks saved: {count} to {self._path}")
        return count

    def load_all(self) -> int:
        """
        Replace the collection with the stored one.

        A missing file means "no tasks yet". Any other failure leaves the
        store empty and raises StorageError.
        """
        if not self._path.exists():
            self._tasks = []
            return 0

        try:
            raw = self._path.read_text("utf-8")
            tasks = self._decode(raw)
        except StorageError as exc:
            self._tasks = []
            self._emit(f"Error loading tasks from {self._path}: {exc}")
            raise
        except (OSError, UnicodeDecodeError) as exc:
            self._tasks = []
            self._emit(f"Error loading tasks from {self._path}: {exc}")
            raise StorageError(f"Could not read tasks from {self._path}: {exc}", self._path) from exc

        self._tasks = tasks
        self._emit(f"Tasks loaded: {len(tasks)} from {self._path}")
        return len(tasks)
