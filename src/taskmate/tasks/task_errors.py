# src/taskmate/tasks/task_errors.py

from __future__ import annotations

from pathlib import Path


class ValidationError(ValueError):
    """Bad task input: empty description, unknown status/priority, malformed date."""


class TaskIndexError(IndexError):
    """A 1-based position outside the store's current bounds."""

    def __init__(self, position: int, size: int) -> None:
        self.position = position
        self.size = size
        if size:
            msg = f"Invalid task number {position}: expected 1..{size}."
        else:
            msg = f"Invalid task number {position}: there are no tasks."
        super().__init__(msg)


class StorageError(Exception):
    """Reading or writing the task blob failed, or the blob has the wrong shape."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)
