"""
Task subsystem.

Components:
- task_models.py: Task entity, TaskStatus/TaskPriority and their ordering tables
- task_store.py: ordered in-memory list + whole-file JSON persistence
- task_errors.py: ValidationError / TaskIndexError / StorageError
"""

from .task_errors import StorageError, TaskIndexError, ValidationError
from .task_models import Task, TaskPriority, TaskStatus
from .task_store import SortKey, TaskStore, priority_is, status_is

__all__ = [
    "SortKey",
    "StorageError",
    "Task",
    "TaskIndexError",
    "TaskPriority",
    "TaskStatus",
    "TaskStore",
    "ValidationError",
    "priority_is",
    "status_is",
]
