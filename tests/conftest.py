# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmate.core.state import AppState
from taskmate.tasks.task_models import Task, TaskPriority
from taskmate.tasks.task_store import TaskStore

from .fakes import RecordingListener


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We use a SimpleNamespace rather than the real config module so tests
    never depend on the developer's environment or .env file.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="taskmate-test",
        log_level="DEBUG",
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.json",
        log_dir=tmp_path / "logs",
        due_in_days=7,
        autosave=False,
    )


@pytest.fixture()
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture()
def store(settings: SimpleNamespace, listener: RecordingListener) -> TaskStore:
    return TaskStore(settings.tasks_path, due_in_days=settings.due_in_days, listener=listener)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)


@pytest.fixture()
def abc_store(store: TaskStore) -> TaskStore:
    """Three tasks A, B, C with distinct priorities and due dates."""
    store.add(Task.create("A", priority=TaskPriority.HIGH, due_date=date(2025, 3, 1)))
    store.add(Task.create("B", priority=TaskPriority.LOW, due_date=date(2025, 1, 1)))
    store.add(Task.create("C", priority=TaskPriority.MEDIUM, due_date=date(2025, 2, 1)))
    return store
