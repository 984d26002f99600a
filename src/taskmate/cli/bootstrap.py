# src/taskmate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the TaskStore and routes its events into logging,
- loads/saves the task file around a session.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_errors import StorageError
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

# Store events land here (and so in taskmanager.log).
events_logger = logging.getLogger("taskmate.tasks.events")


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(
        settings.tasks_path,
        due_in_days=settings.due_in_days,
        listener=events_logger.info,
    )
    return AppState(settings=settings, task_store=store)


def _quarantine_path(path: Path) -> Path:
    candidate = path.with_name(path.name + ".bad")
    n = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.bad{n}")
        n += 1
    return candidate


def load_tasks(state: AppState) -> int:
    """
    Load the saved task list; a broken file means starting empty.

    The unreadable file is moved aside first so the exit save cannot
    overwrite it.
    """
    store = state.task_store
    try:
        count = store.load_all()
    except StorageError:
        logger.exception("Failed to load tasks from %s; starting with an empty list.", store.path)
        if store.path.exists():
            bad_path = _quarantine_path(store.path)
            try:
                os.replace(store.path, bad_path)
            except OSError:
                logger.exception("Could not move unreadable task file %s aside", store.path)
            else:
                logger.warning("Unreadable task file kept as %s", bad_path)
        return 0
    logger.debug("Task list ready: %d tasks", count)
    return count


def save_tasks(state: AppState) -> bool:
    store = state.task_store
    try:
        store.save_all()
    except StorageError:
        logger.exception("Failed to save tasks to %s", store.path)
        return False
    return True
