# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from taskmate.logging_setup import setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_task_log(tmp_path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")
    first_file_handler = next(
        h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)
    )
    setup_logging(log_dir=tmp_path / "logs")

    assert len(logging.getLogger().handlers) == 2
    assert first_file_handler not in logging.getLogger().handlers
    assert first_file_handler.stream is None

    logging.getLogger("taskmate.tasks.events").info("Task added: #1 demo")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file.name == "taskmanager.log"
    assert "Task added: #1 demo" in log_file.read_text("utf-8")


def test_console_filter_hides_third_party_noise(tmp_path, restore_root_logging) -> None:
    setup_logging(log_dir=tmp_path)
    console = next(
        h for h in logging.getLogger().handlers if not isinstance(h, logging.FileHandler)
    )

    ours = logging.LogRecord("taskmate.cli.main", logging.INFO, __file__, 1, "hi", None, None)
    noisy = logging.LogRecord("urllib3", logging.WARNING, __file__, 1, "meh", None, None)

    assert console.filter(ours)
    assert not console.filter(noisy)


def test_console_filter_hides_python_warnings_below_error(tmp_path, restore_root_logging) -> None:
    setup_logging(log_dir=tmp_path)
    console = next(
        h for h in logging.getLogger().handlers if not isinstance(h, logging.FileHandler)
    )

    warning = logging.LogRecord("py.warnings", logging.WARNING, __file__, 1, "w", None, None)
    error = logging.LogRecord("py.warnings", logging.ERROR, __file__, 1, "e", None, None)

    assert not console.filter(warning)
    assert console.filter(error)
