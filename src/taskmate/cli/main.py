# src/taskmate/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the saved task list, runs the
console REPL, and saves the list again on the way out.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from .bootstrap import create_initial_state, load_tasks, save_tasks

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    load_tasks(state)

    try:
        run_console_loop(state)
    finally:
        if save_tasks(state):
            print("Tasks saved. Goodbye!")
        else:
            print(f"Could not save tasks to {state.task_store.path} (see log).")
        logger.info("Bye.")


if __name__ == "__main__":
    main()
