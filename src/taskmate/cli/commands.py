# src/taskmate/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_errors import StorageError, ValidationError
from ..tasks.task_models import TaskPriority, TaskStatus, parse_due_date, parse_position
from ..tasks.task_store import SortKey, priority_is, status_is
from .bootstrap import save_tasks

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task errors raised by handlers are turned into "Error: ..." replies.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Error: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except (ValidationError, IndexError, StorageError) as e:
            logger.info("Command /%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Save and quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _autosave(state: AppState, reply: str) -> str:
    if not state.autosave:
        return reply
    if save_tasks(state):
        return reply
    return reply + "\n(autosave failed, see log)"


def _format_list(state: AppState, *, compact: bool = False) -> str:
    lines = []
    for position, task in state.task_store.list():
        text = task.render_compact() if compact else task.render()
        lines.append(f"{position}. {text}")
    if not lines:
        return "No tasks found."
    return "\n".join(lines)


def _parse_add_args(args: list[str]) -> tuple[str, str | None, str | None]:
    words: list[str] = []
    priority: str | None = None
    due: str | None = None

    it = iter(args)
    for arg in it:
        if arg in ("-p", "--priority"):
            priority = next(it, None)
            if priority is None:
                raise ValidationError(f"Missing value for {arg}.")
        elif arg in ("-d", "--due"):
            due = next(it, None)
            if due is None:
                raise ValidationError(f"Missing value for {arg}.")
        else:
            words.append(arg)
    return " ".join(words), priority, due


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <description...> [-p low|medium|high] [-d YYYY-MM-DD]
    """
    description, priority, due = _parse_add_args(args)
    if not description.strip():
        return "Usage: /add <description> [-p low|medium|high] [-d YYYY-MM-DD]"

    task = state.task_store.create_task(
        description,
        priority=TaskPriority.parse(priority) if priority is not None else None,
        due_date=parse_due_date(due) if due is not None else None,
    )
    position = state.task_store.add(task)
    return _autosave(state, f"Task added at #{position}: {task.render()}")


def cmd_list(state: AppState, args: list[str]) -> str:
    compact = bool(args) and args[0].lower() in ("compact", "short", "-c")
    return _format_list(state, compact=compact)


def cmd_status(state: AppState, args: list[str]) -> str:
    """
    /status <N> <pending|in_progress|completed>
    """
    if len(args) < 2:
        return "Usage: /status <N> <pending|in_progress|completed>"
    position = parse_position(args[0])
    new_status = TaskStatus.parse(" ".join(args[1:]))
    task = state.task_store.update_status(position, new_status)
    return _autosave(state, f"Task status updated: {position}. {task.render()}")


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <N>"
    position = parse_position(args[0])
    task = state.task_store.mark_completed(position)
    return _autosave(state, f"Task marked as completed: {position}. {task.render_compact()}")


def cmd_remove(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /remove <N>"
    position = parse_position(args[0])
    task = state.task_store.remove(position)
    return _autosave(state, f"Task removed: {task.render()}")


def cmd_sort(state: AppState, args: list[str]) -> str:
    """
    /sort due       -> earliest due date first
    /sort priority  -> LOW, MEDIUM, HIGH
    """
    if len(args) != 1:
        return "Usage: /sort due|priority"
    state.task_store.sort_by(SortKey.parse(args[0]))
    return _autosave(state, _format_list(state))


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter status <pending|in_progress|completed>
    /filter priority <low|medium|high>
    """
    if len(args) < 2:
        return "Usage: /filter status <s> | /filter priority <p>"

    field = args[0].lower()
    value = " ".join(args[1:])
    if field == "status":
        predicate = status_is(value)
    elif field == "priority":
        predicate = priority_is(value)
    else:
        return "Usage: /filter status <s> | /filter priority <p>"

    lines = [task.render() for task in state.task_store.filter_by(predicate)]
    if not lines:
        return "No matching tasks."
    return "\n".join(lines)


def cmd_save(state: AppState, args: list[str]) -> str:
    count = state.task_store.save_all()
    return f"Tasks saved: {count} to {state.task_store.path}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <text> [-p low|medium|high] [-d YYYY-MM-DD]."
)
registry.register("list", cmd_list, help_text="List tasks: /list [compact].", aliases=["ls"])
registry.register(
    "status", cmd_status, help_text="Update status: /status <N> pending|in_progress|completed."
)
registry.register("done", cmd_done, help_text="Mark a task as completed: /done <N>.")
registry.register("remove", cmd_remove, help_text="Remove a task: /remove <N>.", aliases=["rm"])
registry.register("sort", cmd_sort, help_text="Sort tasks: /sort due | /sort priority.")
registry.register(
    "filter", cmd_filter, help_text="Filter tasks: /filter status <s> | /filter priority <p>."
)
registry.register("save", cmd_save, help_text="Save tasks now.")
