# src/togo/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import re
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import ConflictError, QuotaExceededError, QuotaUnknownError, TogoError
from ..tasks import task_api
from ..tasks.task_store import MAX_TODO_LIMIT

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def describe_error(exc: TogoError) -> str:
    """One-line, user-facing rendering of a domain error."""
    if isinstance(exc, QuotaExceededError):
        return (
            f"Daily limit reached: {exc.count}/{exc.max_todo} tasks on {exc.date}. "
            "Task not created."
        )
    if isinstance(exc, QuotaUnknownError):
        return "Could not read your daily limit. Task not created."
    if isinstance(exc, ConflictError):
        return "That user id is already taken."
    return f"Storage error: {exc}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    user = state.current_user or "(not logged in)"
    settings = state.settings
    return (
        "Status:\n"
        f"  User: {user}\n"
        f"  Environment: {getattr(settings, 'environment', '?')}\n"
        f"  Database: {getattr(settings, 'db_path', '?')}\n"
        f"  Default daily limit: {getattr(settings, 'default_max_todo', '?')}"
    )


def cmd_register(state: AppState, args: list[str]) -> str:
    """
    /register <user> <password>        -> default daily limit
    /register <user> <password> <max>  -> explicit daily limit
    """
    if len(args) not in (2, 3):
        return "Usage: /register <user> <password> [max_per_day]"

    user_id, password = args[0], args[1]
    max_todo: int | None = None
    if len(args) == 3:
        try:
            max_todo = int(args[2])
        except ValueError:
            return "max_per_day must be a whole number."
        if max_todo < 0:
            return "max_per_day must be >= 0."
        if max_todo > MAX_TODO_LIMIT:
            return f"max_per_day must be <= {MAX_TODO_LIMIT}."

    try:
        effective = task_api.register_user(state, user_id, password, max_todo)
    except TogoError as exc:
        return describe_error(exc)

    return f"User {user_id} registered (daily limit: {effective}). Use /login to sign in."


def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <user> <password>"
    if task_api.login(state, args[0], args[1]):
        return f"Logged in as {args[0]}."
    return "Invalid user id or password."


def cmd_logout(state: AppState, args: list[str]) -> str:
    if not state.current_user:
        return "Not logged in."
    task_api.logout(state)
    return "Logged out."


def _split_date(args: list[str]) -> tuple[str | None, list[str]]:
    if args and args[0].startswith("@") and _DATE_RE.match(args[0][1:]):
        return args[0][1:], args[1:]
    return None, args


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <text>               -> task for today
    /add @YYYY-MM-DD <text>   -> task for that day
    """
    if not state.current_user:
        return "Log in first: /login <user> <password>"

    date, rest = _split_date(args)
    content = " ".join(rest).strip()
    if not content:
        return "Usage: /add [@YYYY-MM-DD] <text>"

    if emit:
        with contextlib.suppress(Exception):
            emit("[TASK] Checking your daily limit...")

    try:
        task = task_api.create_task_for_current_user(state, content, date)
    except TogoError as exc:
        return describe_error(exc)

    return f"Task #{task.id} added for {task.created_date}: {task.content}"


def cmd_tasks(state: AppState, args: list[str]) -> str:
    if not state.current_user:
        return "Log in first: /login <user> <password>"

    day = args[0] if args else task_api.today()
    if not _DATE_RE.match(day):
        return "Usage: /tasks [YYYY-MM-DD]"

    try:
        tasks = task_api.list_tasks(state, day)
    except TogoError as exc:
        return describe_error(exc)

    if not tasks:
        return f"No tasks on {day}."
    lines = [f"Tasks on {day}:"]
    for i, t in enumerate(tasks, start=1):
        lines.append(f"{i}. {t.content}")
    return "\n".join(lines)


def cmd_quota(state: AppState, args: list[str]) -> str:
    if not state.current_user:
        return "Log in first: /login <user> <password>"

    day = args[0] if args else task_api.today()
    if not _DATE_RE.match(day):
        return "Usage: /quota [YYYY-MM-DD]"

    try:
        status = task_api.quota_status(state, day)
    except TogoError as exc:
        return describe_error(exc)

    return f"{status.date}: {status.used}/{status.max_todo} used, {status.remaining} left."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session and storage settings.")
registry.register(
    "register", cmd_register, help_text="Create a user: /register <user> <password> [max_per_day]."
)
registry.register("login", cmd_login, help_text="Sign in: /login <user> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("add", cmd_add, help_text="Add a task: /add [@YYYY-MM-DD] <text>.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [YYYY-MM-DD].", aliases=["ls"])
registry.register("quota", cmd_quota, help_text="Show today's usage: /quota [YYYY-MM-DD].")
