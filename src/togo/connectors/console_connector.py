# src/togo/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import describe_error
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import TogoError
from ..tasks import task_api

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _prompt(state: AppState) -> str:
    return f"{state.current_user or 'guest'}> "


def handle_line(state: AppState, line: str, emit: Callable[[str], None] | None = None) -> str:
    """
    One console turn.

    Slash commands go to the registry; plain text is added as a task for today
    when someone is logged in.
    """
    try:
        with state.lock:
            cmd_response = command_registry.handle(state, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if cmd_response is not None:
        return cmd_response

    if not state.current_user:
        return "Not logged in. Use /register or /login (see /help)."

    try:
        with state.lock:
            task = task_api.create_task_for_current_user(state, line)
    except TogoError as exc:
        return describe_error(exc)
    except Exception:
        logger.exception("Console task handler crashed.")
        return "Internal error while adding a task."

    return f"Task #{task.id} added for {task.created_date}: {task.content}"


def run_console_loop(state: AppState, *, input_fn: Callable[[str], str] = input) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Type a line to add it as today's task. /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input_fn(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        _print_ts(handle_line(state, user_input, emit=emit))

    logger.info("Console connector finished.")
