# src/togo/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import date as _date

from ..core.state import AppState
from .task_models import QuotaStatus, Task

logger = logging.getLogger(__name__)


def today() -> str:
    """Local calendar date as ISO 8601 (YYYY-MM-DD): the canonical quota bucket key."""
    return _date.today().isoformat()


def _require_user(state: AppState) -> str:
    if not state.current_user:
        raise PermissionError("not logged in")
    return state.current_user


def register_user(
    state: AppState,
    user_id: str,
    password: str,
    max_todo: int | None = None,
) -> int:
    """Create a user; returns the effective daily quota."""
    if max_todo is None:
        max_todo = int(getattr(state.settings, "default_max_todo", 5))
    state.store.add_user(user_id, password, max_todo)
    return max_todo


def login(state: AppState, user_id: str, password: str) -> bool:
    if state.store.validate_user(user_id, password):
        state.current_user = user_id
        logger.info("User logged in id=%s", user_id)
        return True
    state.current_user = None
    return False


def logout(state: AppState) -> None:
    if state.current_user:
        logger.info("User logged out id=%s", state.current_user)
    state.current_user = None


def create_task_for_current_user(state: AppState, content: str, date: str | None = None) -> Task:
    """
    Convenience helper: quota-checked task creation for the logged-in user.
    The date defaults to today().
    """
    user_id = _require_user(state)
    return state.enforcer.create_task(user_id, content, date or today())


def list_tasks(state: AppState, date: str | None = None) -> list[Task]:
    user_id = _require_user(state)
    return state.store.retrieve_tasks(user_id, date or today())


def quota_status(state: AppState, date: str | None = None) -> QuotaStatus:
    user_id = _require_user(state)
    day = date or today()
    return QuotaStatus(
        user_id=user_id,
        date=day,
        used=state.store.count_tasks(user_id, day),
        max_todo=state.store.get_max_todo(user_id),
    )
