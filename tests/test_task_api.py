# tests/test_task_api.py

from __future__ import annotations

import re

import pytest

from togo.core.state import AppState
from togo.errors import ConflictError, QuotaExceededError
from togo.tasks import task_api


def test_today_is_iso_date() -> None:
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", task_api.today())


def test_register_uses_default_limit(state: AppState) -> None:
    assert task_api.register_user(state, "alice", "pw") == 3
    assert state.store.get_max_todo("alice") == 3

    assert task_api.register_user(state, "bob", "pw", 1) == 1
    assert state.store.get_max_todo("bob") == 1

    with pytest.raises(ConflictError):
        task_api.register_user(state, "alice", "pw")


def test_login_and_logout(state: AppState) -> None:
    task_api.register_user(state, "alice", "pw")

    assert task_api.login(state, "alice", "nope") is False
    assert state.current_user is None

    assert task_api.login(state, "alice", "pw") is True
    assert state.current_user == "alice"

    task_api.logout(state)
    assert state.current_user is None


def test_failed_login_clears_session(state: AppState) -> None:
    task_api.register_user(state, "alice", "pw")
    task_api.login(state, "alice", "pw")

    assert task_api.login(state, "ghost", "pw") is False
    assert state.current_user is None


def test_task_helpers_require_login(state: AppState) -> None:
    with pytest.raises(PermissionError):
        task_api.create_task_for_current_user(state, "x")
    with pytest.raises(PermissionError):
        task_api.list_tasks(state)
    with pytest.raises(PermissionError):
        task_api.quota_status(state)


def test_create_defaults_to_today(state: AppState) -> None:
    task_api.register_user(state, "alice", "pw", 2)
    task_api.login(state, "alice", "pw")

    task = task_api.create_task_for_current_user(state, "buy milk")

    assert task.created_date == task_api.today()
    assert [t.content for t in task_api.list_tasks(state)] == ["buy milk"]


def test_quota_status(state: AppState) -> None:
    task_api.register_user(state, "alice", "pw", 2)
    task_api.login(state, "alice", "pw")

    task_api.create_task_for_current_user(state, "one", "2023-05-01")
    status = task_api.quota_status(state, "2023-05-01")
    assert (status.user_id, status.date, status.used, status.max_todo) == ("alice", "2023-05-01", 1, 2)
    assert status.remaining == 1

    task_api.create_task_for_current_user(state, "two", "2023-05-01")
    with pytest.raises(QuotaExceededError):
        task_api.create_task_for_current_user(state, "three", "2023-05-01")

    status = task_api.quota_status(state, "2023-05-01")
    assert status.used == 2
    assert status.remaining == 0
    assert task_api.quota_status(state, "2023-05-02").used == 0
