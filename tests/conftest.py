# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from togo.core.state import AppState
from togo.tasks.quota import QuotaEnforcer
from togo.tasks.task_store import TodoStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="togo-test",
        log_level="DEBUG",
        environment="test",
        data_dir=tmp_path,
        db_path=tmp_path / "togo.sqlite3",
        db_timeout=30.0,
        sql_debug=True,
        default_max_todo=3,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TodoStore:
    """Real SQLite store: its transactional behaviour is what most tests are about."""
    return TodoStore(settings.db_path, timeout=settings.db_timeout, sql_debug=settings.sql_debug)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TodoStore) -> AppState:
    return AppState(settings=settings, store=store, enforcer=QuotaEnforcer(store))
