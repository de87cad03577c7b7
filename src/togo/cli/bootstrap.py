# src/togo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the SQLite store and the quota enforcer and wires them into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.quota import QuotaEnforcer
from ..tasks.task_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TodoStore(
        settings.db_path,
        timeout=getattr(settings, "db_timeout", 30.0),
        sql_debug=getattr(settings, "sql_debug", False),
    )
    logger.debug("State created env=%s db=%s", getattr(settings, "environment", "?"), store.db_path)

    return AppState(
        settings=settings,
        store=store,
        enforcer=QuotaEnforcer(store),
    )


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    state.current_user = None
    try:
        close = getattr(state.store, "close", None)
        if close is not None:
            close()
    except Exception:
        logger.exception("Store close failed.")
