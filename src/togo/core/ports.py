# src/togo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The quota enforcer depends on this Protocol instead of the SQLite store,
so tests can swap in an in-memory repository.
"""

from collections.abc import Callable
from typing import Any, Protocol


class TodoRepo(Protocol):
    # Users
    def add_user(self, user_id: str, password: str, max_todo: int) -> None: ...
    def get_max_todo(self, user_id: str) -> int: ...
    def validate_user(self, user_id: str, password: str) -> bool: ...

    # Tasks
    def count_tasks(self, user_id: str, date: str) -> int: ...
    def retrieve_tasks(self, user_id: str, date: str) -> list[Any]: ...
    def add_task(self, task: Any, post_insert_hook: Callable[[str, str], None]) -> Any: ...
