# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class User:
    id: str
    password: str
    max_todo: int


@dataclass(slots=True)
class Task:
    """
    One to-do item.

    created_date is a date-only string ("2023-05-01") and is the quota bucket key.
    id is assigned by the store on insert.
    """

    user_id: str
    content: str
    created_date: str
    id: int | None = None


@dataclass(slots=True, frozen=True)
class QuotaStatus:
    user_id: str
    date: str
    used: int
    max_todo: int

    @property
    def remaining(self) -> int:
        return max(0, self.max_todo - self.used)
