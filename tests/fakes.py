# tests/fakes.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from togo.errors import ConflictError, NotFoundError, StorageError, TogoError
from togo.tasks.task_models import Task, User


class FakeTodoRepo:
    """
    In-memory TodoRepo for quota enforcer unit tests.

    add_task mimics the store's unit of work: append, run the hook,
    drop the row again if the hook raises.
    """

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.tasks: list[Task] = []
        self.fail_max_todo = False
        self._next_id = 1

    def add_user(self, user_id: str, password: str, max_todo: int) -> None:
        if user_id in self.users:
            raise ConflictError(user_id)
        self.users[user_id] = User(id=user_id, password=password, max_todo=max_todo)

    def get_max_todo(self, user_id: str) -> int:
        if self.fail_max_todo:
            raise StorageError("database is locked")
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError(user_id)
        return user.max_todo

    def validate_user(self, user_id: str, password: str) -> bool:
        user = self.users.get(user_id)
        return user is not None and user.password == password

    def count_tasks(self, user_id: str, date: str) -> int:
        return sum(1 for t in self.tasks if t.user_id == user_id and t.created_date == date)

    def retrieve_tasks(self, user_id: str, date: str) -> list[Task]:
        return [t for t in self.tasks if t.user_id == user_id and t.created_date == date]

    def add_task(self, task: Task, post_insert_hook: Callable[[str, str], None]) -> Task:
        row = replace(task, id=self._next_id)
        self.tasks.append(row)
        try:
            post_insert_hook(task.user_id, task.created_date)
        except TogoError:
            self.tasks.remove(row)
            raise
        except Exception as exc:
            self.tasks.remove(row)
            raise StorageError("post-insert hook failed") from exc
        self._next_id += 1
        task.id = row.id
        return task
