# src/togo/tasks/quota.py

from __future__ import annotations

"""
Daily quota admission control.

A task-creation request goes through:
  received -> quota checked -> inserted (tentative) -> committed | rolled back

The re-count runs as the post-insert hook of TodoRepo.add_task, i.e. inside the
insert's transaction, and it sees the row that was just inserted. So the veto
condition is `count > max_todo`: with max_todo=2 the third insert of the day is
rolled back. max_todo=0 means no task can ever be created.
"""

import logging

from ..core.ports import TodoRepo
from ..errors import QuotaExceededError, QuotaUnknownError, TogoError
from .task_models import Task
from .task_store import PostInsertHook

logger = logging.getLogger(__name__)


class QuotaEnforcer:
    def __init__(self, repo: TodoRepo) -> None:
        self._repo = repo

    def _quota_hook(self, max_todo: int) -> PostInsertHook:
        def check(user_id: str, date: str) -> None:
            count = self._repo.count_tasks(user_id, date)
            if count > max_todo:
                raise QuotaExceededError(user_id, date, max_todo, count - 1)

        return check

    def create_task(self, user_id: str, content: str, date: str) -> Task:
        """
        Create a task in the (user_id, date) bucket if the user's daily quota allows it.

        Raises:
            QuotaUnknownError: max_todo could not be read (unknown user, storage down)
            QuotaExceededError: the bucket is already full; nothing was persisted
            StorageError: the insert transaction itself failed
        """
        try:
            max_todo = self._repo.get_max_todo(user_id)
        except TogoError as exc:
            logger.warning("Quota lookup failed user=%s: %s", user_id, exc)
            raise QuotaUnknownError(user_id) from exc

        task = Task(user_id=user_id, content=content, created_date=date)
        try:
            created = self._repo.add_task(task, self._quota_hook(max_todo))
        except QuotaExceededError:
            logger.info("Task rejected user=%s date=%s max_todo=%s", user_id, date, max_todo)
            raise

        logger.info("Task created id=%s user=%s date=%s", created.id, user_id, date)
        return created
