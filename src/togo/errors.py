# src/togo/errors.py

"""
Error taxonomy.

Repository errors:
- NotFoundError: a lookup matched nothing
- ConflictError: unique-constraint violation on create
- StorageError: I/O / connection / transaction failure (wraps sqlite3.Error)

Admission errors (raised by the quota enforcer):
- QuotaExceededError: the insert would push the bucket over the user's max
- QuotaUnknownError: the user's max could not be read, nothing was attempted
"""

from __future__ import annotations


class TogoError(Exception):
    """Base class for all domain errors."""


class NotFoundError(TogoError):
    pass


class ConflictError(TogoError):
    pass


class StorageError(TogoError):
    pass


class QuotaError(TogoError):
    pass


class QuotaExceededError(QuotaError):
    def __init__(self, user_id: str, date: str, max_todo: int, count: int) -> None:
        self.user_id = user_id
        self.date = date
        self.max_todo = max_todo
        self.count = count
        super().__init__(
            f"daily task limit reached for user={user_id} date={date} "
            f"(max_todo={max_todo}, count={count})"
        )


class QuotaUnknownError(QuotaError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"cannot determine task quota for user={user_id}")
