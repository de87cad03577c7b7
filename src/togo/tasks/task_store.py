# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

from ..errors import ConflictError, NotFoundError, StorageError, TogoError
from .task_models import Task

logger = logging.getLogger(__name__)
sql_logger = logging.getLogger("togo.sql")

PostInsertHook = Callable[[str, str], None]

# Largest daily quota a user can hold (signed 32-bit).
MAX_TODO_LIMIT = 2**31 - 1

# sqlite3 errors plus the ones raised while binding a Python value to a statement
# (lone surrogates in str, ints outside SQLite INTEGER range).
_DB_ERRORS = (sqlite3.Error, UnicodeError, OverflowError)


def _trace_sql(statement: str) -> None:
    sql_logger.debug("%s", statement)


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    name = getattr(exc, "sqlite_errorname", "") or ""
    if name in ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"):
        return True
    msg = str(exc).upper()
    return "UNIQUE CONSTRAINT" in msg or "PRIMARY KEY" in msg


class TodoStore:
    """
    SQLite store for users and their daily tasks.

    Thread-safety:
    - each call opens its own SQLite connection, nothing is shared between threads
    - add_task runs inside BEGIN IMMEDIATE, so writers are serialized by SQLite's
      reserved lock; a writer waits up to `timeout` seconds for it
    - while a transaction is open, the connection is parked in a thread-local slot
      and every read made on the same thread (e.g. from a post-insert hook) runs on it
    """

    def __init__(
        self,
        db_path: str | Path = "togo.sqlite3",
        *,
        timeout: float = 30.0,
        sql_debug: bool = False,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._timeout = float(timeout)
        self._sql_debug = bool(sql_debug)
        self._local = threading.local()
        self._ensure_schema()
        try:
            users = self.count_users()
        except StorageError:
            users = -1
        logger.info("TodoStore ready db=%s users=%s", self._db_path, users)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    def _configure_conn(self, conn: sqlite3.Connection) -> None:
        conn.execute("PRAGMA foreign_keys=ON")
        if self._sql_debug:
            conn.set_trace_callback(_trace_sql)

    def _active_conn(self) -> sqlite3.Connection | None:
        return getattr(self._local, "conn", None)

    @contextlib.contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Join the open transaction on this thread, or use a short-lived autocommitted connection."""
        active = self._active_conn()
        if active is not None:
            yield active
            return

        conn = self._get_conn()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        try:
            conn.rollback()
        except sqlite3.Error:
            logger.exception("Rollback failed")

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Unit of work.

        BEGIN IMMEDIATE on entry, COMMIT on normal exit, ROLLBACK if the body raises.
        sqlite3 errors come out as StorageError; anything else propagates unchanged
        after the rollback.
        """
        if self._active_conn() is not None:
            raise StorageError("nested transactions are not supported")

        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open database {self._db_path}") from exc

        try:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as exc:
                raise StorageError("cannot begin transaction") from exc

            self._local.conn = conn
            try:
                yield conn
            except sqlite3.Error as exc:
                self._local.conn = None
                self._rollback(conn)
                raise StorageError("transaction failed") from exc
            except BaseException:
                self._local.conn = None
                self._rollback(conn)
                raise

            self._local.conn = None
            try:
                conn.commit()
            except sqlite3.Error as exc:
                self._rollback(conn)
                raise StorageError("commit failed") from exc
        finally:
            self._local.conn = None
            conn.close()

    def _ensure_schema(self) -> None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open database {self._db_path}") from exc
        try:
            # Persistent per database file; may fail harmlessly if another process holds a lock.
            with contextlib.suppress(sqlite3.Error):
                conn.execute("PRAGMA journal_mode=WAL")

            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    password TEXT NOT NULL,
                    max_todo INTEGER NOT NULL DEFAULT 5 CHECK (max_todo >= 0)
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL REFERENCES users(id),
                    content TEXT NOT NULL,
                    created_date TEXT NOT NULL
                )
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_user_date ON tasks(user_id, created_date)"
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError("schema setup failed") from exc
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            user_id=str(row["user_id"]),
            content=str(row["content"]),
            created_date=str(row["created_date"]),
        )

    # ---- users ----

    def count_users(self) -> int:
        try:
            with self._connection() as conn:
                (n,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
        except _DB_ERRORS as exc:
            raise StorageError("count_users failed") from exc
        return int(n)

    def add_user(self, user_id: str, password: str, max_todo: int) -> None:
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required")
        if int(max_todo) < 0:
            raise ValueError("max_todo must be >= 0")
        if int(max_todo) > MAX_TODO_LIMIT:
            raise ValueError(f"max_todo must be <= {MAX_TODO_LIMIT}")

        try:
            with self._connection() as conn:
                conn.execute(
                    "INSERT INTO users(id, password, max_todo) VALUES (?, ?, ?)",
                    (user_id, password, int(max_todo)),
                )
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError(f"user already exists: {user_id}") from exc
            raise StorageError(f"add_user rejected by a constraint user={user_id}") from exc
        except _DB_ERRORS as exc:
            raise StorageError(f"add_user failed user={user_id}") from exc

        logger.info("User added id=%s max_todo=%s", user_id, max_todo)

    def get_max_todo(self, user_id: str) -> int:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT max_todo FROM users WHERE id = ?", (user_id,)
                ).fetchone()
        except _DB_ERRORS as exc:
            raise StorageError(f"get_max_todo failed user={user_id}") from exc

        if row is None:
            raise NotFoundError(f"user not found: {user_id}")
        return int(row["max_todo"])

    def validate_user(self, user_id: str, password: str) -> bool:
        """
        True iff a user with exactly this id and password exists.

        Never raises: lookup failures are logged and reported as False, so a
        storage outage looks the same as a wrong password to the caller.
        """
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT id FROM users WHERE id = ? AND password = ?",
                    (user_id, password),
                ).fetchone()
        except _DB_ERRORS:
            logger.exception("validate_user lookup failed user=%s", user_id)
            return False

        if row is None:
            logger.warning("validate_user: no user matches id=%s and password", user_id)
            return False
        return True

    # ---- tasks ----

    def count_tasks(self, user_id: str, date: str) -> int:
        """Tasks in the (user_id, created_date) bucket; exact string match on the date."""
        try:
            with self._connection() as conn:
                (n,) = conn.execute(
                    "SELECT COUNT(id) FROM tasks WHERE user_id = ? AND created_date = ?",
                    (user_id, date),
                ).fetchone()
        except _DB_ERRORS as exc:
            raise StorageError(f"count_tasks failed user={user_id} date={date}") from exc
        return int(n)

    def retrieve_tasks(self, user_id: str, date: str) -> list[Task]:
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    """
                    SELECT id, user_id, content, created_date
                    FROM tasks
                    WHERE user_id = ? AND created_date = ?
                    ORDER BY id ASC
                    """,
                    (user_id, date),
                ).fetchall()
        except _DB_ERRORS as exc:
            raise StorageError(f"retrieve_tasks failed user={user_id} date={date}") from exc
        return [self._row_to_task(r) for r in rows]

    def add_task(self, task: Task, post_insert_hook: PostInsertHook) -> Task:
        """
        Insert `task` and run `post_insert_hook(user_id, created_date)` in one transaction.

        If the hook raises, the insert is rolled back. Domain errors (TogoError)
        raised by the hook propagate as-is; any other failure becomes StorageError.
        On success `task.id` is set and the task is returned.
        """
        if not task.user_id:
            raise ValueError("task.user_id is required")
        if not task.created_date:
            raise ValueError("task.created_date is required")
        if not task.content or not task.content.strip():
            raise ValueError("task.content is required")

        try:
            with self.transaction() as conn:
                try:
                    cur = conn.execute(
                        "INSERT INTO tasks(user_id, content, created_date) VALUES (?, ?, ?)",
                        (task.user_id, task.content, task.created_date),
                    )
                except _DB_ERRORS as exc:
                    raise StorageError(
                        f"task insert failed user={task.user_id} date={task.created_date}"
                    ) from exc
                rowid = cur.lastrowid
                if rowid is None:
                    raise StorageError("SQLite did not return lastrowid for tasks insert")
                task_id = int(rowid)

                post_insert_hook(task.user_id, task.created_date)
        except TogoError as exc:
            logger.info(
                "Task insert rolled back user=%s date=%s: %s",
                task.user_id,
                task.created_date,
                exc,
            )
            raise
        except Exception as exc:
            logger.warning(
                "Task insert rolled back user=%s date=%s (hook crashed)",
                task.user_id,
                task.created_date,
                exc_info=True,
            )
            raise StorageError("post-insert hook failed") from exc

        task.id = task_id
        logger.debug(
            "Task added id=%s user=%s date=%s", task_id, task.user_id, task.created_date
        )
        return task
