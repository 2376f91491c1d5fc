import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from domain.entities import Task, new_task_id, parse_task_id
from domain.errors import StoreError

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, description, completed, created_at, updated_at"


def _to_iso(value: datetime) -> str:
    # Fixed width so that ORDER BY on the text column follows time order.
    return value.isoformat(timespec="microseconds")


def _row_to_task(row) -> Task:
    return Task(
        id=row[0],
        title=row[1],
        description=row[2],
        completed=bool(row[3]),
        created_at=datetime.fromisoformat(row[4]),
        updated_at=datetime.fromisoformat(row[5]),
    )


class Database:
    """SQLite-backed task store.

    Every task is one row keyed by a store-generated identifier. Each
    operation opens its own connection, so a single instance can be shared
    by all requests; `connect` and `close` bracket its usable lifetime.
    """

    def __init__(self, db_name: str = "todo.db"):
        self.db_name = db_name
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if self._connected:
            return
        try:
            with closing(sqlite3.connect(self.db_name)) as conn, conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS tasks (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL CHECK (length(trim(title)) > 0),
                        description TEXT NOT NULL DEFAULT '',
                        completed INTEGER NOT NULL DEFAULT 0,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks (created_at)"
                )
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open task store {self.db_name!r}: {e}") from e
        self._connected = True
        logger.info("Connected to task store %s", self.db_name)

    def close(self) -> None:
        if self._connected:
            self._connected = False
            logger.info("Closed task store %s", self.db_name)

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        if not self._connected:
            raise StoreError("Task store is not connected")
        try:
            with closing(sqlite3.connect(self.db_name)) as conn, conn:
                yield conn
        except sqlite3.Error as e:
            logger.error("Task store error: %s", e)
            raise StoreError(str(e)) from e

    def find_all(self) -> List[Task]:
        with self._session() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC"
            ).fetchall()
        return [_row_to_task(row) for row in rows]

    def find_by_id(self, task_id: str) -> Optional[Task]:
        task_id = parse_task_id(task_id)
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        return _row_to_task(row) if row else None

    def save(self, task: Task) -> Task:
        """Insert a new task or overwrite an existing one.

        The entity is validated and normalized first, so nothing invalid
        ever reaches the table. Timestamps are refreshed on every save.
        """
        task.validate()
        task.normalize()
        is_new = task.id is None
        stamped = Task(**task.to_dict())
        stamped.touch()
        if is_new:
            stamped.id = new_task_id()
        values = (
            stamped.title,
            stamped.description,
            1 if stamped.completed else 0,
            _to_iso(stamped.created_at),
            _to_iso(stamped.updated_at),
        )
        with self._session() as conn:
            if is_new:
                conn.execute(
                    "INSERT INTO tasks (title, description, completed, created_at, updated_at, id) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    values + (stamped.id,),
                )
            else:
                cursor = conn.execute(
                    "UPDATE tasks SET title = ?, description = ?, completed = ?, "
                    "created_at = ?, updated_at = ? WHERE id = ?",
                    values + (parse_task_id(stamped.id),),
                )
                if cursor.rowcount == 0:
                    raise StoreError(f"No task with id {stamped.id} to update")
        # Only reflect the new state on the caller's entity once it is stored.
        task.id = stamped.id
        task.created_at = stamped.created_at
        task.updated_at = stamped.updated_at
        return task

    def delete_by_id(self, task_id: str) -> bool:
        task_id = parse_task_id(task_id)
        with self._session() as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0
