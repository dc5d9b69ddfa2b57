from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import to_iso_date
from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import NewTask, Task
from .repository import TaskRepository

_COLUMNS = "id, title, description, assigned_to, assigned_by, status, created_date, due_date, completed_date"


def _to_task(r: dict) -> Task:
    return Task(
        id=str(r["id"]),
        title=r["title"],
        description=r.get("description") or "",
        assigned_to=str(r["assigned_to"]),
        assigned_by=str(r["assigned_by"]),
        status=TaskStatus(r["status"]),
        created_date=to_iso_date(r["created_date"]),
        due_date=to_iso_date(r["due_date"]),
        completed_date=to_iso_date(r.get("completed_date")),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at")
            return [_to_task(r) for r in fetchall(cur)]

    def insert(self, data: NewTask) -> Task:
        task_id = new_id()
        status = data.status or TaskStatus.PENDING
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks (id, title, description, assigned_to, assigned_by, status, created_date, due_date)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    task_id,
                    data.title,
                    data.description or "",
                    data.assigned_to,
                    data.assigned_by,
                    status.value,
                    data.created_date,
                    data.due_date,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE id=%s", (task_id,))
            return _to_task(fetchone(cur))

    def update_status(
        self,
        *,
        task_id: str,
        status: TaskStatus,
        completed_date: Optional[str] = None,
    ) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET status=%s, completed_date=COALESCE(%s, completed_date)
                WHERE id=%s
                """,
                (status.value, completed_date, task_id),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE id=%s", (task_id,))
            row = fetchone(cur)
            return _to_task(row) if row else None
