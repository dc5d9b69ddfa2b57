from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import to_iso_date
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = "id, user_id, name, email, department, position, join_date"


def _to_employee(row: dict) -> Employee:
    return Employee(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        department=row["department"],
        position=row["position"],
        join_date=to_iso_date(row["join_date"]),
        user_id=row.get("user_id"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY created_at, name")
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def insert(self, data: NewEmployee) -> Employee:
        employee_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees (id, user_id, name, email, department, position, join_date)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (employee_id, data.user_id, data.name, data.email, data.department, data.position, data.join_date),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            return _to_employee(fetchone(cur))
