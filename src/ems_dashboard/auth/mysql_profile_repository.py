from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import SessionUser
from .profile_repository import ProfileRepository


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_user_id(self, user_id: str) -> Optional[SessionUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, name, email, role, department FROM profiles WHERE user_id=%s",
                (user_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return SessionUser(
                id=str(row["user_id"]),
                name=row["name"],
                email=row["email"],
                role=Role(row["role"]),
                department=row.get("department") or "",
            )

    def create(self, *, user_id: str, name: str, email: str, role: Role, department: str) -> SessionUser:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO profiles (user_id, name, email, role, department) VALUES (%s, %s, %s, %s, %s)",
                (user_id, name, email, role.value, department),
            )
        return SessionUser(id=user_id, name=name, email=email, role=role, department=department)
