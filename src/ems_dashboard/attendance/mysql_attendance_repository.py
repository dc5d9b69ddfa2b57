from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import to_iso_date
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, employee_id, date, status, notes"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        date=to_iso_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records ORDER BY date, created_at")
            return [_to_record(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        employee_id: str,
        date: str,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records (id, employee_id, date, status, notes)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    status = VALUES(status),
                    notes = COALESCE(VALUES(notes), notes)
                """,
                (new_id(), employee_id, date, status.value, notes),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND date=%s",
                (employee_id, date),
            )
            return _to_record(fetchone(cur))
