from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: str,
        date: str,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert or update on the (employee_id, date) key and return the stored row.

        ``notes`` of None keeps the notes already stored for an existing row.
        """

        raise NotImplementedError
