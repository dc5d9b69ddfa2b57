from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark, unique per (employee_id, date)."""

    id: str
    employee_id: str
    date: str
    status: AttendanceStatus
    notes: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.employee_id, self.date)

    @property
    def month(self) -> str:
        return self.date[:7]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": self.date,
            "status": self.status.value,
            "notes": self.notes,
        }
