from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import month_of, recent_months, today_local
from ..core.constants import DEFAULT_REPORT_MONTHS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..store.ems_store import EMSStore


def _percent(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


@dataclass(frozen=True)
class EmployeeReport:
    employee: Employee
    month: Optional[str]
    attendance_stats: dict[str, int]
    task_stats: dict[str, int]

    @property
    def total_attendance_days(self) -> int:
        return sum(self.attendance_stats.values())

    @property
    def present_percentage(self) -> float:
        return _percent(self.attendance_stats[AttendanceStatus.PRESENT.value], self.total_attendance_days)

    @property
    def completion_rate(self) -> float:
        return _percent(self.task_stats["completed"], self.task_stats["total"])

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.to_dict(),
            "month": self.month,
            "attendance_stats": dict(self.attendance_stats),
            "total_attendance_days": self.total_attendance_days,
            "present_percentage": self.present_percentage,
            "task_stats": dict(self.task_stats),
            "completion_rate": self.completion_rate,
        }


class ReportService:
    """Aggregates shown on the dashboards, computed from the store."""

    def __init__(self, store: EMSStore, *, today: Callable[[], date] = today_local):
        self._store = store
        self._today = today

    def current_month(self) -> str:
        return month_of(self._today())

    def employee_report(self, employee_id: str, month: Optional[str] = None) -> EmployeeReport:
        employee = self._store.get_employee(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return EmployeeReport(
            employee=employee,
            month=month,
            attendance_stats=self._store.get_attendance_stats(employee_id, month),
            task_stats=self._store.get_task_stats(employee_id),
        )

    def monthly_reports(self, month: Optional[str] = None) -> list[EmployeeReport]:
        month = month or self.current_month()
        return [self.employee_report(e.id, month) for e in self._store.employees]

    def admin_summary(self, month: Optional[str] = None) -> dict:
        month = month or self.current_month()
        totals = {s.value: 0 for s in AttendanceStatus}
        employees = self._store.employees
        for employee in employees:
            for status, count in self._store.get_attendance_stats(employee.id, month).items():
                totals[status] += count

        return {
            "month": month,
            "total_employees": len(employees),
            "attendance": totals,
            "tasks": self._store.get_task_stats(),
        }

    def employee_summary(self, employee_id: str, month: Optional[str] = None) -> dict:
        month = month or self.current_month()
        return {
            "month": month,
            "attendance": self._store.get_attendance_stats(employee_id, month),
            "tasks": self._store.get_task_stats(employee_id),
        }

    def month_options(self, count: int = DEFAULT_REPORT_MONTHS) -> list[dict]:
        out = []
        for value in recent_months(self._today(), count):
            year, month = value.split("-")
            label = date(int(year), int(month), 1).strftime("%B %Y")
            out.append({"value": value, "label": label})
        return out
