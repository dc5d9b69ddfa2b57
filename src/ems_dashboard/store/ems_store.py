from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_local
from ..core.enums import AttendanceStatus, TaskStatus
from ..core.exceptions import DomainError, GatewayError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..tasks.model import NewTask, Task
from ..tasks.repository import TaskRepository

logger = logging.getLogger(__name__)


def _coerce(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {label}: {value!r}")


class EMSStore:
    """In-memory employees, attendance and tasks mirrored to the database.

    Mutations are write-through: the repository call happens first and the
    local collection is patched only after it succeeds, so a failed write
    leaves local state untouched. Reads never hit the database.

    One instance is built per application (see ``container.build_container``)
    and handed to the controllers; there is no module-level state.
    """

    COLLECTIONS = ("employees", "attendance", "tasks")

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        tasks: TaskRepository,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._employees_repo = employees
        self._attendance_repo = attendance
        self._tasks_repo = tasks
        self._today = today

        self._employees: list[Employee] = []
        self._attendance: list[AttendanceRecord] = []
        self._tasks: list[Task] = []
        self._lock = threading.RLock()

        self.loading = False
        self.loaded = False
        self.load_errors: dict[str, str] = {}

    @property
    def employees(self) -> list[Employee]:
        with self._lock:
            return list(self._employees)

    @property
    def attendance(self) -> list[AttendanceRecord]:
        with self._lock:
            return list(self._attendance)

    @property
    def tasks(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    # -- loading ---------------------------------------------------------

    def load_all(self) -> None:
        """Fetch all three collections in parallel and replace the local copies.

        A collection whose fetch fails keeps its previous contents; the failure
        is recorded in ``load_errors`` and raised as GatewayError once every
        fetch has finished.
        """

        fetchers = {
            "employees": self._employees_repo.list_all,
            "attendance": self._attendance_repo.list_all,
            "tasks": self._tasks_repo.list_all,
        }

        self.loading = True
        errors: dict[str, str] = {}
        try:
            with ThreadPoolExecutor(max_workers=len(fetchers)) as pool:
                futures = {name: pool.submit(fetch) for name, fetch in fetchers.items()}

            results: dict[str, list] = {}
            for name, future in futures.items():
                try:
                    results[name] = list(future.result())
                except DomainError as e:
                    logger.warning("loading %s failed: %s", name, e)
                    errors[name] = str(e)
                except Exception as e:
                    logger.exception("loading %s failed unexpectedly", name)
                    errors[name] = str(e) or type(e).__name__

            with self._lock:
                for name, rows in results.items():
                    setattr(self, f"_{name}", rows)
                self.load_errors = errors
                if not errors:
                    self.loaded = True
        finally:
            self.loading = False

        if errors:
            raise GatewayError(f"Failed to load {', '.join(sorted(errors))}")

        logger.info(
            "store loaded: %d employees, %d attendance records, %d tasks",
            len(self._employees),
            len(self._attendance),
            len(self._tasks),
        )

    # -- employees -------------------------------------------------------

    def add_employee(self, employee: Employee) -> None:
        """Append a newly registered employee (registration callback)."""

        with self._lock:
            if any(e.id == employee.id for e in self._employees):
                return
            self._employees.append(employee)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        with self._lock:
            return next((e for e in self._employees if e.id == employee_id), None)

    def find_employee_for_user(self, user_id: str) -> Employee:
        with self._lock:
            employee = next((e for e in self._employees if e.user_id == user_id), None)
        if not employee:
            raise NotFoundError("Employee record not found")
        return employee

    # -- attendance ------------------------------------------------------

    def mark_attendance(
        self,
        employee_id: str,
        status: AttendanceStatus | str,
        date: str,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        status = _coerce(AttendanceStatus, status, "attendance status")
        record = self._attendance_repo.upsert(employee_id=employee_id, date=date, status=status, notes=notes)

        with self._lock:
            for i, existing in enumerate(self._attendance):
                if existing.key == record.key:
                    self._attendance[i] = record
                    break
            else:
                self._attendance.append(record)

        logger.info("attendance %s on %s marked %s", employee_id, date, status.value)
        return record

    def get_employee_attendance(self, employee_id: str, month: Optional[str] = None) -> list[AttendanceRecord]:
        with self._lock:
            return [
                r
                for r in self._attendance
                if r.employee_id == employee_id and (not month or r.month == month)
            ]

    def get_attendance_for_date(self, employee_id: str, date: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return next((r for r in self._attendance if r.key == (employee_id, date)), None)

    def get_attendance_stats(self, employee_id: str, month: Optional[str] = None) -> dict[str, int]:
        stats = {s.value: 0 for s in AttendanceStatus}
        for record in self.get_employee_attendance(employee_id, month):
            stats[record.status.value] += 1
        return stats

    # -- tasks -----------------------------------------------------------

    def create_task(self, task_data: NewTask) -> Task:
        data = replace(
            task_data,
            status=task_data.status or TaskStatus.PENDING,
            created_date=task_data.created_date or self._today().isoformat(),
        )
        task = self._tasks_repo.insert(data)

        with self._lock:
            self._tasks.append(task)

        logger.info("task %s assigned to %s", task.id, task.assigned_to)
        return task

    def update_task_status(self, task_id: str, new_status: TaskStatus | str) -> Task:
        """Set a task's status.

        Any status is accepted here; forward-only progression is offered by
        the employee endpoints. ``completed_date`` is set on ``completed`` and
        otherwise left as stored.
        """

        status = _coerce(TaskStatus, new_status, "task status")
        completed_date = self._today().isoformat() if status is TaskStatus.COMPLETED else None

        task = self._tasks_repo.update_status(task_id=task_id, status=status, completed_date=completed_date)
        if task is None:
            raise NotFoundError("Task not found")

        with self._lock:
            for i, existing in enumerate(self._tasks):
                if existing.id == task.id:
                    self._tasks[i] = task
                    break
            else:
                self._tasks.append(task)

        logger.info("task %s moved to %s", task_id, status.value)
        return task

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return next((t for t in self._tasks if t.id == task_id), None)

    def get_employee_tasks(self, employee_id: str) -> list[Task]:
        with self._lock:
            return [t for t in self._tasks if t.assigned_to == employee_id]

    def get_task_stats(self, employee_id: Optional[str] = None) -> dict[str, int]:
        tasks = self.get_employee_tasks(employee_id) if employee_id else self.tasks
        stats = {"total": len(tasks)}
        for s in TaskStatus:
            stats[s.value] = sum(1 for t in tasks if t.status is s)
        return stats
