from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .auth.gateway import AuthGateway
from .auth.mysql_auth_gateway import MySQLAuthGateway
from .auth.mysql_profile_repository import MySQLProfileRepository
from .auth.profile_repository import ProfileRepository
from .auth.store import AuthStore
from .core.constants import DEFAULT_SESSION_DAYS
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .reports.service import ReportService
from .store.ems_store import EMSStore
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    tasks_repo: TaskRepository
    profiles_repo: ProfileRepository
    auth_gateway: AuthGateway

    ems_store: EMSStore
    report_service: ReportService

    require_email_confirmation: bool = False

    def new_auth_store(self) -> AuthStore:
        """One AuthStore per request; registrations feed the shared EMSStore."""

        return AuthStore(
            self.auth_gateway,
            self.profiles_repo,
            self.employees_repo,
            require_email_confirmation=self.require_email_confirmation,
            on_registered=[self.ems_store.add_employee],
        )


def build_container(
    *,
    db_config: dict,
    session_days: int = DEFAULT_SESSION_DAYS,
    require_email_confirmation: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    tasks_repo = MySQLTaskRepository(conn)
    profiles_repo = MySQLProfileRepository(conn)
    auth_gateway = MySQLAuthGateway(conn, session_days=session_days)

    ems_store = EMSStore(employees_repo, attendance_repo, tasks_repo)
    report_service = ReportService(ems_store)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        tasks_repo=tasks_repo,
        profiles_repo=profiles_repo,
        auth_gateway=auth_gateway,
        ems_store=ems_store,
        report_service=report_service,
        require_email_confirmation=require_email_confirmation,
    )
