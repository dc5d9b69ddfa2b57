from __future__ import annotations

import pytest

from ems_dashboard.auth.model import SessionUser
from ems_dashboard.auth.store import AuthStore
from ems_dashboard.container import Container
from ems_dashboard.core.enums import Role
from ems_dashboard.reports.service import ReportService
from ems_dashboard.store.ems_store import EMSStore

from fakes import (
    FIXED_TODAY,
    FakeAuthGateway,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryProfiles,
    InMemoryTasks,
    make_employee,
)


@pytest.fixture
def employees_repo():
    return InMemoryEmployees(
        [
            make_employee("2", "John Smith", "john@company.com", user_id="u-john"),
            make_employee("3", "Sarah Johnson", "sarah@company.com", user_id="u-sarah"),
            make_employee("4", "Mike Wilson", "mike@company.com"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def tasks_repo():
    return InMemoryTasks()


@pytest.fixture
def store(employees_repo, attendance_repo, tasks_repo):
    s = EMSStore(employees_repo, attendance_repo, tasks_repo, today=lambda: FIXED_TODAY)
    s.load_all()
    return s


@pytest.fixture
def auth_gateway():
    gateway = FakeAuthGateway()
    gateway.add_user(user_id="u-admin", email="admin@company.com", password="admin123")
    gateway.add_user(user_id="u-john", email="john@company.com", password="employee123")
    gateway.add_user(user_id="u-sarah", email="sarah@company.com", password="employee123")
    return gateway


@pytest.fixture
def profiles():
    return InMemoryProfiles(
        [
            SessionUser(id="u-admin", name="Admin User", email="admin@company.com", role=Role.ADMIN, department="Management"),
            SessionUser(id="u-john", name="John Smith", email="john@company.com", role=Role.EMPLOYEE, department="Engineering"),
            SessionUser(id="u-sarah", name="Sarah Johnson", email="sarah@company.com", role=Role.EMPLOYEE, department="Design"),
        ]
    )


@pytest.fixture
def auth_store(auth_gateway, profiles, employees_repo, store):
    auth = AuthStore(
        auth_gateway,
        profiles,
        employees_repo,
        on_registered=[store.add_employee],
        today=lambda: FIXED_TODAY,
    )
    yield auth
    auth.close()


@pytest.fixture
def container(employees_repo, attendance_repo, tasks_repo, profiles, auth_gateway, store):
    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        tasks_repo=tasks_repo,
        profiles_repo=profiles,
        auth_gateway=auth_gateway,
        ems_store=store,
        report_service=ReportService(store, today=lambda: FIXED_TODAY),
    )
