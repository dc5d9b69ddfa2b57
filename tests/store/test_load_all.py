from __future__ import annotations

import pytest

from ems_dashboard.core.exceptions import GatewayError, NotFoundError
from ems_dashboard.store.ems_store import EMSStore

from fakes import FIXED_TODAY, InMemoryAttendance, InMemoryEmployees, InMemoryTasks, make_employee


def test_load_all_replaces_collections(employees_repo):
    store = EMSStore(employees_repo, InMemoryAttendance(), InMemoryTasks(), today=lambda: FIXED_TODAY)
    assert store.employees == []

    store.load_all()

    assert [e.id for e in store.employees] == ["2", "3", "4"]
    assert store.loaded is True
    assert store.loading is False
    assert store.load_errors == {}


def test_failed_collection_keeps_previous_data_and_is_reported(store, employees_repo, tasks_repo):
    store.mark_attendance("2", "present", "2024-01-10")
    employees_repo.rows.append(make_employee("5", "New Person", "new@company.com"))
    tasks_repo.fail_with = GatewayError("tasks table unavailable")
    previous_tasks = store.tasks

    with pytest.raises(GatewayError) as exc:
        store.load_all()

    assert "tasks" in str(exc.value)
    assert store.loading is False
    assert set(store.load_errors) == {"tasks"}
    assert store.tasks == previous_tasks
    # Unaffected collections are still refreshed.
    assert [e.id for e in store.employees] == ["2", "3", "4", "5"]
    assert len(store.attendance) == 1


def test_load_all_failure_on_first_load_leaves_empty_collections():
    employees = InMemoryEmployees([])
    employees.fail_with = GatewayError("refused")
    store = EMSStore(employees, InMemoryAttendance(), InMemoryTasks())

    with pytest.raises(GatewayError):
        store.load_all()

    assert store.employees == []
    assert store.loaded is False


def test_add_employee_ignores_duplicates(store):
    employee = make_employee("9", "Registered", "reg@company.com", user_id="u-reg")

    store.add_employee(employee)
    store.add_employee(employee)

    assert [e.id for e in store.employees].count("9") == 1
    assert store.find_employee_for_user("u-reg") == employee


def test_find_employee_for_user_without_record_raises(store):
    with pytest.raises(NotFoundError):
        store.find_employee_for_user("u-admin")


class RecordingEmployees(InMemoryEmployees):
    """Records the store's ``loading`` flag at fetch time."""

    def __init__(self, rows, *, error=None):
        super().__init__(rows)
        self.store = None
        self.error = error
        self.loading_seen: list[bool] = []

    def list_all(self):
        self.loading_seen.append(self.store.loading)
        if self.error is not None:
            raise self.error
        return super().list_all()


@pytest.mark.parametrize("error", [None, GatewayError("refused")])
def test_loading_is_true_only_during_fetch(error):
    employees = RecordingEmployees([make_employee("2", "John Smith", "john@company.com")], error=error)
    store = EMSStore(employees, InMemoryAttendance(), InMemoryTasks())
    employees.store = store

    if error is None:
        store.load_all()
    else:
        with pytest.raises(GatewayError):
            store.load_all()

    assert employees.loading_seen == [True]
    assert store.loading is False


def test_unexpected_fetch_error_is_reported_per_collection(store, employees_repo, tasks_repo):
    employees_repo.rows.append(make_employee("5", "New Person", "new@company.com"))
    previous_tasks = store.tasks

    def broken_list_all():
        raise RuntimeError("driver crashed")

    tasks_repo.list_all = broken_list_all

    with pytest.raises(GatewayError) as exc:
        store.load_all()

    assert "tasks" in str(exc.value)
    assert store.load_errors == {"tasks": "driver crashed"}
    assert store.tasks == previous_tasks
    assert [e.id for e in store.employees] == ["2", "3", "4", "5"]
    assert store.loading is False
