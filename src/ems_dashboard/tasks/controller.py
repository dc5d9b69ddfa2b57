from __future__ import annotations

from flask import Flask, g

from ..common.responses import json_body, ok
from ..container import Container
from ..core.enums import TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..routing import admin_required, employee_required
from .input import parse_new_task


def register(app: Flask, container: Container) -> None:
    store = container.ems_store

    def _employee_name(employee_id: str) -> str:
        employee = store.get_employee(employee_id)
        return employee.name if employee else "Unknown Employee"

    def _task_row(task) -> dict:
        row = task.to_dict()
        row["assigned_to_name"] = _employee_name(task.assigned_to)
        return row

    @app.route("/api/tasks", methods=["GET"], endpoint="task_list")
    @admin_required
    def task_list():
        return ok(tasks=[_task_row(t) for t in store.tasks], stats=store.get_task_stats())

    @app.route("/api/tasks", methods=["POST"], endpoint="create_task")
    @admin_required
    def create_task():
        new_task = parse_new_task(json_body(), assigned_by=g.auth.user.id)
        if store.get_employee(new_task.assigned_to) is None:
            raise ValidationError("Unknown employee")

        task = store.create_task(new_task)
        return ok(201, task=_task_row(task), message=f'Task "{task.title}" has been assigned successfully')

    @app.route("/api/me/tasks", methods=["GET"], endpoint="my_tasks")
    @employee_required
    def my_tasks():
        employee = store.find_employee_for_user(g.auth.user.id)
        tasks = store.get_employee_tasks(employee.id)
        return ok(tasks=[t.to_dict() for t in tasks], stats=store.get_task_stats(employee.id))

    def _advance(task_id: str, expected: TaskStatus):
        employee = store.find_employee_for_user(g.auth.user.id)
        task = store.get_task(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        if task.assigned_to != employee.id:
            raise AuthorizationError("This task is not assigned to you")
        if task.status.next_status is not expected:
            raise ValidationError(f"A {task.status.value} task cannot be moved to {expected.value}")
        return store.update_task_status(task_id, expected)

    @app.route("/api/me/tasks/<task_id>/accept", methods=["POST"], endpoint="accept_task")
    @employee_required
    def accept_task(task_id: str):
        task = _advance(task_id, TaskStatus.ACCEPTED)
        return ok(task=task.to_dict(), message="Task accepted")

    @app.route("/api/me/tasks/<task_id>/complete", methods=["POST"], endpoint="complete_task")
    @employee_required
    def complete_task(task_id: str):
        task = _advance(task_id, TaskStatus.COMPLETED)
        return ok(task=task.to_dict(), message="Task completed")
