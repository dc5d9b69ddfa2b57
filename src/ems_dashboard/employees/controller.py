from __future__ import annotations

from flask import Flask

from ..common.responses import ok
from ..container import Container
from ..routing import admin_required


def register(app: Flask, container: Container) -> None:
    store = container.ems_store

    @app.route("/api/employees", methods=["GET"], endpoint="employee_list")
    @admin_required
    def employee_list():
        return ok(employees=[e.to_dict() for e in store.employees])

    @app.route("/api/admin/refresh", methods=["POST"], endpoint="refresh_store")
    @admin_required
    def refresh_store():
        store.load_all()
        return ok(
            message="Data refreshed",
            counts={
                "employees": len(store.employees),
                "attendance": len(store.attendance),
                "tasks": len(store.tasks),
            },
        )
