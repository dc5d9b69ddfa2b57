from __future__ import annotations

from flask import Flask, g, request

from ..common.responses import fail, ok
from ..common.validators import optional_month
from ..container import Container
from ..core.exceptions import NotFoundError
from ..routing import admin_required, employee_required


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    store = container.ems_store

    @app.route("/admin", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        return ok(
            user=g.auth.user.to_dict(),
            summary=reports.admin_summary(),
            load_errors=dict(store.load_errors),
        )

    @app.route("/employee", methods=["GET"], endpoint="employee_dashboard")
    @employee_required
    def employee_dashboard():
        try:
            employee = store.find_employee_for_user(g.auth.user.id)
        except NotFoundError as e:
            # Blocking state: the principal exists but has no employee row.
            return fail(str(e), 404)

        return ok(
            user=g.auth.user.to_dict(),
            employee=employee.to_dict(),
            summary=reports.employee_summary(employee.id),
        )

    @app.route("/api/reports", methods=["GET"], endpoint="employee_reports")
    @admin_required
    def employee_reports():
        month = optional_month(request.args.get("month")) or reports.current_month()
        return ok(
            month=month,
            months=reports.month_options(),
            reports=[r.to_dict() for r in reports.monthly_reports(month)],
        )
