from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import today_local
from ..common.responses import json_body, ok
from ..common.validators import optional_month, require_iso_date, require_non_empty
from ..container import Container
from ..core.exceptions import ValidationError
from ..routing import admin_required, employee_required


def register(app: Flask, container: Container) -> None:
    store = container.ems_store

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_table")
    @admin_required
    def attendance_table():
        day = require_iso_date(request.args.get("date") or today_local().isoformat(), "Date")
        rows = []
        for employee in store.employees:
            record = store.get_attendance_for_date(employee.id, day)
            rows.append(
                {
                    "employee": employee.to_dict(),
                    "status": record.status.value if record else None,
                    "notes": record.notes if record else None,
                }
            )
        return ok(date=day, rows=rows)

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @admin_required
    def mark_attendance():
        data = json_body()
        employee_id = require_non_empty(str(data.get("employee_id") or ""), "Employee")
        if store.get_employee(employee_id) is None:
            raise ValidationError("Unknown employee")
        day = require_iso_date(data.get("date") or today_local().isoformat(), "Date")
        notes = (data.get("notes") or "").strip() or None

        record = store.mark_attendance(employee_id, data.get("status", ""), day, notes)
        return ok(
            record=record.to_dict(),
            message=f"Attendance marked as {record.status.value} for {record.date}",
        )

    @app.route("/api/me/attendance", methods=["GET"], endpoint="my_attendance")
    @employee_required
    def my_attendance():
        employee = store.find_employee_for_user(g.auth.user.id)
        month = optional_month(request.args.get("month")) or container.report_service.current_month()

        records = sorted(store.get_employee_attendance(employee.id, month), key=lambda r: r.date, reverse=True)
        report = container.report_service.employee_report(employee.id, month)
        return ok(
            month=month,
            months=container.report_service.month_options(),
            records=[r.to_dict() for r in records],
            stats=report.attendance_stats,
            total_days=report.total_attendance_days,
            present_percentage=report.present_percentage,
        )
