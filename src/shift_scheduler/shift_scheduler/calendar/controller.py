from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_user_id, json_errors, month_arg, ok, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/calendar", methods=["GET"], endpoint="staff_calendar")
    @staff_required
    @json_errors
    def staff_calendar():
        year, month = month_arg()
        view = container.calendar_service.staff_calendar(year=year, month=month, user_id=current_user_id())
        return ok(calendar=view)

    @app.route("/admin/calendar", methods=["GET"], endpoint="admin_calendar")
    @admin_required
    @json_errors
    def admin_calendar():
        year, month = month_arg()
        return ok(**container.calendar_service.admin_overview(year=year, month=month))

    @app.route("/admin/calendar/management", methods=["GET"], endpoint="management_calendar")
    @admin_required
    @json_errors
    def management_calendar():
        year, month = month_arg()
        view = container.calendar_service.management_calendar(
            year=year,
            month=month,
            user_id=request.args.get("user_id") or "",
        )
        return ok(calendar=view)
