from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_display_date
from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    json_errors,
    month_key_arg,
    ok,
    payload,
    staff_required,
    time_field,
)
from ..container import Container
from .model import Shift


def shift_view(shift: Shift) -> dict:
    return {
        "id": shift.shift_id,
        "user_id": shift.user_id,
        "user_name": shift.user_name,
        "date": shift.work_date.strftime("%Y-%m-%d"),
        "label": format_display_date(shift.work_date),
        "start_time": shift.start_time,
        "end_time": shift.end_time,
        "time_range": f"{shift.start_time} - {shift.end_time}",
        "hours": round(shift.hours, 2),
        "notes": shift.notes,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/shifts", methods=["GET"], endpoint="my_shifts")
    @staff_required
    @json_errors
    def my_shifts():
        items = container.shift_service.list_my_confirmed(user_id=current_user_id(), year_month=month_key_arg())
        return ok(shifts=[shift_view(s) for s in items])

    @app.route("/admin/shifts", methods=["GET"], endpoint="admin_shifts")
    @admin_required
    @json_errors
    def admin_shifts():
        items = container.shift_service.list_confirmed(
            year_month=month_key_arg(),
            user_id=request.args.get("user_id") or None,
        )
        return ok(shifts=[shift_view(s) for s in items])

    @app.route("/admin/shifts", methods=["POST"], endpoint="create_shift")
    @admin_required
    @json_errors
    def create_shift():
        data = payload()
        new_id = container.shift_service.create_shift(
            current_role=current_role(),
            user_id=str(data.get("user_id") or ""),
            work_date=data.get("date"),
            start_time=time_field(data, "start"),
            end_time=time_field(data, "end"),
            notes=str(data.get("notes") or ""),
        )
        return ok(id=new_id), 201

    @app.route("/admin/shifts/<shift_id>", methods=["GET"], endpoint="shift_detail")
    @admin_required
    @json_errors
    def shift_detail(shift_id: str):
        return ok(shift=shift_view(container.shift_service.get_shift(shift_id)))

    @app.route("/admin/shifts/<shift_id>", methods=["PATCH"], endpoint="update_shift")
    @admin_required
    @json_errors
    def update_shift(shift_id: str):
        data = payload()
        container.shift_service.update_shift(
            current_role=current_role(),
            shift_id=shift_id,
            start_time=time_field(data, "start"),
            end_time=time_field(data, "end"),
            notes=str(data.get("notes") or ""),
        )
        return ok()

    @app.route("/admin/shifts/<shift_id>", methods=["DELETE"], endpoint="delete_shift")
    @admin_required
    @json_errors
    def delete_shift(shift_id: str):
        container.shift_service.delete_shift(current_role=current_role(), shift_id=shift_id)
        return ok()
