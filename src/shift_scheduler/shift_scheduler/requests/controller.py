from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_display_date
from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    current_user_name,
    json_errors,
    login_required,
    month_key_arg,
    ok,
    payload,
    staff_required,
    time_field,
)
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from .model import ShiftRequest


def request_view(req: ShiftRequest) -> dict:
    return {
        "id": req.request_id,
        "user_id": req.user_id,
        "user_name": req.user_name,
        "date": req.work_date.strftime("%Y-%m-%d"),
        "label": format_display_date(req.work_date),
        "time_slots": list(req.time_slots),
        "start_time": req.start_time,
        "end_time": req.end_time,
        "status": req.status.value,
        "notes": req.notes,
        "editable": req.is_pending,
    }


def _status_arg(value):
    if not value or value == "all":
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")


def register(app: Flask, container: Container) -> None:
    @app.route("/requests", methods=["GET"], endpoint="my_requests")
    @staff_required
    @json_errors
    def my_requests():
        items = container.request_service.list_my_requests(user_id=current_user_id(), year_month=month_key_arg())
        return ok(requests=[request_view(r) for r in items])

    @app.route("/requests", methods=["POST"], endpoint="submit_requests")
    @staff_required
    @json_errors
    def submit_requests():
        data = payload()
        dates = data.getlist("dates") if hasattr(data, "getlist") else data.get("dates") or []
        if isinstance(dates, str):
            dates = [dates]
        result = container.request_service.submit_requests(
            current_role=current_role(),
            user_id=current_user_id(),
            user_name=current_user_name(),
            dates=dates,
            start_time=time_field(data, "start"),
            end_time=time_field(data, "end"),
            notes=str(data.get("notes") or ""),
        )
        return ok(
            created=result.created_ids,
            failed_dates=[d.strftime("%Y-%m-%d") for d in result.failed_dates],
        ), 201

    @app.route("/requests/<request_id>", methods=["GET"], endpoint="request_detail")
    @login_required
    @json_errors
    def request_detail(request_id: str):
        req = container.request_service.get_request(
            current_role=current_role(), current_user_id=current_user_id(), request_id=request_id
        )
        return ok(request=request_view(req))

    @app.route("/requests/<request_id>", methods=["PATCH"], endpoint="update_request")
    @login_required
    @json_errors
    def update_request(request_id: str):
        data = payload()
        container.request_service.update_request(
            current_role=current_role(),
            current_user_id=current_user_id(),
            request_id=request_id,
            start_time=time_field(data, "start"),
            end_time=time_field(data, "end"),
            notes=str(data.get("notes") or ""),
        )
        return ok()

    @app.route("/requests/<request_id>", methods=["DELETE"], endpoint="delete_request")
    @login_required
    @json_errors
    def delete_request(request_id: str):
        container.request_service.delete(
            current_role=current_role(), current_user_id=current_user_id(), request_id=request_id
        )
        return ok()

    @app.route("/admin/requests", methods=["GET"], endpoint="admin_requests")
    @admin_required
    @json_errors
    def admin_requests():
        items = container.request_service.list_requests(
            work_date=request.args.get("date") or None,
            status=_status_arg(request.args.get("status")),
        )
        return ok(requests=[request_view(r) for r in items])

    @app.route("/admin/requests", methods=["POST"], endpoint="admin_create_request")
    @admin_required
    @json_errors
    def admin_create_request():
        data = payload()
        new_id = container.request_service.create_request(
            current_role=current_role(),
            user_id=str(data.get("user_id") or ""),
            work_date=data.get("date"),
            start_time=time_field(data, "start"),
            end_time=time_field(data, "end"),
            notes=str(data.get("notes") or ""),
            status=_status_arg(data.get("status")) or RequestStatus.APPROVED,
        )
        return ok(id=new_id), 201

    @app.route("/admin/requests/<request_id>/approve", methods=["POST"], endpoint="approve_request")
    @admin_required
    @json_errors
    def approve_request(request_id: str):
        container.request_service.approve(current_role=current_role(), request_id=request_id)
        return ok()

    @app.route("/admin/requests/<request_id>/unapprove", methods=["POST"], endpoint="unapprove_request")
    @admin_required
    @json_errors
    def unapprove_request(request_id: str):
        container.request_service.unapprove(current_role=current_role(), request_id=request_id)
        return ok()

    @app.route("/admin/requests/<request_id>/adjust", methods=["POST"], endpoint="adjust_request")
    @admin_required
    @json_errors
    def adjust_request(request_id: str):
        data = payload()
        shift_id = container.request_service.approve_with_adjustment(
            current_role=current_role(),
            request_id=request_id,
            start_time=time_field(data, "start"),
            end_time=time_field(data, "end"),
            notes=str(data.get("notes") or ""),
        )
        return ok(shift_id=shift_id), 201
