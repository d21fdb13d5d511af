from __future__ import annotations

import logging

from flask import Flask, session

from ..common.datetime_utils import hour_options, minute_options, staff_time_options
from ..common.web import admin_required, current_role, current_user_id, fail, json_errors, login_required, ok, payload
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .service import public_user

logger = logging.getLogger(__name__)


def _role_from(value) -> Role:
    try:
        return Role(value or Role.STAFF.value)
    except ValueError:
        raise ValidationError("Invalid account type")


def register(app: Flask, container: Container) -> None:
    @app.route("/login/choices", methods=["GET"], endpoint="login_choices")
    @json_errors
    def login_choices():
        return ok(users=container.auth_service.list_login_choices())

    @app.route("/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        data = payload()
        s_user = container.auth_service.authenticate(str(data.get("user_id") or ""), str(data.get("password") or ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        logger.info("User %s logged in as %s", s_user.user_id, s_user.role.value)
        return ok(user={"id": s_user.user_id, "name": s_user.name, "role": s_user.role.value})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(user={"id": session["user_id"], "name": session.get("name"), "role": session.get("role")})

    @app.route("/time-options", methods=["GET"], endpoint="time_options")
    def time_options():
        return ok(hours=hour_options(), minutes=minute_options(), staff_times=staff_time_options())

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    @json_errors
    def admin_users():
        return ok(users=[public_user(u) for u in container.user_service.list_users()])

    @app.route("/admin/users/<user_id>", methods=["GET"], endpoint="admin_user_detail")
    @admin_required
    @json_errors
    def admin_user_detail(user_id: str):
        return ok(user=public_user(container.user_service.get_user(user_id)))

    @app.route("/admin/users", methods=["POST"], endpoint="add_user")
    @admin_required
    @json_errors
    def add_user():
        data = payload()
        new_id = container.user_service.create_user(
            current_role=current_role(),
            name=str(data.get("name") or ""),
            password=str(data.get("password") or ""),
            role=_role_from(data.get("role")),
        )
        return ok(id=new_id), 201

    @app.route("/admin/users/<user_id>", methods=["PATCH"], endpoint="update_user")
    @admin_required
    @json_errors
    def update_user(user_id: str):
        data = payload()
        report = container.user_service.update_user(
            current_role=current_role(),
            user_id=user_id,
            name=data.get("name"),
            password=data.get("password") or None,
            role=_role_from(data["role"]) if data.get("role") else None,
        )
        if not report.ok:
            return fail("User saved, but some shifts still show the old name", 207, report=report.as_dict())
        return ok(report=report.as_dict())

    @app.route("/admin/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    @json_errors
    def delete_user(user_id: str):
        report = container.user_service.delete_user(
            current_role=current_role(),
            current_user_id=current_user_id(),
            user_id=user_id,
        )
        return ok(report=report.as_dict())
