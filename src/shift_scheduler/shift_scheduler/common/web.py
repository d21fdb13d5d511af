from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Mapping, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    CascadeError,
    ValidationError,
)
from .datetime_utils import month_key, now_local, parse_year_month, time_string

logger = logging.getLogger(__name__)


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def ok(**payload):
    body = {"success": True}
    body.update(payload)
    return jsonify(body)


def json_errors(view):
    """Map domain exceptions to JSON error responses; the process keeps serving."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return fail(str(e), 400)
        except AuthenticationError as e:
            return fail(str(e), 401)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except CascadeError as e:
            logger.warning("%s %s: %s", request.method, request.path, e)
            return fail(str(e), 502, report=e.report.as_dict())
        except ApiError:
            logger.exception("Schedule API call failed during %s %s", request.method, request.path)
            return fail("Could not reach the schedule server, please retry", 502)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please log in to continue", 401)
            if session.get("role") != role.value:
                return fail("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = role_required(Role.ADMIN)
staff_required = role_required(Role.STAFF)


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> str:
    return str(session["user_id"])


def payload() -> Mapping[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def time_field(data: Mapping[str, Any], prefix: str) -> str:
    """``<prefix>_time``, or ``<prefix>_hour`` + ``<prefix>_min`` picked separately."""
    value = data.get(f"{prefix}_time")
    if value:
        return str(value)
    return time_string(data.get(f"{prefix}_hour"), data.get(f"{prefix}_min"))


def month_arg(name: str = "month") -> tuple[int, int]:
    value: Optional[str] = request.args.get(name)
    if not value:
        today = now_local()
        return today.year, today.month
    try:
        return parse_year_month(value)
    except ValueError:
        raise ValidationError("Invalid month (YYYY-MM)")


def month_key_arg(name: str = "month") -> Optional[str]:
    if not request.args.get(name):
        return None
    return month_key(*month_arg(name))


def current_user_name() -> str:
    return str(session.get("name") or "")
