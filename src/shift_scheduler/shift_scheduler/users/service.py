from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..cache.data_cache import ScheduleDataCache
from ..common.batch import CascadeReport, run_batch
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_CASCADE_FETCH_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, CascadeError, ValidationError
from ..requests.repository import ShiftRequestRepository
from ..shifts.repository import ShiftRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    name: str
    role: Role


def public_user(user: User) -> dict:
    """User fields safe to send to a browser."""
    return {
        "id": user.user_id,
        "name": user.name,
        "role": user.role.value,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_login_choices(self) -> List[dict]:
        """Staff in registration order, then admins."""
        users = list(self._users.list_all())
        staff = sorted((u for u in users if u.role != Role.ADMIN), key=lambda u: u.created_at or _EPOCH)
        admins = [u for u in users if u.role == Role.ADMIN]
        return [{"id": u.user_id, "name": u.name, "role": u.role.value} for u in staff + admins]

    def authenticate(self, user_id: str, password: str) -> SessionUser:
        if not user_id:
            raise ValidationError("Please select a user")
        if not password:
            raise ValidationError("Please enter the password")

        user = self._users.get_by_id(str(user_id))
        if not user:
            raise AuthenticationError("Invalid user or password")

        try:
            ok = bool(user.password_hash) and check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. a legacy or corrupted hash value
            ok = False

        if not ok:
            raise AuthenticationError("Invalid user or password")

        return SessionUser(user_id=user.user_id, name=user.name, role=user.role)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(
        self,
        users: UserRepository,
        shifts: ShiftRepository,
        requests: ShiftRequestRepository,
        cache: ScheduleDataCache,
        *,
        cascade_limit: int = DEFAULT_CASCADE_FETCH_LIMIT,
    ):
        self._users = users
        self._shifts = shifts
        self._requests = requests
        self._cache = cache
        self._cascade_limit = int(cascade_limit)

    def list_users(self) -> Sequence[User]:
        return self._cache.get().users

    def list_staff(self) -> List[User]:
        return [u for u in self._cache.get().users if u.role == Role.STAFF]

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(str(user_id))
        if not user:
            raise ValidationError("User not found")
        return user

    def create_user(self, *, current_role: Role, name: str, password: str, role: Role = Role.STAFF) -> str:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        try:
            return self._users.create_user(name=name, role=role, password_hash=generate_password_hash(password))
        finally:
            self._cache.invalidate()

    def update_user(
        self,
        *,
        current_role: Role,
        user_id: str,
        name: Optional[str] = None,
        password: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> CascadeReport:
        """Update a user; a rename is copied onto their shifts and requests.

        Returns the rename cascade report (empty when the name is unchanged).
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self.get_user(user_id)
        new_name = require_non_empty(name, "Name") if name is not None else None
        password_hash = None
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        try:
            self._users.update_user(user.user_id, name=new_name, role=role, password_hash=password_hash)
            if new_name is None or new_name == user.name:
                return CascadeReport()
            report = self._rename_cascade(user.user_id, new_name)
        finally:
            self._cache.invalidate()

        if not report.ok:
            logger.warning("Rename of user %s left %d records with the old name", user.user_id, len(report.failed))
        return report

    def _owned_records(self, user_id: str):
        """Shifts and requests owned by ``user_id``, plus a failure entry per
        listing that hit the fetch limit (rows past it were not seen).
        """
        limit = self._cascade_limit
        all_shifts = list(self._shifts.list_all(limit=limit))
        all_requests = list(self._requests.list_all(limit=limit))

        truncated = [
            (f"{kind}:remaining", f"listing stopped at {limit} rows; more may exist")
            for kind, rows in (("shifts", all_shifts), ("requests", all_requests))
            if len(rows) >= limit
        ]
        if truncated:
            logger.warning("Cascade for user %s hit the fetch limit of %d", user_id, limit)
        shifts = [s for s in all_shifts if s.user_id == user_id]
        requests = [r for r in all_requests if r.user_id == user_id]
        return shifts, requests, truncated

    def _rename_cascade(self, user_id: str, new_name: str) -> CascadeReport:
        shifts, requests, truncated = self._owned_records(user_id)

        tasks = [
            (f"shift:{s.shift_id}", lambda sid=s.shift_id: self._shifts.update(sid, user_name=new_name))
            for s in shifts
        ]
        tasks += [
            (f"request:{r.request_id}", lambda rid=r.request_id: self._requests.update(rid, user_name=new_name))
            for r in requests
        ]
        report = run_batch(tasks)
        report.failed.extend(truncated)
        return report

    def delete_user(self, *, current_role: Role, current_user_id: str, user_id: str) -> CascadeReport:
        """Delete a user together with every shift and request they own.

        The cascade is best-effort and concurrent. When any part of it fails
        the user record is kept (so the delete can be retried) and
        ``CascadeError`` reports what was and was not removed. A listing
        that reaches the fetch limit counts as a failure.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if str(user_id) == str(current_user_id):
            raise ValidationError("You cannot delete your own account")

        user = self.get_user(user_id)
        try:
            shifts, requests, truncated = self._owned_records(user.user_id)

            tasks = [(f"shift:{s.shift_id}", lambda sid=s.shift_id: self._shifts.delete(sid)) for s in shifts]
            tasks += [
                (f"request:{r.request_id}", lambda rid=r.request_id: self._requests.delete(rid)) for r in requests
            ]
            report = run_batch(tasks)
            report.failed.extend(truncated)

            if not report.ok:
                raise CascadeError(
                    f"Could not delete every related record ({len(report.failed)} failures); the user was kept",
                    report,
                )

            self._users.delete_by_id(user.user_id)
            report.succeeded.append(f"user:{user.user_id}")
            logger.info("Deleted user %s with %d related records", user.user_id, len(tasks))
            return report
        finally:
            self._cache.invalidate()
