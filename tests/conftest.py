from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.shift_scheduler.shift_scheduler.container import wire_container
from src.shift_scheduler.shift_scheduler.core.enums import RequestStatus, Role
from src.shift_scheduler.shift_scheduler.core.exceptions import TransportError
from src.shift_scheduler.shift_scheduler.requests.model import ShiftRequest
from src.shift_scheduler.shift_scheduler.shifts.model import Shift
from src.shift_scheduler.shift_scheduler.users.model import User

# Cheap hashing keeps the suite fast.
FAST_HASH = "pbkdf2:sha256:1000"


def make_user(user_id: str, name: str, role: Role = Role.STAFF, *, password: str = "secret1", created_ms: int = 0) -> User:
    return User(
        user_id=user_id,
        name=name,
        role=role,
        password_hash=generate_password_hash(password, method=FAST_HASH),
        created_at=datetime.fromtimestamp(created_ms / 1000, tz=timezone.utc) if created_ms else None,
    )


def make_request(
    request_id: str,
    user_id: str,
    work_date: str,
    slot: str = "09:30-12:00",
    status: RequestStatus = RequestStatus.PENDING,
    *,
    user_name: str = "",
) -> ShiftRequest:
    return ShiftRequest(
        request_id=request_id,
        user_id=user_id,
        user_name=user_name or f"user-{user_id}",
        work_date=date.fromisoformat(work_date),
        time_slots=(slot,),
        status=status,
    )


def make_shift(shift_id: str, user_id: str, work_date: str, start: str = "10:00", end: str = "15:00", *, user_name: str = "") -> Shift:
    return Shift(
        shift_id=shift_id,
        user_id=user_id,
        user_name=user_name or f"user-{user_id}",
        work_date=date.fromisoformat(work_date),
        start_time=start,
        end_time=end,
    )


class InMemoryUsers:
    def __init__(self, users=()):
        self.users = {u.user_id: u for u in users}
        self._next_id = 100
        self.list_calls = 0

    def list_all(self):
        self.list_calls += 1
        return list(self.users.values())

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(str(user_id))

    def create_user(self, *, name, role, password_hash):
        self._next_id += 1
        uid = f"u{self._next_id}"
        self.users[uid] = User(user_id=uid, name=name, role=role, password_hash=password_hash)
        return uid

    def update_user(self, user_id, *, name=None, role=None, password_hash=None):
        user = self.users.get(str(user_id))
        if not user:
            return False
        changes = {}
        if name is not None:
            changes["name"] = name
        if role is not None:
            changes["role"] = role
        if password_hash is not None:
            changes["password_hash"] = password_hash
        self.users[user.user_id] = replace(user, **changes)
        return True

    def delete_by_id(self, user_id):
        return self.users.pop(str(user_id), None) is not None


class InMemoryShifts:
    def __init__(self, shifts=()):
        self.shifts = {s.shift_id: s for s in shifts}
        self._next_id = 500
        self.fail_ids: set[str] = set()
        self.fail_list = False
        self.list_calls = 0

    def list_all(self, *, limit=None):
        self.list_calls += 1
        if self.fail_list:
            raise TransportError("shifts unavailable")
        rows = list(self.shifts.values())
        return rows[:limit] if limit else rows

    def get_by_id(self, shift_id):
        return self.shifts.get(str(shift_id))

    def create(self, *, user_id, user_name, work_date, start_time, end_time, notes=""):
        self._next_id += 1
        sid = f"s{self._next_id}"
        self.shifts[sid] = Shift(
            shift_id=sid,
            user_id=user_id,
            user_name=user_name,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            notes=notes,
        )
        return sid

    def update(self, shift_id, *, start_time=None, end_time=None, notes=None, user_name=None):
        if shift_id in self.fail_ids:
            raise TransportError(f"cannot update {shift_id}")
        shift = self.shifts[shift_id]
        changes = {k: v for k, v in {
            "start_time": start_time, "end_time": end_time, "notes": notes, "user_name": user_name,
        }.items() if v is not None}
        self.shifts[shift_id] = replace(shift, **changes)
        return True

    def delete(self, shift_id):
        if shift_id in self.fail_ids:
            raise TransportError(f"cannot delete {shift_id}")
        return self.shifts.pop(shift_id, None) is not None


class InMemoryRequests:
    def __init__(self, requests=()):
        self.requests = {r.request_id: r for r in requests}
        self._next_id = 900
        self.fail_dates: set[date] = set()
        self.fail_ids: set[str] = set()
        self.create_calls = 0
        self.list_calls = 0

    def list_all(self, *, limit=None):
        self.list_calls += 1
        rows = list(self.requests.values())
        return rows[:limit] if limit else rows

    def get(self, request_id):
        return self.requests.get(str(request_id))

    def create(self, *, user_id, user_name, work_date, time_slots, status, notes=""):
        self.create_calls += 1
        if work_date in self.fail_dates:
            raise TransportError(f"cannot create {work_date}")
        self._next_id += 1
        rid = f"r{self._next_id}"
        self.requests[rid] = ShiftRequest(
            request_id=rid,
            user_id=user_id,
            user_name=user_name,
            work_date=work_date,
            time_slots=tuple(time_slots),
            status=status,
            notes=notes,
        )
        return rid

    def update(self, request_id, *, time_slots=None, status=None, notes=None, user_name=None):
        if request_id in self.fail_ids:
            raise TransportError(f"cannot update {request_id}")
        req = self.requests[request_id]
        changes = {}
        if time_slots is not None:
            changes["time_slots"] = tuple(time_slots)
        if status is not None:
            changes["status"] = status
        if notes is not None:
            changes["notes"] = notes
        if user_name is not None:
            changes["user_name"] = user_name
        self.requests[request_id] = replace(req, **changes)
        return True

    def delete(self, request_id):
        if request_id in self.fail_ids:
            raise TransportError(f"cannot delete {request_id}")
        return self.requests.pop(request_id, None) is not None


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user("u1", "Admin", Role.ADMIN, password="adminpw"),
            make_user("u2", "Hanako", created_ms=2000),
            make_user("u3", "Taro", created_ms=1000),
        ]
    )


@pytest.fixture
def shifts_repo():
    return InMemoryShifts([make_shift("s1", "u2", "2025-03-04", user_name="Hanako")])


@pytest.fixture
def requests_repo():
    return InMemoryRequests(
        [
            make_request("r1", "u2", "2025-03-03", user_name="Hanako"),
            make_request("r2", "u2", "2025-03-05", "13:00-18:00", RequestStatus.APPROVED, user_name="Hanako"),
            make_request("r3", "u3", "2025-03-05", user_name="Taro"),
        ]
    )


@pytest.fixture
def container(users_repo, shifts_repo, requests_repo):
    return wire_container(users_repo, shifts_repo, requests_repo)
