from __future__ import annotations

from typing import List, Optional

from ..cache.data_cache import ScheduleDataCache
from ..calendar.aggregation import approved_requests_as_shifts, filter_by_month, filter_by_user, sort_by_date
from ..common.validators import optional_text, require_date, require_time_range
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.repository import UserRepository
from .model import Shift
from .repository import ShiftRepository


class ShiftService:
    """Use case: confirmed shifts created and edited directly by admins."""

    def __init__(self, shifts: ShiftRepository, users: UserRepository, cache: ScheduleDataCache):
        self._shifts = shifts
        self._users = users
        self._cache = cache

    def get_shift(self, shift_id: str) -> Shift:
        shift = self._shifts.get_by_id(str(shift_id))
        if not shift:
            raise ValidationError("Shift not found")
        return shift

    def create_shift(
        self,
        *,
        current_role: Role,
        user_id: str,
        work_date,
        start_time: str,
        end_time: str,
        notes: str = "",
    ) -> str:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if not user_id:
            raise ValidationError("Please select a staff member")

        work_date = require_date(work_date)
        start, end = require_time_range(start_time, end_time)
        user = self._users.get_by_id(str(user_id))
        if not user:
            raise ValidationError("User not found")

        try:
            return self._shifts.create(
                user_id=user.user_id,
                user_name=user.name,
                work_date=work_date,
                start_time=start,
                end_time=end,
                notes=optional_text(notes),
            )
        finally:
            self._cache.invalidate()

    def update_shift(
        self,
        *,
        current_role: Role,
        shift_id: str,
        start_time: str,
        end_time: str,
        notes: str = "",
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        start, end = require_time_range(start_time, end_time)
        shift = self.get_shift(shift_id)
        try:
            self._shifts.update(shift.shift_id, start_time=start, end_time=end, notes=optional_text(notes))
        finally:
            self._cache.invalidate()

    def delete_shift(self, *, current_role: Role, shift_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        shift = self.get_shift(shift_id)
        try:
            self._shifts.delete(shift.shift_id)
        finally:
            self._cache.invalidate()

    def list_confirmed(self, *, year_month: Optional[str] = None, user_id: Optional[str] = None) -> List[Shift]:
        """Confirmed shifts, oldest date first."""
        items = [s for s in self._cache.get().shifts if s.is_confirmed]
        if user_id:
            items = filter_by_user(items, user_id)
        if year_month:
            items = filter_by_month(items, year_month)
        return sort_by_date(items)

    def list_my_confirmed(self, *, user_id: str, year_month: Optional[str] = None) -> List[Shift]:
        """A staff member's confirmed shifts plus approved requests shown as shifts, oldest first."""
        snap = self._cache.get()
        requests = filter_by_user(snap.requests, user_id)
        shifts = [s for s in filter_by_user(snap.shifts, user_id) if s.is_confirmed]
        if year_month:
            requests = filter_by_month(requests, year_month)
            shifts = filter_by_month(shifts, year_month)
        return sort_by_date(approved_requests_as_shifts(requests) + shifts)
