from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from ..cache.data_cache import ScheduleDataCache
from ..common.batch import CascadeReport
from ..common.datetime_utils import make_time_slot
from ..common.validators import optional_text, require_date, require_time_range
from ..core.enums import RequestStatus, Role
from ..core.exceptions import ApiError, AuthorizationError, CascadeError, ValidationError
from ..shifts.repository import ShiftRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import ShiftRequest
from .repository import ShiftRequestRepository

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    created_ids: List[str] = field(default_factory=list)
    failed_dates: List[date] = field(default_factory=list)


class RequestService:
    """Use case: submit, review and transition shift requests.

    Status transitions: pending -> approved (approve), approved -> pending
    (unapprove), either -> removed (delete).
    """

    def __init__(
        self,
        requests: ShiftRequestRepository,
        shifts: ShiftRepository,
        users: UserRepository,
        cache: ScheduleDataCache,
    ):
        self._requests = requests
        self._shifts = shifts
        self._users = users
        self._cache = cache

    def _get(self, request_id: str) -> ShiftRequest:
        req = self._requests.get(str(request_id))
        if not req:
            raise ValidationError("Request not found")
        return req

    def _staff_user(self, user_id: str) -> User:
        user = self._users.get_by_id(str(user_id))
        if not user:
            raise ValidationError("User not found")
        if user.role != Role.STAFF:
            raise ValidationError("Shifts can only be assigned to staff")
        return user

    def submit_requests(
        self,
        *,
        current_role: Role,
        user_id: str,
        user_name: str,
        dates: Sequence,
        start_time: str,
        end_time: str,
        notes: str = "",
    ) -> SubmissionResult:
        """Staff: request the same slot on one or more dates."""
        if current_role != Role.STAFF:
            raise AuthorizationError("Only staff can submit shift requests")
        if not dates:
            raise ValidationError("Please select at least one date")

        work_dates = [require_date(d) for d in dates]
        start, end = require_time_range(start_time, end_time)
        slot = make_time_slot(start, end)
        notes = optional_text(notes)

        result = SubmissionResult()
        last_error: Optional[ApiError] = None
        try:
            for work_date in work_dates:
                try:
                    rid = self._requests.create(
                        user_id=str(user_id),
                        user_name=user_name,
                        work_date=work_date,
                        time_slots=[slot],
                        status=RequestStatus.PENDING,
                        notes=notes,
                    )
                    result.created_ids.append(rid)
                except ApiError as e:
                    logger.warning("Request for %s on %s failed: %s", user_id, work_date, e)
                    result.failed_dates.append(work_date)
                    last_error = e
        finally:
            self._cache.invalidate()

        if not result.created_ids and last_error is not None:
            raise last_error
        return result

    def create_request(
        self,
        *,
        current_role: Role,
        user_id: str,
        work_date,
        start_time: str,
        end_time: str,
        notes: str = "",
        status: RequestStatus = RequestStatus.APPROVED,
    ) -> str:
        """Admin: create a request on behalf of a staff member."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if not user_id:
            raise ValidationError("Please select a staff member")

        work_date = require_date(work_date)
        start, end = require_time_range(start_time, end_time)
        user = self._staff_user(user_id)

        try:
            return self._requests.create(
                user_id=user.user_id,
                user_name=user.name,
                work_date=work_date,
                time_slots=[make_time_slot(start, end)],
                status=RequestStatus(status),
                notes=optional_text(notes),
            )
        finally:
            self._cache.invalidate()

    def get_request(self, *, current_role: Role, current_user_id: str, request_id: str) -> ShiftRequest:
        req = self._get(request_id)
        if current_role != Role.ADMIN and req.user_id != str(current_user_id):
            raise AuthorizationError("You do not have permission")
        return req

    def update_request(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        request_id: str,
        start_time: str,
        end_time: str,
        notes: str = "",
    ) -> None:
        start, end = require_time_range(start_time, end_time)
        req = self._get(request_id)

        if current_role != Role.ADMIN:
            if req.user_id != str(current_user_id):
                raise AuthorizationError("You do not have permission")
            if not req.is_pending:
                raise ValidationError("Approved requests cannot be edited")

        try:
            self._requests.update(req.request_id, time_slots=[make_time_slot(start, end)], notes=optional_text(notes))
        finally:
            self._cache.invalidate()

    def approve(self, *, current_role: Role, request_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        req = self._get(request_id)
        if req.status == RequestStatus.APPROVED:
            return

        try:
            self._requests.update(req.request_id, status=RequestStatus.APPROVED)
        finally:
            self._cache.invalidate()

    def unapprove(self, *, current_role: Role, request_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        req = self._get(request_id)
        if req.status != RequestStatus.APPROVED:
            raise ValidationError("Request is not approved")

        try:
            self._requests.update(req.request_id, status=RequestStatus.PENDING)
        finally:
            self._cache.invalidate()

    def delete(self, *, current_role: Role, current_user_id: str, request_id: str) -> None:
        req = self._get(request_id)

        if current_role != Role.ADMIN:
            if req.user_id != str(current_user_id):
                raise AuthorizationError("You do not have permission")
            if not req.is_pending:
                raise ValidationError("Approved requests cannot be deleted")

        try:
            self._requests.delete(req.request_id)
        finally:
            self._cache.invalidate()

    def approve_with_adjustment(
        self,
        *,
        current_role: Role,
        request_id: str,
        start_time: str,
        end_time: str,
        notes: str = "",
    ) -> str:
        """Admin: confirm a request with adjusted times.

        Creates a confirmed shift copying the request's user and date, then
        marks the request approved. Returns the new shift id. When the approval
        fails after the shift exists, ``CascadeError`` names the created shift.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        start, end = require_time_range(start_time, end_time)
        req = self._get(request_id)

        try:
            shift_id = self._shifts.create(
                user_id=req.user_id,
                user_name=req.user_name,
                work_date=req.work_date,
                start_time=start,
                end_time=end,
                notes=optional_text(notes),
            )
            if req.status != RequestStatus.APPROVED:
                try:
                    self._requests.update(req.request_id, status=RequestStatus.APPROVED)
                except ApiError as e:
                    report = CascadeReport(
                        succeeded=[f"shift:{shift_id}"],
                        failed=[(f"request:{req.request_id}", str(e))],
                    )
                    raise CascadeError(
                        f"Shift {shift_id} was created but request {req.request_id} is still pending", report
                    ) from e
            return shift_id
        finally:
            self._cache.invalidate()

    def list_requests(
        self,
        *,
        work_date=None,
        status: Optional[RequestStatus] = None,
    ) -> List[ShiftRequest]:
        """Admin list: optional date and status filters, newest date first."""
        items = list(self._cache.get().requests)
        if work_date:
            d = require_date(work_date)
            items = [r for r in items if r.work_date == d]
        if status is not None:
            items = [r for r in items if r.status == RequestStatus(status)]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items

    def list_my_requests(self, *, user_id: str, year_month: Optional[str] = None) -> List[ShiftRequest]:
        """Staff list: own requests of every status, newest date first."""
        items = [r for r in self._cache.get().requests if r.user_id == str(user_id)]
        if year_month:
            items = [r for r in items if r.work_date.strftime("%Y-%m-%d").startswith(year_month)]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items
