from __future__ import annotations

from typing import List, Sequence

from ..cache.data_cache import CacheSnapshot, ScheduleDataCache
from ..common.datetime_utils import month_key
from ..core.exceptions import ValidationError
from ..requests.model import ShiftRequest
from ..shifts.model import Shift
from .aggregation import (
    ShiftRecord,
    approved_requests_as_shifts,
    calendar_cells_for_month,
    classify_requests_for_calendar,
    compute_weekly_totals,
    filter_by_month,
    filter_by_user,
    group_by_date,
    to_shift_records,
)
from .view import build_month_view


def _require_month(year: int, month: int) -> None:
    if not (1 <= int(month) <= 12) or int(year) < 1:
        raise ValidationError("Invalid month")


def _ordered_records(requests: Sequence[ShiftRequest], shifts: Sequence[Shift]) -> List[ShiftRecord]:
    # Per day: pending first, then approved requests, then confirmed shifts.
    classified = classify_requests_for_calendar(requests)
    return to_shift_records(classified["pending"] + classified["approved"], shifts)


class CalendarService:
    """Use case: month calendars and weekly totals for admin and staff pages."""

    def __init__(self, cache: ScheduleDataCache):
        self._cache = cache

    def _snapshot(self) -> CacheSnapshot:
        return self._cache.get()

    def _month_view(self, year: int, month: int, records: Sequence[ShiftRecord], **kwargs) -> dict:
        cells = calendar_cells_for_month(year, month, group_by_date(records))
        return build_month_view(year, month, cells, **kwargs)

    def admin_overview(self, *, year: int, month: int) -> dict:
        """Two calendars: pending requests, and approved requests plus confirmed shifts."""
        _require_month(year, month)
        snap = self._snapshot()
        key = month_key(year, month)

        classified = classify_requests_for_calendar(filter_by_month(snap.requests, key))
        confirmed = [s for s in filter_by_month(snap.shifts, key) if s.is_confirmed]

        pending_records = to_shift_records(classified["pending"])
        approved_records = to_shift_records(classified["approved"], confirmed)
        return {
            "pending": self._month_view(year, month, pending_records),
            "approved": self._month_view(year, month, approved_records),
        }

    def management_calendar(self, *, year: int, month: int, user_id: str) -> dict:
        """One staff member's month with every status, plus weekly hour totals."""
        _require_month(year, month)
        if not user_id:
            raise ValidationError("Please select a staff member")
        snap = self._snapshot()
        key = month_key(year, month)

        requests = filter_by_month(filter_by_user(snap.requests, user_id), key)
        shifts = [s for s in filter_by_month(filter_by_user(snap.shifts, user_id), key) if s.is_confirmed]

        weeks = compute_weekly_totals(year, month, requests, shifts)
        return self._month_view(year, month, _ordered_records(requests, shifts), weekly_totals=weeks)

    def staff_calendar(self, *, year: int, month: int, user_id: str) -> dict:
        """A staff member's own month.

        Approved requests are shown as confirmed shifts, next to the shifts an
        admin confirmed directly. Duplicates for one day are all kept.
        """
        _require_month(year, month)
        snap = self._snapshot()
        key = month_key(year, month)

        mine = filter_by_month(filter_by_user(snap.requests, user_id), key)
        classified = classify_requests_for_calendar(mine)
        confirmed = approved_requests_as_shifts(classified["approved"])
        confirmed += [s for s in filter_by_month(filter_by_user(snap.shifts, user_id), key) if s.is_confirmed]

        # Confirmed first, then pending, as the staff page lists them.
        records = to_shift_records(shifts=confirmed) + to_shift_records(classified["pending"])
        weeks = compute_weekly_totals(year, month, classified["pending"], confirmed)
        return self._month_view(year, month, records, weekly_totals=weeks)
