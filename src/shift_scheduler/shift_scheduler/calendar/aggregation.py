"""Per-day grouping, status classification and weekly hour totals.

Everything here is pure: inputs are the immutable records from the snapshot
cache, outputs are new lists and frozen dataclasses. Safe to call from any
number of request threads.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from ..common.datetime_utils import (
    days_in_month,
    hours_between,
    is_weekend,
    make_time_slot,
    start_weekday_of_month,
    weekday_sunday_first,
)
from ..core.enums import RecordKind, RequestStatus
from ..requests.model import ShiftRequest
from ..shifts.model import Shift

R = TypeVar("R")

SUNDAY = 0
SATURDAY = 6


@dataclass(frozen=True)
class ShiftRecord:
    """One calendar entry: a pending request, an approved request or a confirmed shift."""

    record_id: str
    kind: RecordKind
    user_id: str
    user_name: str
    work_date: date
    start_time: str
    end_time: str
    notes: str = ""

    @classmethod
    def from_request(cls, req: ShiftRequest) -> "ShiftRecord":
        if req.status == RequestStatus.PENDING:
            kind = RecordKind.PENDING
        elif req.status == RequestStatus.APPROVED:
            kind = RecordKind.APPROVED
        else:
            raise ValueError(f"Unknown request status: {req.status!r}")
        return cls(
            record_id=req.request_id,
            kind=kind,
            user_id=req.user_id,
            user_name=req.user_name,
            work_date=req.work_date,
            start_time=req.start_time,
            end_time=req.end_time,
            notes=req.notes,
        )

    @classmethod
    def from_shift(cls, shift: Shift) -> "ShiftRecord":
        return cls(
            record_id=shift.shift_id,
            kind=RecordKind.CONFIRMED,
            user_id=shift.user_id,
            user_name=shift.user_name,
            work_date=shift.work_date,
            start_time=shift.start_time,
            end_time=shift.end_time,
            notes=shift.notes,
        )

    @property
    def source(self) -> str:
        return "shift" if self.kind == RecordKind.CONFIRMED else "request"

    @property
    def time_range(self) -> str:
        if not self.start_time and not self.end_time:
            return ""
        return make_time_slot(self.start_time, self.end_time)

    @property
    def hours(self) -> float:
        if not self.start_time or not self.end_time:
            return 0.0
        return hours_between(self.start_time, self.end_time)


@dataclass(frozen=True)
class WeekBucket:
    start_day: int
    end_day: int
    pending_hours: float = 0.0
    approved_hours: float = 0.0


@dataclass(frozen=True)
class CellSpec:
    """One square of the month grid.

    Leading filler cells (before the 1st) have ``is_empty=True`` and no day.
    """

    day: Optional[int]
    work_date: Optional[date]
    is_weekend: bool
    is_empty: bool
    records: Tuple = ()
    is_clickable_empty: bool = False

    @property
    def has_records(self) -> bool:
        return bool(self.records)


def _date_of(record) -> date:
    return record.work_date


def _iso(record) -> str:
    return _date_of(record).strftime("%Y-%m-%d")


def group_by_date(records: Iterable[R]) -> Dict[date, List[R]]:
    """Group records by calendar date, keeping input order inside each day."""
    grouped: Dict[date, List[R]] = OrderedDict()
    for record in records:
        grouped.setdefault(_date_of(record), []).append(record)
    return grouped


def filter_by_month(records: Iterable[R], year_month: str) -> List[R]:
    """Records whose ISO date starts with ``year_month`` (``YYYY-MM``), order kept."""
    return [r for r in records if _iso(r).startswith(year_month)]


def filter_by_user(records: Iterable[R], user_id: str) -> List[R]:
    return [r for r in records if str(r.user_id) == str(user_id)]


def sort_by_date(records: Iterable[R], *, descending: bool = False) -> List[R]:
    # sorted() is stable, so same-day records keep their relative order.
    return sorted(records, key=_date_of, reverse=descending)


def classify_requests_for_calendar(requests: Iterable[ShiftRequest]) -> Dict[str, List[ShiftRequest]]:
    """Partition requests by status.

    Raises ``ValueError`` on a status that is neither pending nor approved
    rather than dropping the record.
    """
    out: Dict[str, List[ShiftRequest]] = {"pending": [], "approved": []}
    for req in requests:
        if req.status == RequestStatus.PENDING:
            out["pending"].append(req)
        elif req.status == RequestStatus.APPROVED:
            out["approved"].append(req)
        else:
            raise ValueError(f"Unknown request status for {req.request_id}: {req.status!r}")
    return out


def to_shift_records(
    requests: Iterable[ShiftRequest] = (),
    shifts: Iterable[Shift] = (),
) -> List[ShiftRecord]:
    """Requests first (in input order), then confirmed shifts."""
    records = [ShiftRecord.from_request(r) for r in requests]
    records.extend(ShiftRecord.from_shift(s) for s in shifts if s.is_confirmed)
    return records


def approved_requests_as_shifts(requests: Iterable[ShiftRequest]) -> List[Shift]:
    """Treat approved requests as confirmed shifts (staff page view)."""
    return [
        Shift(
            shift_id=r.request_id,
            user_id=r.user_id,
            user_name=r.user_name,
            work_date=r.work_date,
            start_time=r.start_time,
            end_time=r.end_time,
            is_confirmed=True,
            notes=r.notes,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )
        for r in requests
        if r.status == RequestStatus.APPROVED
    ]


def compute_weekly_totals(
    year: int,
    month: int,
    requests: Sequence[ShiftRequest],
    shifts: Sequence[Shift] = (),
) -> List[WeekBucket]:
    """Pending and approved hours per Sunday-to-Saturday week of the month.

    A week opens on Sunday or on day 1 and closes on Saturday or on the last
    day, so the first and last buckets may be shorter than seven days. Pending
    request hours count as pending; approved request hours and confirmed shift
    hours count as approved. Records outside the month are ignored.
    """
    last_day = days_in_month(year, month)
    requests_by_date = group_by_date(requests)
    shifts_by_date = group_by_date(shifts)

    buckets: List[WeekBucket] = []
    start_day = 1
    pending = 0.0
    approved = 0.0

    for day in range(1, last_day + 1):
        current = date(int(year), int(month), day)
        dow = weekday_sunday_first(current)

        if dow == SUNDAY or day == 1:
            start_day = day
            pending = 0.0
            approved = 0.0

        for req in requests_by_date.get(current, ()):
            if req.status == RequestStatus.PENDING:
                pending += req.hours
            elif req.status == RequestStatus.APPROVED:
                approved += req.hours
            else:
                raise ValueError(f"Unknown request status for {req.request_id}: {req.status!r}")

        for shift in shifts_by_date.get(current, ()):
            approved += shift.hours

        if dow == SATURDAY or day == last_day:
            buckets.append(
                WeekBucket(start_day=start_day, end_day=day, pending_hours=pending, approved_hours=approved)
            )

    return buckets


def calendar_cells_for_month(
    year: int,
    month: int,
    records_by_date: Mapping[Union[date, str], Sequence],
) -> List[CellSpec]:
    """``start_weekday + days_in_month`` cells: leading blanks, then one per day."""
    lead = start_weekday_of_month(year, month)
    cells: List[CellSpec] = [
        CellSpec(day=None, work_date=None, is_weekend=False, is_empty=True) for _ in range(lead)
    ]

    for day in range(1, days_in_month(year, month) + 1):
        current = date(int(year), int(month), day)
        records = records_by_date.get(current)
        if records is None:
            records = records_by_date.get(current.strftime("%Y-%m-%d"), ())
        weekend = is_weekend(year, month, day)
        cells.append(
            CellSpec(
                day=day,
                work_date=current,
                is_weekend=weekend,
                is_empty=False,
                records=tuple(records),
                is_clickable_empty=not weekend and not records,
            )
        )
    return cells
