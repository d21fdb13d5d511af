from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import hours_between, split_time_slot
from ..core.enums import RequestStatus


@dataclass(frozen=True)
class ShiftRequest:
    """A desired (pending) or approved work interval for one staff member.

    Only the first entry of ``time_slots`` is ever used.
    """

    request_id: str
    user_id: str
    user_name: str
    work_date: date
    time_slots: Tuple[str, ...]
    status: RequestStatus
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def primary_slot(self) -> str:
        return self.time_slots[0] if self.time_slots else ""

    @property
    def start_time(self) -> str:
        return split_time_slot(self.primary_slot)[0]

    @property
    def end_time(self) -> str:
        return split_time_slot(self.primary_slot)[1]

    @property
    def hours(self) -> float:
        if not self.start_time or not self.end_time:
            return 0.0
        return hours_between(self.start_time, self.end_time)

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
