from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import hours_between


@dataclass(frozen=True)
class Shift:
    """Domain entity: a confirmed work interval (``HH:MM`` start/end)."""

    shift_id: str
    user_id: str
    user_name: str
    work_date: date
    start_time: str
    end_time: str
    is_confirmed: bool = True
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def hours(self) -> float:
        if not self.start_time or not self.end_time:
            return 0.0
        return hours_between(self.start_time, self.end_time)
