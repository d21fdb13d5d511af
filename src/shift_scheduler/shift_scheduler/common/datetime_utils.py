"""Naive calendar-date and HH:MM helpers.

Dates are calendar days, never instants: nothing here touches time zones.
Weekday numbers follow the calendar grid, ``0 = Sunday`` .. ``6 = Saturday``.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union

from ..core.constants import FIRST_WORK_HOUR, LAST_WORK_HOUR, MINUTE_STEPS, WEEKDAY_LABELS

DateLike = Union[date, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_year_month(value: str) -> Tuple[int, int]:
    """Parse a ``YYYY-MM`` month key into ``(year, month)``."""
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def month_key(year: int, month: int) -> str:
    return f"{int(year):04d}-{int(month):02d}"


def iso_date(year: int, month: int, day: int) -> str:
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def to_minutes(value: str) -> int:
    hour, minute = value.split(":")[:2]
    return int(hour) * 60 + int(minute)


def hours_between(start: str, end: str) -> float:
    """Hours from ``start`` to ``end`` (both ``HH:MM``).

    No wraparound: callers validate ``start < end`` beforehand, otherwise the
    result is zero or negative.
    """
    return (to_minutes(end) - to_minutes(start)) / 60


def time_string(hour: Optional[str], minute: Optional[str]) -> str:
    """Compose ``HH:MM`` from separately picked parts; empty if either is missing."""
    if not hour or not minute:
        return ""
    return f"{hour}:{minute}"


def make_time_slot(start: str, end: str) -> str:
    return f"{start}-{end}"


def split_time_slot(slot: str) -> Tuple[str, str]:
    """Split ``"HH:MM-HH:MM"`` into its two ends.

    A slot without a dash yields ``(slot, "")``.
    """
    start, _, end = (slot or "").partition("-")
    return start.strip(), end.strip()


def weekday_sunday_first(value: date) -> int:
    # date.weekday() is Monday=0; shift so Sunday=0.
    return (value.weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def start_weekday_of_month(year: int, month: int) -> int:
    return weekday_sunday_first(date(int(year), int(month), 1))


def is_weekend(year: int, month: int, day: int) -> bool:
    return weekday_sunday_first(date(int(year), int(month), int(day))) in (0, 6)


def format_display_date(value: DateLike) -> str:
    """Localized ``month/day (weekday)`` label, e.g. ``3月1日（土）``."""
    d = parse_iso_date(value) if isinstance(value, str) else value
    return f"{d.month}月{d.day}日（{WEEKDAY_LABELS[weekday_sunday_first(d)]}）"


def hour_options() -> list[str]:
    return [f"{h:02d}" for h in range(FIRST_WORK_HOUR, LAST_WORK_HOUR + 1)]


def minute_options() -> list[str]:
    return list(MINUTE_STEPS)


def staff_time_options() -> list[str]:
    """Half-hour choices offered to staff: 09:30 through 18:00."""
    times = ["09:30"]
    for hour in range(FIRST_WORK_HOUR + 1, LAST_WORK_HOUR):
        times.append(f"{hour:02d}:00")
        times.append(f"{hour:02d}:30")
    times.append(f"{LAST_WORK_HOUR:02d}:00")
    return times


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
