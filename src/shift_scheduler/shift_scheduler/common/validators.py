from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, to_minutes


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_date(value) -> date:
    if isinstance(value, date):
        return value
    text = (value or "").strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError("Please select a date")
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ValidationError("Invalid date (YYYY-MM-DD)")


def require_time(value: Optional[str], field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"Please select the {field_name}")
    try:
        hour, minute = text.split(":")
        if not (0 <= int(hour) <= 23 and 0 <= int(minute) <= 59):
            raise ValueError(text)
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (HH:MM)")
    return f"{int(hour):02d}:{int(minute):02d}"


def require_time_range(start: Optional[str], end: Optional[str]) -> tuple[str, str]:
    start_t = require_time(start, "start time")
    end_t = require_time(end, "end time")
    if to_minutes(start_t) >= to_minutes(end_t):
        raise ValidationError("End time must be after start time")
    return start_t, end_t


def optional_text(value: Optional[str]) -> str:
    return (value or "").strip()
