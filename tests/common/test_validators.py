from __future__ import annotations

from datetime import date

import pytest

from src.shift_scheduler.shift_scheduler.common.validators import (
    require_date,
    require_min_length,
    require_non_empty,
    require_time,
    require_time_range,
)
from src.shift_scheduler.shift_scheduler.core.exceptions import ValidationError


def test_require_non_empty_strips():
    assert require_non_empty("  Hanako ", "Name") == "Hanako"
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty("   ", "Name")


def test_require_min_length():
    assert require_min_length("secret", "Password", 6) == "secret"
    with pytest.raises(ValidationError):
        require_min_length("short", "Password", 6)


def test_require_date():
    assert require_date("2025-03-01") == date(2025, 3, 1)
    assert require_date(date(2025, 3, 1)) == date(2025, 3, 1)
    with pytest.raises(ValidationError, match="select a date"):
        require_date("")
    with pytest.raises(ValidationError):
        require_date("03/01/2025")


def test_require_time_normalizes():
    assert require_time("9:30", "start time") == "09:30"
    with pytest.raises(ValidationError):
        require_time("25:00", "start time")
    with pytest.raises(ValidationError):
        require_time("noon", "start time")
    with pytest.raises(ValidationError, match="select the start time"):
        require_time("", "start time")


def test_require_time_range_rejects_end_before_start():
    assert require_time_range("09:00", "12:00") == ("09:00", "12:00")
    with pytest.raises(ValidationError, match="End time must be after start time"):
        require_time_range("12:00", "12:00")
    with pytest.raises(ValidationError):
        require_time_range("13:00", "09:00")
