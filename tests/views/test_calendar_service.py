from __future__ import annotations

import pytest

from src.shift_scheduler.shift_scheduler.calendar.view import month_title, week_total_view
from src.shift_scheduler.shift_scheduler.calendar.aggregation import WeekBucket
from src.shift_scheduler.shift_scheduler.core.enums import Role
from src.shift_scheduler.shift_scheduler.core.exceptions import ValidationError


def _cell(view: dict, day: int) -> dict:
    return next(c for c in view["cells"] if c["day"] == day)


def test_admin_overview_splits_pending_and_approved(container):
    out = container.calendar_service.admin_overview(year=2025, month=3)
    pending, approved = out["pending"], out["approved"]

    assert pending["title"] == "2025年3月"
    assert len(pending["cells"]) == 37
    assert pending["cells"][0]["is_empty"] is True

    assert [r["id"] for r in _cell(pending, 3)["records"]] == ["r1"]
    assert [r["id"] for r in _cell(pending, 5)["records"]] == ["r3"]
    assert _cell(pending, 4)["records"] == []

    assert [(r["id"], r["kind"]) for r in _cell(approved, 4)["records"]] == [("s1", "confirmed")]
    assert [(r["id"], r["kind"]) for r in _cell(approved, 5)["records"]] == [("r2", "approved")]
    assert "weekly_totals" not in approved


def test_management_calendar_has_weekly_totals(container):
    view = container.calendar_service.management_calendar(year=2025, month=3, user_id="u2")

    week2 = view["weekly_totals"][1]
    assert week2["label"] == "第2週 2日-8日"
    assert week2["pending_hours"] == pytest.approx(2.5)
    assert week2["approved_hours"] == pytest.approx(10.0)
    assert week2["approved_label"] == "10.0h"

    day3 = _cell(view, 3)
    assert day3["css_class"] == "calendar-day has-shift"
    assert day3["label"] == "3月3日（月）"
    record = day3["records"][0]
    assert record["user_name"] == "Hanako"
    assert record["time_range"] == "09:30-12:00"
    assert record["hours"] == 2.5
    assert _cell(view, 5)["records"][0]["user_id"] == "u2"


def test_management_calendar_requires_a_staff_member(container):
    with pytest.raises(ValidationError):
        container.calendar_service.management_calendar(year=2025, month=3, user_id="")


def test_staff_calendar_shows_approved_requests_as_confirmed(container):
    view = container.calendar_service.staff_calendar(year=2025, month=3, user_id="u2")

    assert [(r["id"], r["kind"]) for r in _cell(view, 5)["records"]] == [("r2", "confirmed")]
    assert [r["kind"] for r in _cell(view, 3)["records"]] == ["pending"]
    assert [(r["id"], r["kind"]) for r in _cell(view, 4)["records"]] == [("s1", "confirmed")]
    assert view["weekly_totals"][1]["pending_hours"] == pytest.approx(2.5)
    assert view["weekly_totals"][1]["approved_hours"] == pytest.approx(10.0)


def test_staff_calendar_matches_management_totals(container):
    staff = container.calendar_service.staff_calendar(year=2025, month=3, user_id="u2")
    mgmt = container.calendar_service.management_calendar(year=2025, month=3, user_id="u2")

    assert staff["weekly_totals"] == mgmt["weekly_totals"]


def test_admin_created_shift_appears_for_its_owner(container):
    sid = container.shift_service.create_shift(
        current_role=Role.ADMIN, user_id="u3", work_date="2025-03-10", start_time="09:00", end_time="13:00"
    )

    view = container.calendar_service.staff_calendar(year=2025, month=3, user_id="u3")

    assert [r["id"] for r in _cell(view, 10)["records"]] == [sid]
    assert [r["id"] for r in _cell(view, 5)["records"]] == ["r3"]
    assert view["weekly_totals"][2]["approved_hours"] == pytest.approx(4.0)


def test_adjusted_request_shows_both_confirmed_records(container):
    sid = container.request_service.approve_with_adjustment(
        current_role=Role.ADMIN, request_id="r3", start_time="10:00", end_time="12:00"
    )

    view = container.calendar_service.staff_calendar(year=2025, month=3, user_id="u3")

    assert [r["id"] for r in _cell(view, 5)["records"]] == ["r3", sid]
    assert view["weekly_totals"][1]["approved_hours"] == pytest.approx(4.5)


def test_cells_mark_weekends_and_clickable_days(container):
    view = container.calendar_service.staff_calendar(year=2025, month=3, user_id="u3")

    assert "weekend" in _cell(view, 1)["css_class"]
    assert _cell(view, 4)["is_clickable_empty"] is True
    assert _cell(view, 5)["kinds"] == ["pending"]


def test_invalid_month_is_rejected(container):
    with pytest.raises(ValidationError):
        container.calendar_service.admin_overview(year=2025, month=13)


def test_view_helpers():
    assert month_title(2025, 11) == "2025年11月"
    out = week_total_view(0, WeekBucket(start_day=1, end_day=1, pending_hours=1.5, approved_hours=0))
    assert out["label"] == "第1週 1日-1日"
    assert out["pending_label"] == "1.5h"
    assert out["approved_hours"] == 0
