from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import format_display_date
from ..core.constants import WEEKDAY_LABELS
from .aggregation import CellSpec, ShiftRecord, WeekBucket


def month_title(year: int, month: int) -> str:
    return f"{int(year)}年{int(month)}月"


def record_view(record: ShiftRecord) -> dict:
    return {
        "id": record.record_id,
        "source": record.source,
        "kind": record.kind.value,
        "user_id": record.user_id,
        "user_name": record.user_name,
        "date": record.work_date.strftime("%Y-%m-%d"),
        "start_time": record.start_time,
        "end_time": record.end_time,
        "time_range": record.time_range,
        "hours": round(record.hours, 2),
        "notes": record.notes,
    }


def cell_view(cell: CellSpec) -> dict:
    if cell.is_empty:
        return {"day": None, "date": None, "is_empty": True, "is_weekend": False, "is_clickable_empty": False, "records": []}

    css = ["calendar-day"]
    if cell.is_weekend:
        css.append("weekend")
    elif cell.has_records:
        css.append("has-shift")
    else:
        css.append("clickable-empty")

    return {
        "day": cell.day,
        "date": cell.work_date.strftime("%Y-%m-%d"),
        "label": format_display_date(cell.work_date),
        "is_empty": False,
        "is_weekend": cell.is_weekend,
        "is_clickable_empty": cell.is_clickable_empty,
        "css_class": " ".join(css),
        "kinds": sorted({r.kind.value for r in cell.records}),
        "records": [record_view(r) for r in cell.records],
    }


def week_total_view(index: int, bucket: WeekBucket) -> dict:
    return {
        "week": index + 1,
        "label": f"第{index + 1}週 {bucket.start_day}日-{bucket.end_day}日",
        "start_day": bucket.start_day,
        "end_day": bucket.end_day,
        "pending_hours": round(bucket.pending_hours, 1),
        "approved_hours": round(bucket.approved_hours, 1),
        "pending_label": f"{bucket.pending_hours:.1f}h",
        "approved_label": f"{bucket.approved_hours:.1f}h",
    }


def build_month_view(
    year: int,
    month: int,
    cells: Sequence[CellSpec],
    *,
    weekly_totals: Optional[Iterable[WeekBucket]] = None,
) -> dict:
    """JSON-ready month grid. Cells keep their ascending day order."""
    out = {
        "title": month_title(year, month),
        "year": int(year),
        "month": int(month),
        "weekday_labels": list(WEEKDAY_LABELS),
        "cells": [cell_view(c) for c in cells],
    }
    if weekly_totals is not None:
        out["weekly_totals"] = [week_total_view(i, b) for i, b in enumerate(weekly_totals)]
    return out
