from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import TableClient, normalize_hhmm, normalize_timestamp, require_field
from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_FETCH_LIMIT, SHIFTS_TABLE
from ..core.exceptions import MalformedResponseError
from .model import Shift
from .repository import ShiftRepository


def shift_from_row(row: Mapping[str, Any]) -> Shift:
    try:
        work_date = parse_iso_date(str(require_field(row, "date")))
    except ValueError as e:
        raise MalformedResponseError(f"Invalid shift date: {row.get('date')!r}") from e
    return Shift(
        shift_id=str(require_field(row, "id")),
        user_id=str(require_field(row, "user_id")),
        user_name=str(row.get("user_name") or ""),
        work_date=work_date,
        start_time=normalize_hhmm(row.get("start_time")),
        end_time=normalize_hhmm(row.get("end_time")),
        is_confirmed=bool(row.get("is_confirmed", True)),
        notes=str(row.get("notes") or ""),
        created_at=normalize_timestamp(row.get("created_at")),
        updated_at=normalize_timestamp(row.get("updated_at")),
    )


class HttpShiftRepository(ShiftRepository):
    def __init__(self, conn: ApiConnection, *, default_limit: int = DEFAULT_FETCH_LIMIT):
        self._table = TableClient(conn, SHIFTS_TABLE)
        self._default_limit = int(default_limit)

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[Shift]:
        rows = self._table.list(limit=limit or self._default_limit)
        return [shift_from_row(r) for r in rows]

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        row = self._table.get(str(shift_id))
        return shift_from_row(row) if row else None

    def create(
        self,
        *,
        user_id: str,
        user_name: str,
        work_date: date,
        start_time: str,
        end_time: str,
        notes: str = "",
    ) -> str:
        created = self._table.create(
            {
                "user_id": str(user_id),
                "user_name": user_name,
                "date": work_date.strftime("%Y-%m-%d"),
                "start_time": start_time,
                "end_time": end_time,
                "is_confirmed": True,
                "notes": notes,
            }
        )
        return str(created.get("id") or "")

    def update(
        self,
        shift_id: str,
        *,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        notes: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> bool:
        changes: dict[str, Any] = {}
        if start_time is not None:
            changes["start_time"] = start_time
        if end_time is not None:
            changes["end_time"] = end_time
        if notes is not None:
            changes["notes"] = notes
        if user_name is not None:
            changes["user_name"] = user_name
        if not changes:
            return False
        self._table.update(str(shift_id), changes)
        return True

    def delete(self, shift_id: str) -> bool:
        self._table.delete(str(shift_id))
        return True
