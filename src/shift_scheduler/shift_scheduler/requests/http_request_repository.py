from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import TableClient, normalize_timestamp, require_field
from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_FETCH_LIMIT, REQUESTS_TABLE
from ..core.enums import RequestStatus
from ..core.exceptions import MalformedResponseError
from .model import ShiftRequest
from .repository import ShiftRequestRepository


def request_from_row(row: Mapping[str, Any]) -> ShiftRequest:
    try:
        status = RequestStatus(str(require_field(row, "status")))
    except ValueError as e:
        raise MalformedResponseError(f"Unknown request status: {row.get('status')!r}") from e
    try:
        work_date = parse_iso_date(str(require_field(row, "date")))
    except ValueError as e:
        raise MalformedResponseError(f"Invalid request date: {row.get('date')!r}") from e

    slots = row.get("time_slots") or []
    if isinstance(slots, str):
        slots = [slots]
    return ShiftRequest(
        request_id=str(require_field(row, "id")),
        user_id=str(require_field(row, "user_id")),
        user_name=str(row.get("user_name") or ""),
        work_date=work_date,
        time_slots=tuple(str(s) for s in slots),
        status=status,
        notes=str(row.get("notes") or ""),
        created_at=normalize_timestamp(row.get("created_at")),
        updated_at=normalize_timestamp(row.get("updated_at")),
    )


class HttpShiftRequestRepository(ShiftRequestRepository):
    def __init__(self, conn: ApiConnection, *, default_limit: int = DEFAULT_FETCH_LIMIT):
        self._table = TableClient(conn, REQUESTS_TABLE)
        self._default_limit = int(default_limit)

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[ShiftRequest]:
        rows = self._table.list(limit=limit or self._default_limit)
        return [request_from_row(r) for r in rows]

    def get(self, request_id: str) -> Optional[ShiftRequest]:
        row = self._table.get(str(request_id))
        return request_from_row(row) if row else None

    def create(
        self,
        *,
        user_id: str,
        user_name: str,
        work_date: date,
        time_slots: Sequence[str],
        status: RequestStatus,
        notes: str = "",
    ) -> str:
        created = self._table.create(
            {
                "user_id": str(user_id),
                "user_name": user_name,
                "date": work_date.strftime("%Y-%m-%d"),
                "time_slots": list(time_slots),
                "status": status.value,
                "notes": notes,
            }
        )
        return str(created.get("id") or "")

    def update(
        self,
        request_id: str,
        *,
        time_slots: Optional[Sequence[str]] = None,
        status: Optional[RequestStatus] = None,
        notes: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> bool:
        changes: dict[str, Any] = {}
        if time_slots is not None:
            changes["time_slots"] = list(time_slots)
        if status is not None:
            changes["status"] = status.value
        if notes is not None:
            changes["notes"] = notes
        if user_name is not None:
            changes["user_name"] = user_name
        if not changes:
            return False
        self._table.update(str(request_id), changes)
        return True

    def delete(self, request_id: str) -> bool:
        self._table.delete(str(request_id))
        return True
