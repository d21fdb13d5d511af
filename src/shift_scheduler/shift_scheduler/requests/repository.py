from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import ShiftRequest


class ShiftRequestRepository(Protocol):
    def list_all(self, *, limit: Optional[int] = None) -> Sequence[ShiftRequest]:
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[ShiftRequest]:
        raise NotImplementedError

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
        """Returns the new request id."""

        raise NotImplementedError

    def update(
        self,
        request_id: str,
        *,
        time_slots: Optional[Sequence[str]] = None,
        status: Optional[RequestStatus] = None,
        notes: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, request_id: str) -> bool:
        raise NotImplementedError
