from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def list_all(self, *, limit: Optional[int] = None) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(
        self,
        shift_id: str,
        *,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        notes: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, shift_id: str) -> bool:
        raise NotImplementedError
