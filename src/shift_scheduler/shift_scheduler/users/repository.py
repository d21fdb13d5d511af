from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note: services depend on this interface, not on the HTTP implementation.
    """

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, role: Role, password_hash: str) -> str:
        raise NotImplementedError

    def update_user(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        password_hash: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        raise NotImplementedError
