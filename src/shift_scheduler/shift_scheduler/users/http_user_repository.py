from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import TableClient, normalize_timestamp, require_field
from ..core.constants import USERS_TABLE
from ..core.enums import Role
from ..core.exceptions import MalformedResponseError
from .model import User
from .repository import UserRepository


def user_from_row(row: Mapping[str, Any]) -> User:
    try:
        role = Role(str(require_field(row, "role")))
    except ValueError as e:
        raise MalformedResponseError(f"Unknown role: {row.get('role')!r}") from e
    return User(
        user_id=str(require_field(row, "id")),
        name=str(row.get("name") or ""),
        role=role,
        password_hash=str(row.get("password_hash") or ""),
        created_at=normalize_timestamp(row.get("created_at")),
    )


class HttpUserRepository(UserRepository):
    def __init__(self, conn: ApiConnection):
        self._table = TableClient(conn, USERS_TABLE)

    def list_all(self) -> Sequence[User]:
        return [user_from_row(r) for r in self._table.list()]

    def get_by_id(self, user_id: str) -> Optional[User]:
        row = self._table.get(str(user_id))
        return user_from_row(row) if row else None

    def create_user(self, *, name: str, role: Role, password_hash: str) -> str:
        created = self._table.create({"name": name, "role": role.value, "password_hash": password_hash})
        return str(created.get("id") or "")

    def update_user(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        password_hash: Optional[str] = None,
    ) -> bool:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if role is not None:
            changes["role"] = role.value
        if password_hash is not None:
            changes["password_hash"] = password_hash
        if not changes:
            return False
        self._table.update(str(user_id), changes)
        return True

    def delete_by_id(self, user_id: str) -> bool:
        self._table.delete(str(user_id))
        return True
