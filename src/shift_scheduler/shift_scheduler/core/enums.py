from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"


class RequestStatus(str, Enum):
    """Approval state of a shift request as stored by the table API."""

    PENDING = "pending"
    APPROVED = "approved"


class RecordKind(str, Enum):
    """What a calendar entry represents."""

    PENDING = "pending"
    APPROVED = "approved"
    CONFIRMED = "confirmed"
