from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ApiError(DomainError):
    """Base class for failures talking to the remote table API."""


class TransportError(ApiError):
    """Connection failure or timeout, raised once retries are exhausted."""


class ApiStatusError(ApiError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str, *, url: Optional[str] = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = int(status_code)
        self.message = message
        self.url = url


class MalformedResponseError(ApiError):
    """The API answered with a body of an unexpected shape."""


class CascadeError(DomainError):
    """Some operations of a best-effort batch failed.

    The completed operations are not rolled back; ``report`` lists both sides.
    """

    def __init__(self, message: str, report):
        super().__init__(message)
        self.report = report
