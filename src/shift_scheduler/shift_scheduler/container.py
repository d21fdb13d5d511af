from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.connection import ApiConfig, ApiConnection
from .cache.data_cache import ScheduleDataCache, TableSnapshotLoader
from .calendar.service import CalendarService
from .core.constants import (
    DEFAULT_API_BACKOFF_FACTOR,
    DEFAULT_API_MAX_RETRIES,
    DEFAULT_API_TIMEOUT_SECONDS,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_CASCADE_FETCH_LIMIT,
    DEFAULT_FETCH_LIMIT,
)
from .requests.http_request_repository import HttpShiftRequestRepository
from .requests.service import RequestService
from .shifts.http_shift_repository import HttpShiftRepository
from .shifts.service import ShiftService
from .users.http_user_repository import HttpUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[ApiConnection]

    users_repo: HttpUserRepository
    shifts_repo: HttpShiftRepository
    requests_repo: HttpShiftRequestRepository

    cache: ScheduleDataCache

    auth_service: AuthService
    user_service: UserService
    request_service: RequestService
    shift_service: ShiftService
    calendar_service: CalendarService


def build_container(
    *,
    api_config: dict,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    fetch_limit: int = DEFAULT_FETCH_LIMIT,
    cascade_limit: int = DEFAULT_CASCADE_FETCH_LIMIT,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=float(api_config.get("timeout", DEFAULT_API_TIMEOUT_SECONDS)),
        max_retries=int(api_config.get("max_retries", DEFAULT_API_MAX_RETRIES)),
        backoff_factor=float(api_config.get("backoff_factor", DEFAULT_API_BACKOFF_FACTOR)),
    )
    conn = ApiConnection.get_instance(config)

    users_repo = HttpUserRepository(conn)
    shifts_repo = HttpShiftRepository(conn, default_limit=fetch_limit)
    requests_repo = HttpShiftRequestRepository(conn, default_limit=fetch_limit)

    return wire_container(
        users_repo,
        shifts_repo,
        requests_repo,
        conn=conn,
        cache_ttl_seconds=cache_ttl_seconds,
        fetch_limit=fetch_limit,
        cascade_limit=cascade_limit,
    )


def wire_container(
    users_repo,
    shifts_repo,
    requests_repo,
    *,
    conn: Optional[ApiConnection] = None,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    fetch_limit: int = DEFAULT_FETCH_LIMIT,
    cascade_limit: int = DEFAULT_CASCADE_FETCH_LIMIT,
) -> Container:
    """Build services around any repositories (HTTP-backed or in-memory)."""
    cache = ScheduleDataCache(
        TableSnapshotLoader(users_repo, shifts_repo, requests_repo, limit=fetch_limit),
        ttl_seconds=cache_ttl_seconds,
    )

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, shifts_repo, requests_repo, cache, cascade_limit=cascade_limit)
    request_service = RequestService(requests_repo, shifts_repo, users_repo, cache)
    shift_service = ShiftService(shifts_repo, users_repo, cache)
    calendar_service = CalendarService(cache)

    return Container(
        conn=conn,
        users_repo=users_repo,
        shifts_repo=shifts_repo,
        requests_repo=requests_repo,
        cache=cache,
        auth_service=auth_service,
        user_service=user_service,
        request_service=request_service,
        shift_service=shift_service,
        calendar_service=calendar_service,
    )
