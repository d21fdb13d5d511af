"""Short-lived snapshot cache of users, shifts and shift requests.

One snapshot holds all three collections and is replaced as a whole, so a
reader never sees collections of different ages. A failed refresh keeps the
previous snapshot.
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..core.constants import DEFAULT_CACHE_TTL_SECONDS, DEFAULT_FETCH_LIMIT
from ..requests.model import ShiftRequest
from ..requests.repository import ShiftRequestRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheSnapshot:
    users: Tuple[User, ...] = ()
    shifts: Tuple[Shift, ...] = ()
    requests: Tuple[ShiftRequest, ...] = ()


SnapshotLoader = Callable[[], CacheSnapshot]


class TableSnapshotLoader:
    """Fetch the three tables concurrently and join them into one snapshot.

    Any failing fetch fails the whole load.
    """

    def __init__(
        self,
        users: UserRepository,
        shifts: ShiftRepository,
        requests: ShiftRequestRepository,
        *,
        limit: int = DEFAULT_FETCH_LIMIT,
    ):
        self._users = users
        self._shifts = shifts
        self._requests = requests
        self._limit = int(limit)

    def __call__(self) -> CacheSnapshot:
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="snapshot") as pool:
            users_f = pool.submit(self._users.list_all)
            shifts_f = pool.submit(self._shifts.list_all, limit=self._limit)
            requests_f = pool.submit(self._requests.list_all, limit=self._limit)
            return CacheSnapshot(
                users=tuple(users_f.result()),
                shifts=tuple(shifts_f.result()),
                requests=tuple(requests_f.result()),
            )


class ScheduleDataCache:
    """TTL cache around a ``SnapshotLoader``.

    ``ttl_seconds=0`` disables reuse: every ``get()`` refetches, although
    callers arriving while a load is in flight still share that one load.
    Mutating code must call ``invalidate()`` before reading again.
    """

    def __init__(
        self,
        loader: SnapshotLoader,
        *,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[CacheSnapshot] = None
        self._timestamp = 0.0
        self._inflight: Optional[Future] = None
        # Bumped by invalidate(); a load started under an older generation
        # must not repopulate the cache.
        self._generation = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def peek(self) -> Optional[CacheSnapshot]:
        with self._lock:
            return self._snapshot

    def get(self) -> CacheSnapshot:
        with self._lock:
            if self._snapshot is not None and self._clock() - self._timestamp < self._ttl:
                return self._snapshot
            if self._inflight is not None:
                future = self._inflight
                owner = False
            else:
                future = Future()
                self._inflight = future
                generation = self._generation
                started = self._clock()
                owner = True

        if not owner:
            return future.result()

        try:
            snapshot = self._loader()
        except Exception as e:
            with self._lock:
                if self._inflight is future:
                    self._inflight = None
            logger.warning("Cache refresh failed, keeping previous snapshot: %s", e)
            future.set_exception(e)
            raise

        with self._lock:
            if self._generation == generation:
                self._snapshot = snapshot
                self._timestamp = started
            if self._inflight is future:
                self._inflight = None
        logger.debug(
            "Cache refreshed: users=%d shifts=%d requests=%d",
            len(snapshot.users),
            len(snapshot.shifts),
            len(snapshot.requests),
        )
        future.set_result(snapshot)
        return snapshot

    get_cached_data = get

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
            self._timestamp = 0.0
            self._inflight = None
            self._generation += 1
