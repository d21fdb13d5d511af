from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..core.constants import (
    DEFAULT_API_BACKOFF_FACTOR,
    DEFAULT_API_MAX_RETRIES,
    DEFAULT_API_TIMEOUT_SECONDS,
)


@dataclass
class ApiConfig:
    base_url: str
    timeout: float = DEFAULT_API_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_API_MAX_RETRIES
    backoff_factor: float = DEFAULT_API_BACKOFF_FACTOR


class ApiConnection:
    """Session factory for the remote table API.

    Note: One pooled ``requests.Session`` is shared by all repositories. Only
    connection and read failures are retried, and only for idempotent methods;
    HTTP error statuses are returned to the caller untouched.
    """

    _instance: Optional["ApiConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: ApiConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        # Built up front: request threads only ever read it.
        self._session = session if session is not None else self._build_session()

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        with cls._instance_lock:
            if cls._instance is None or cls._instance.config != config:
                cls._instance = ApiConnection(config)
            return cls._instance

    @property
    def config(self) -> ApiConfig:
        return self._config

    @property
    def timeout(self) -> float:
        return float(self._config.timeout)

    def url(self, path: str) -> str:
        return self._config.base_url.rstrip("/") + "/" + path.lstrip("/")

    def session(self) -> requests.Session:
        return self._session

    def _build_session(self) -> requests.Session:
        retry = Retry(
            total=int(self._config.max_retries),
            connect=int(self._config.max_retries),
            read=int(self._config.max_retries),
            status=0,
            other=0,
            backoff_factor=float(self._config.backoff_factor),
            allowed_methods=frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session = requests.Session()
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session
