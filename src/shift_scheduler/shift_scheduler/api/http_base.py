from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional

import requests

from ..core.exceptions import ApiStatusError, MalformedResponseError, TransportError
from .connection import ApiConnection

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 201, 204})


@contextmanager
def api_errors(method: str, url: str) -> Iterator[None]:
    """Translate ``requests`` transport failures into ``TransportError``."""
    try:
        yield
    except requests.Timeout as e:
        logger.warning("%s %s timed out: %s", method, url, e)
        raise TransportError(f"Request timed out: {method} {url}") from e
    except requests.RequestException as e:
        logger.warning("%s %s failed: %s", method, url, e)
        raise TransportError(f"Network error: {method} {url}") from e


def error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or resp.reason or "").strip() or "Request failed"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.reason or "Request failed"


def check_status(resp: requests.Response, *, method: str, url: str) -> None:
    if resp.status_code in SUCCESS_STATUSES:
        return
    message = error_message(resp)
    logger.warning("%s %s -> %s %s", method, url, resp.status_code, message)
    raise ApiStatusError(resp.status_code, message, url=url)


def json_body(resp: requests.Response) -> Any:
    if resp.status_code == 204 or not resp.content:
        return None
    try:
        return resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"Response is not JSON ({resp.url})") from e


def unwrap_data(body: Any) -> List[Dict[str, Any]]:
    """Return the ``data`` list of a ``{"data": [...]}`` envelope."""
    if not isinstance(body, dict) or "data" not in body:
        raise MalformedResponseError("Response has no 'data' field")
    rows = body["data"]
    if rows is None:
        return []
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise MalformedResponseError("'data' is not a list of records")
    return rows


def require_record(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise MalformedResponseError("Response is not a record")
    return body


class TableClient:
    """Thin RESTful client for one ``/tables/<name>`` resource."""

    def __init__(self, conn: ApiConnection, table: str):
        self._conn = conn
        self._table = table

    @property
    def table(self) -> str:
        return self._table

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._conn.url(path)
        with api_errors(method, url):
            resp = self._conn.session().request(method, url, timeout=self._conn.timeout, **kwargs)
        check_status(resp, method=method, url=url)
        return resp

    def list(self, *, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": int(limit)} if limit else None
        resp = self._request("GET", f"tables/{self._table}", params=params)
        return unwrap_data(json_body(resp))

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            resp = self._request("GET", f"tables/{self._table}/{record_id}")
        except ApiStatusError as e:
            if e.status_code == 404:
                return None
            raise
        return require_record(json_body(resp))

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        resp = self._request("POST", f"tables/{self._table}", json=dict(payload))
        body = json_body(resp)
        return body if isinstance(body, dict) else {}

    def update(self, record_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        resp = self._request("PATCH", f"tables/{self._table}/{record_id}", json=dict(changes))
        body = json_body(resp)
        return body if isinstance(body, dict) else {}

    def delete(self, record_id: str) -> None:
        self._request("DELETE", f"tables/{self._table}/{record_id}")


def require_field(row: Mapping[str, Any], name: str) -> Any:
    value = row.get(name)
    if value is None or value == "":
        raise MalformedResponseError(f"Record is missing '{name}'")
    return value


def normalize_hhmm(value: Any) -> str:
    """Normalize API time values (``9:30``, ``09:30:00``) to ``HH:MM``."""
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    parts = text.split(":")
    if len(parts) < 2:
        raise MalformedResponseError(f"Invalid time value: {value!r}")
    try:
        return f"{int(parts[0]):02d}:{int(parts[1]):02d}"
    except ValueError as e:
        raise MalformedResponseError(f"Invalid time value: {value!r}") from e


def normalize_timestamp(value: Any) -> Optional[datetime]:
    """Normalize API timestamps.

    The table API can return timestamps as:
    - epoch milliseconds (int/float)
    - ISO-8601 strings, with or without offset
    """

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip().replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None
