from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.exceptions import ServiceError
from .connection import ApiConnection

logger = logging.getLogger(__name__)


def _decode(resp: requests.Response, method: str, url: str) -> Any:
    if not resp.ok:
        logger.warning("%s %s failed with HTTP %s", method, url, resp.status_code)
        raise ServiceError(f"{method} {url} returned HTTP {resp.status_code}", status_code=resp.status_code)
    try:
        return resp.json()
    except ValueError:
        raise ServiceError(f"{method} {url} returned a non-JSON body", status_code=resp.status_code)


def get_json(conn: ApiConnection, path: str, *, params: Optional[dict] = None) -> Any:
    url = conn.url(path)
    try:
        resp = conn.session().get(url, params=params, timeout=conn.timeout)
    except requests.RequestException as e:
        logger.warning("GET %s failed: %s", url, e)
        raise ServiceError(f"GET {url} failed: {e}") from e
    return _decode(resp, "GET", url)


def post_json(conn: ApiConnection, path: str, payload: dict) -> Any:
    url = conn.url(path)
    try:
        resp = conn.session().post(url, json=payload, timeout=conn.timeout)
    except requests.RequestException as e:
        logger.warning("POST %s failed: %s", url, e)
        raise ServiceError(f"POST {url} failed: {e}") from e
    return _decode(resp, "POST", url)


def unwrap_data(body: Any) -> Any:
    """Strip the `{"data": ...}` envelope the service wraps most payloads in."""

    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def first_present(row: dict, *names: str, default: Any = None) -> Any:
    """First non-None value among alternative field names."""

    for name in names:
        value = row.get(name)
        if value is not None:
            return value
    return default
