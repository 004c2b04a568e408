from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS


@dataclass
class ApiConfig:
    base_url: str
    timeout: float = DEFAULT_API_TIMEOUT_SECONDS
    token: Optional[str] = None


class ApiConnection:
    """Singleton-like HTTP session factory for the roster service.

    Note: One `requests.Session` is shared so connections are pooled.
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        if cls._instance is None:
            cls._instance = ApiConnection(config)
        return cls._instance

    @property
    def timeout(self) -> float:
        return float(self._config.timeout)

    def url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def session(self) -> requests.Session:
        if self._session is None:
            session = requests.Session()
            session.headers.update({"Accept": "application/json"})
            if self._config.token:
                session.headers["Authorization"] = f"Bearer {self._config.token}"
            self._session = session
        return self._session
