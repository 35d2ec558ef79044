"""WakaTime / Wakapi REST client wrapper (per-day summaries + users)."""

from __future__ import annotations

import base64
from datetime import date
from typing import Any

import requests

from .config import BACKEND_PREFIXES, DEFAULT_BACKEND, REQUEST_HEADERS, REQUEST_TIMEOUT_SECONDS
from .errors import AuthenticationFailure, ConfigurationError, FetchError


class WakaAPI:
    def __init__(
        self,
        api_url: str,
        api_key: str,
        backend: str = DEFAULT_BACKEND,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        if backend not in BACKEND_PREFIXES:
            raise ConfigurationError(
                f"Unknown backend {backend!r}; expected one of {sorted(BACKEND_PREFIXES)}"
            )
        self.api_url = api_url.rstrip("/")
        self.backend = backend
        self.timeout = timeout
        self.session = session or requests.Session()
        token = base64.b64encode(api_key.encode("utf-8")).decode("ascii")
        self.session.headers.update(REQUEST_HEADERS)
        self.session.headers["Authorization"] = f"Basic {token}"

    def _url(self, path: str) -> str:
        return f"{self.api_url}{BACKEND_PREFIXES[self.backend]}/v1{path}"

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = self._url(path)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"Request to {url} failed: {exc}") from exc
        if resp.status_code in (401, 403):
            raise AuthenticationFailure(f"Unauthorized ({resp.status_code}) for {url}")
        if resp.status_code >= 300:
            raise FetchError(f"Request to {url} failed {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(f"Unreadable JSON from {url}: {exc}") from exc

    def fetch_user(self, user: str) -> dict[str, Any]:
        return self._get(f"/users/{user}")

    def fetch_day(self, user_id: str, day: date, project: str = "") -> dict[str, Any]:
        """Fetch the summaries payload for a single calendar day."""
        day_str = day.strftime("%Y-%m-%d")
        params = {"start": day_str, "end": day_str}
        if project:
            params["project"] = project
        return self._get(f"/users/{user_id}/summaries", params=params)
