from __future__ import annotations

import asyncio
from typing import Any, Dict, Mapping, Optional

import requests

from common.errors import NotFoundError, RateLimitedError, UpstreamError


def _retry_after(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(str(raw).strip())
    except ValueError:
        # HTTP-date form is not interpreted.
        return None


class UpstreamFetcher:
    """
    Single-attempt HTTP GET against the origin API.

    Failures are classified into NotFoundError (404), RateLimitedError (429) and
    UpstreamError (everything else, transport failures included). Retrying is the
    caller's decision; nothing here sleeps or loops.
    """

    def __init__(self, *, timeout_sec: float = 10.0) -> None:
        self._timeout = float(timeout_sec)

    async def fetch(self, url: str, params: Optional[Mapping[str, Any]] = None, *, endpoint: str | None = None) -> Any:
        # requests is blocking; run it off the event loop so page fetches overlap.
        loop = asyncio.get_event_loop()
        query = dict(params) if params else None
        return await loop.run_in_executor(None, self._get, url, query, endpoint or url)

    def _get(self, url: str, params: Optional[Dict[str, Any]], label: str) -> Any:
        try:
            response = requests.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamError(str(e), {"endpoint": label, "transport": type(e).__name__}) from e

        status = response.status_code
        if status == 404:
            raise NotFoundError(label)
        if status == 429:
            raise RateLimitedError(label, _retry_after(response.headers.get("Retry-After")))
        if status >= 400:
            raise UpstreamError(
                f"Request failed with status code {status}",
                {"endpoint": label, "status_code": status},
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON body from {label}", {"endpoint": label}) from e
