import asyncio
import os
import sys
from typing import Any, Callable, Dict, List, Tuple

import pytest

# Add root directory to sys.path to allow imports from top-level packages
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Set environment variables BEFORE modules are imported
os.environ["SWAPI_CACHE_CHECK_PERIOD_SEC"] = "0"
os.environ["SWAPI_RETRY_DELAY_MS"] = "10"
os.environ["SWAPI_MCP_LOG_LEVEL"] = "error"

from common.api_cache import RetryOptions  # noqa: E402
from swapi.service import SWAPI_BASE_URL, SwapiService  # noqa: E402

BASE = SWAPI_BASE_URL


class FakeFetcher:
    """Stands in for UpstreamFetcher; `handler(url, params)` returns a body or raises."""

    def __init__(self, handler: Callable[[str, Dict[str, Any]], Any], latency: float = 0.01):
        self._handler = handler
        self._latency = latency
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str, params=None, *, endpoint=None):
        self.calls.append((url, dict(params or {})))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._latency)
            return self._handler(url, dict(params or {}))
        finally:
            self.in_flight -= 1

    def pages_requested(self) -> List[int]:
        return sorted(int(p.get("page", 1)) for _, p in self.calls)


def paged_collection(count: int, page_size: int, prefix: str = "item"):
    items = [{"name": f"{prefix}{i}", "url": f"{BASE}/films/{i}/"} for i in range(1, count + 1)]

    def handler(url: str, params: Dict[str, Any]):
        page = int(params.get("page", 1))
        chunk = items[(page - 1) * page_size: page * page_size]
        last_page = max(1, -(-count // page_size))
        return {
            "count": count,
            "next": f"{url}?page={page + 1}" if page < last_page else None,
            "previous": f"{url}?page={page - 1}" if page > 1 else None,
            "results": chunk,
        }

    return items, handler


class Clock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    c = Clock()
    monkeypatch.setattr("common.cache._now", c)
    return c


@pytest.fixture
def make_service():
    def _make(handler, **kwargs):
        fetcher = FakeFetcher(handler, latency=kwargs.pop("latency", 0.01))
        kwargs.setdefault("check_period", 0)
        kwargs.setdefault("retry", RetryOptions(max_retries=3, delay_ms=10))
        return SwapiService(fetcher=fetcher, **kwargs), fetcher

    return _make


@pytest.fixture
def collection():
    return paged_collection
