from __future__ import annotations

import asyncio
import math
import time
from typing import Any, Dict, List, Optional, TypedDict

from common.api_cache import ApiCacheService
from common.errors import CacheStoreFailure
from common.keys import Params
from observability import build_log_context, get_current_context, log_event

ALL_PAGES_PREFIX = "all_pages:"

_CTX = build_log_context(tool="pagination")


class PaginatedCollection(TypedDict):
    count: int
    next: Optional[str]
    previous: Optional[str]
    results: List[Any]


def _ctx() -> Dict[str, Any]:
    return get_current_context() or _CTX


class PageAggregator:
    """
    Flattens a paginated list endpoint into one collection.

    Page 1 is fetched first to learn `count` and the page size; the remaining pages
    are then requested concurrently, each through the per-page cache. The assembled
    collection is cached separately under an ``all_pages:`` key with a longer TTL.

    The ``page`` param never takes part in the aggregate key: aggregation always
    starts at page 1.
    """

    def __init__(self, cache: ApiCacheService, *, aggregate_ttl: float = 3600.0, max_concurrency: int = 0) -> None:
        self._cache = cache
        self._aggregate_ttl = float(aggregate_ttl)
        self._max_concurrency = max(0, int(max_concurrency))

    async def fetch_all_pages(self, endpoint: str, params: Optional[Params] = None) -> PaginatedCollection:
        base = {k: v for k, v in (params or {}).items() if k != "page"}
        # Prefix the normalized key so absolute and relative endpoints share one aggregate.
        aggregate_key = ALL_PAGES_PREFIX + self._cache.make_key(endpoint, base)

        cached = self._cache.lookup_key(aggregate_key)
        if cached is not None:
            log_event("pagination_cache_hit", ctx=_ctx(), data={"endpoint": endpoint}, level="debug")
            return cached

        started = time.monotonic()
        first = await self._cache.fetch_with_cache(endpoint, {**base, "page": 1})

        results = first.get("results") if isinstance(first, dict) else None
        if not results:
            return first
        count = int(first.get("count") or 0)
        if count <= len(results):
            return first

        total_pages = math.ceil(count / len(results))
        log_event(
            "pagination_started",
            ctx=_ctx(),
            data={"endpoint": endpoint, "pages": total_pages, "count": count},
        )

        # Fresh per call: a semaphore is bound to the loop it first waits on.
        sem = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None

        async def fetch_page(page: int) -> Dict[str, Any]:
            if sem is None:
                return await self._cache.fetch_with_cache(endpoint, {**base, "page": page})
            async with sem:
                return await self._cache.fetch_with_cache(endpoint, {**base, "page": page})

        # gather keeps argument order, so results stay in page order.
        rest = await asyncio.gather(*(fetch_page(page) for page in range(2, total_pages + 1)))

        all_results = list(results)
        for page in rest:
            all_results.extend(page.get("results") or [])

        collection: PaginatedCollection = {**first, "results": all_results, "next": None, "previous": None}
        log_event(
            "pagination_completed",
            ctx=_ctx(),
            data={
                "endpoint": endpoint,
                "items": len(all_results),
                "duration_ms": round((time.monotonic() - started) * 1000, 1),
            },
        )

        try:
            self._cache.store_value(aggregate_key, collection, self._aggregate_ttl)
        except CacheStoreFailure as e:
            log_event("cache_store_failed", ctx=_ctx(), data={"endpoint": endpoint, "message": e.message}, level="error")

        return collection
