"""
Cache-fronted access to a read-only JSON API.

`ApiCacheService` composes the key builder, the TTL store and the upstream
fetcher into the "fetch with cache" contract:

- lookup by deterministic key; a hit never touches the network
- on miss, one upstream GET; 429s are retried with a fixed delay up to a budget
- successes are stored with the store's default TTL, failures are never cached
- hit/miss counters for the lifetime of the instance

Concurrent misses for the same key are not de-duplicated: two callers racing on a
cold key both reach the upstream and the later store wins.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from common.cache import TTLCache
from common.errors import CacheStoreFailure, NotFoundError, RateLimitedError, UpstreamError
from common.http import UpstreamFetcher
from common.keys import CacheKeyBuilder, Params
from observability import build_log_context, get_current_context, log_event

_CTX = build_log_context(tool="api_cache")


def _ctx() -> Dict[str, Any]:
    return get_current_context() or _CTX


@dataclass(frozen=True)
class RetryOptions:
    max_retries: int = 3
    delay_ms: int = 2000


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    total_requests: int
    size: int

    @property
    def hit_rate(self) -> float:
        return self.hits / max(1, self.total_requests)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total_requests": self.total_requests,
            "hit_rate": f"{self.hit_rate * 100:.1f}%",
            "size": self.size,
        }


class ApiCacheService:
    def __init__(
        self,
        base_url: str,
        *,
        store: TTLCache[str, Any],
        fetcher: UpstreamFetcher,
        retry: RetryOptions = RetryOptions(),
    ) -> None:
        self._keys = CacheKeyBuilder(base_url)
        self._store = store
        self._fetcher = fetcher
        self._retry = retry
        self._hits = 0
        self._misses = 0
        self._total_requests = 0

    @property
    def store(self) -> TTLCache[str, Any]:
        return self._store

    def make_key(self, endpoint: str, params: Optional[Params] = None) -> str:
        return self._keys.make_key(endpoint, params)

    async def fetch_with_cache(
        self,
        endpoint: str,
        params: Optional[Params] = None,
        skip_cache: bool = False,
        retry: Optional[RetryOptions] = None,
    ) -> Any:
        retry = retry or self._retry
        key = self._keys.make_key(endpoint, params)
        self._total_requests += 1

        if not skip_cache:
            cached = self._store.get(key)
            if cached is not None:
                self._hits += 1
                log_event(
                    "cache_hit",
                    ctx=_ctx(),
                    data={"endpoint": endpoint, "hit_rate": f"{self._hits / self._total_requests * 100:.1f}%"},
                    level="debug",
                )
                return cached

        self._misses += 1
        log_event("cache_miss", ctx=_ctx(), data={"endpoint": endpoint, "params": dict(params or {})}, level="debug")

        started = time.monotonic()
        try:
            data = await self._fetcher.fetch(self._keys.build_url(endpoint), params, endpoint=endpoint)
        except RateLimitedError as e:
            if retry.max_retries <= 0:
                log_event("upstream_rate_limited", ctx=_ctx(), data={"endpoint": endpoint, "retries_left": 0}, level="error")
                raise
            log_event(
                "upstream_rate_limited",
                ctx=_ctx(),
                data={
                    "endpoint": endpoint,
                    "retries_left": retry.max_retries,
                    "delay_ms": retry.delay_ms,
                    "retry_after": e.retry_after,
                },
                level="warning",
            )
            await asyncio.sleep(retry.delay_ms / 1000.0)
            return await self.fetch_with_cache(
                endpoint, params, skip_cache, replace(retry, max_retries=retry.max_retries - 1)
            )
        except NotFoundError:
            log_event("upstream_not_found", ctx=_ctx(), data={"endpoint": endpoint}, level="warning")
            raise
        except UpstreamError as e:
            log_event("upstream_error", ctx=_ctx(), data={"endpoint": endpoint, "message": e.message}, level="error")
            raise

        log_event(
            "upstream_fetched",
            ctx=_ctx(),
            data={"endpoint": endpoint, "duration_ms": round((time.monotonic() - started) * 1000, 1)},
        )

        if not skip_cache:
            try:
                self.store_value(key, data)
            except CacheStoreFailure as e:
                log_event("cache_store_failed", ctx=_ctx(), data={"key": key, "message": e.message}, level="error")
        return data

    def lookup(self, endpoint: str, params: Optional[Params] = None) -> Optional[Any]:
        """
        Cache-only read: counts as a request (hit or miss) but never goes upstream.
        """
        return self.lookup_key(self._keys.make_key(endpoint, params))

    def lookup_key(self, key: str) -> Optional[Any]:
        """Same as `lookup`, for an already-built (possibly prefixed) key."""
        self._total_requests += 1
        cached = self._store.get(key)
        if cached is None:
            self._misses += 1
            return None
        self._hits += 1
        return cached

    def store_value(self, key: str, value: Any, ttl_seconds: float = 0) -> None:
        """
        Store under an already-built key. A ttl of 0 means the store's default.

        Raises CacheStoreFailure if the store rejects the write.
        """
        try:
            self._store.set(key, value, ttl_seconds)
        except Exception as e:
            raise CacheStoreFailure(key, e) from e
        log_event(
            "cache_stored",
            ctx=_ctx(),
            data={"key": key, "ttl_seconds": ttl_seconds or "default"},
            level="debug",
        )

    def invalidate(self, pattern: Optional[str] = None) -> int:
        if pattern:
            removed = self._store.delete_matching(lambda k: pattern in k)
            log_event("cache_cleared", ctx=_ctx(), data={"pattern": pattern, "removed": removed})
        else:
            removed = self._store.clear()
            log_event("cache_cleared", ctx=_ctx(), data={"pattern": None, "removed": removed})
        return removed

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            total_requests=self._total_requests,
            size=self._store.size(),
        )
