from __future__ import annotations

from typing import Any, Dict, Optional

from common.api_cache import ApiCacheService, RetryOptions
from common.cache import TTLCache
from common.http import UpstreamFetcher
from common.keys import Params, extract_id_from_url
from swapi.pagination import PageAggregator, PaginatedCollection

SWAPI_BASE_URL = "https://swapi.dev/api"


class SwapiService:
    """
    Owned, explicitly configured cache + pagination front for the Star Wars API.

    Tool handlers receive an instance of this class; nothing here is module-global.
    """

    def __init__(
        self,
        *,
        base_url: str = SWAPI_BASE_URL,
        default_ttl: float = 1800.0,
        check_period: float = 600.0,
        max_keys: int = 500,
        aggregate_ttl: float = 3600.0,
        retry: RetryOptions = RetryOptions(),
        timeout_sec: float = 10.0,
        page_concurrency: int = 0,
        fetcher: Optional[UpstreamFetcher] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.store: TTLCache[str, Any] = TTLCache(
            default_ttl=default_ttl,
            max_items=max_keys,
            check_period=check_period,
        )
        self.cache = ApiCacheService(
            self.base_url,
            store=self.store,
            fetcher=fetcher or UpstreamFetcher(timeout_sec=timeout_sec),
            retry=retry,
        )
        self.pages = PageAggregator(self.cache, aggregate_ttl=aggregate_ttl, max_concurrency=page_concurrency)

    def start(self) -> None:
        self.store.start_sweeper()

    def stop(self) -> None:
        self.store.stop_sweeper()

    async def fetch_with_cache(self, endpoint: str, params: Optional[Params] = None, skip_cache: bool = False) -> Any:
        return await self.cache.fetch_with_cache(endpoint, params, skip_cache)

    async def fetch_all_pages(self, endpoint: str, params: Optional[Params] = None) -> PaginatedCollection:
        return await self.pages.fetch_all_pages(endpoint, params)

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats().to_dict()

    def clear_cache(self, endpoint: Optional[str] = None) -> int:
        """Drop entries whose key contains `endpoint`, or everything when it is empty."""
        return self.cache.invalidate(endpoint or None)

    @staticmethod
    def extract_id_from_url(url: str) -> str:
        return extract_id_from_url(url)
