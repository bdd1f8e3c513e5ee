from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


@dataclass
class AppError(Exception):
    code: str
    message: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        return self.message


class NotFoundError(AppError):
    def __init__(self, endpoint: str, data: Dict[str, Any] = None):
        super().__init__("not_found", f"Resource not found: {endpoint}", {"endpoint": endpoint, **(data or {})})

    @property
    def endpoint(self) -> str:
        return self.data["endpoint"]


class RateLimitedError(AppError):
    def __init__(self, endpoint: str, retry_after: Optional[float] = None):
        super().__init__(
            "rate_limited",
            f"API rate limit exceeded for {endpoint}",
            {"endpoint": endpoint, "retry_after": retry_after},
        )

    @property
    def retry_after(self) -> Optional[float]:
        return self.data.get("retry_after")


class UpstreamError(AppError):
    def __init__(self, message: str, data: Dict[str, Any] = None):
        super().__init__("upstream_error", f"API Error: {message}", data or {})


class CacheStoreFailure(AppError):
    def __init__(self, key: str, cause: Exception):
        super().__init__("cache_store_failed", f"Failed to store cache entry {key}: {cause}", {"key": key})


def classify_exception(e: Exception) -> AppError:
    """
    Map upstream / transport issues into stable error codes for tool results.
    """
    if isinstance(e, AppError):
        return e

    if isinstance(e, requests.Timeout):
        return AppError("timeout", str(e), {})
    if isinstance(e, requests.ConnectionError):
        return AppError("network_error", str(e), {})

    err_str = str(e).lower()
    if "rate limit" in err_str or "429" in err_str:
        return AppError("rate_limited", str(e), {})
    if "timeout" in err_str:
        return AppError("timeout", str(e), {})
    if "not found" in err_str:
        return AppError("not_found", str(e), {})

    return AppError("unknown_error", str(e), {})
