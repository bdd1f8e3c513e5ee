from __future__ import annotations

from typing import Mapping, Optional, Union

ParamValue = Union[str, int, float, bool]
Params = Mapping[str, ParamValue]


class CacheKeyBuilder:
    """
    Deterministic cache keys for API requests.

    Key format is ``<endpoint>|<k1>=<v1>&<k2>=<v2>`` with params sorted by name, so
    parameter order never changes the key. Absolute URLs on ``base_url`` are
    reduced to their path first, which makes ``<base_url>/people/`` and
    ``/people/`` address the same entry.
    """

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    def normalize_endpoint(self, endpoint: str) -> str:
        if endpoint.startswith("http") and endpoint.startswith(self._base_url):
            return endpoint[len(self._base_url):]
        return endpoint

    def make_key(self, endpoint: str, params: Optional[Params] = None) -> str:
        param_string = ""
        if params:
            param_string = "&".join(f"{k}={v}" for k, v in sorted(params.items(), key=lambda kv: kv[0]))
        return f"{self.normalize_endpoint(endpoint)}|{param_string}"

    def build_url(self, endpoint: str) -> str:
        if endpoint.startswith("http"):
            return endpoint
        return f"{self._base_url}{endpoint}"


def extract_id_from_url(url: str) -> str:
    """Last non-empty path segment, e.g. ``https://swapi.dev/api/people/1/`` -> ``"1"``."""
    parts = [p for p in url.split("/") if p]
    return parts[-1] if parts else ""
