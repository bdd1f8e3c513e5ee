from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

from observability import build_log_context, log_event

K = TypeVar("K")
V = TypeVar("V")

_SWEEP_CTX = build_log_context(tool="cache_sweeper")


def _now() -> float:
    return time.time()


@dataclass
class _Entry(Generic[V]):
    value: V
    inserted_at: float
    expires_at: float

    def expired(self, now: float) -> bool:
        return self.expires_at <= now


class TTLCache(Generic[K, V]):
    """
    In-memory TTL cache with a hard key budget and an optional background sweeper.

    - `get` never returns an expired entry, whether or not the sweeper has run.
    - A ttl of 0 (or omitted) means "use default_ttl".
    - When full, admitting a new key first purges expired entries, then evicts
      the least-recently-inserted live entries. Overwriting a key counts as a
      fresh insertion.
    """

    def __init__(self, *, default_ttl: float = 1800.0, max_items: int = 500, check_period: float = 600.0) -> None:
        # Mutated by the event loop thread and the sweeper thread.
        self._lock = threading.RLock()
        self._default_ttl = max(0.001, float(default_ttl))
        self._max_items = max(1, int(max_items))
        self._check_period = max(0.0, float(check_period))
        self._data: "OrderedDict[K, _Entry[V]]" = OrderedDict()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def max_items(self) -> int:
        return self._max_items

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            e = self._data.get(key)
            if e is None:
                return None
            if e.expired(_now()):
                del self._data[key]
                return None
            return e.value

    def set(self, key: K, value: V, ttl_seconds: float = 0) -> None:
        ttl = float(ttl_seconds or 0)
        if ttl <= 0:
            ttl = self._default_ttl
        with self._lock:
            now = _now()
            if key in self._data:
                del self._data[key]
            elif len(self._data) >= self._max_items:
                self._purge_expired(now)
                while len(self._data) >= self._max_items:
                    self._data.popitem(last=False)
            self._data[key] = _Entry(value=value, inserted_at=now, expires_at=now + ttl)

    def delete(self, key: K) -> int:
        with self._lock:
            return 1 if self._data.pop(key, None) is not None else 0

    def delete_matching(self, predicate: Callable[[K], bool]) -> int:
        # Counts cover live entries only; expired ones are purged first.
        with self._lock:
            self._purge_expired(_now())
            doomed = [k for k in self._data if predicate(k)]
            for k in doomed:
                del self._data[k]
            return len(doomed)

    def clear(self) -> int:
        with self._lock:
            self._purge_expired(_now())
            n = len(self._data)
            self._data.clear()
            return n

    def keys(self) -> List[K]:
        with self._lock:
            now = _now()
            return [k for k, e in self._data.items() if not e.expired(now)]

    def size(self) -> int:
        with self._lock:
            self._purge_expired(_now())
            return len(self._data)

    def __len__(self) -> int:
        return self.size()

    def sweep(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        with self._lock:
            return self._purge_expired(_now())

    def _purge_expired(self, now: float) -> int:
        expired = [k for k, e in self._data.items() if e.expired(now)]
        for k in expired:
            del self._data[k]
        return len(expired)

    # ------------------------------------------------------------------ #
    # Background sweeper
    # ------------------------------------------------------------------ #

    def start_sweeper(self) -> None:
        if self._check_period <= 0:
            return
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="ttl-cache-sweeper", daemon=True)
        self._thread.start()

    def stop_sweeper(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=3)
            self._thread = None

    def sweeper_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def _run(self) -> None:
        while not self._stop.wait(self._check_period):
            removed = self.sweep()
            if removed:
                log_event("cache_swept", ctx=_SWEEP_CTX, data={"removed": removed}, level="debug")
