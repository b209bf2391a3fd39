"""Thread-safe in-memory LRU cache with optional TTL.

Holds place suggestions per normalized query and routes per coordinate
pair. Reads refresh recency; when full, expired entries go first, then the
least recently used one.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """LRU cache implementing CachePort.

    Attributes:
        default_ttl_seconds: Lifetime of an entry (None = no expiry)
        max_size: Entry limit (None = unbounded)
        name: Cache name, used as the logger suffix

    Example:
        routes = InMemoryCache[RouteResult](name="routes", max_size=256)
        route = routes.get_or_compute(key, lambda: fetch(origin, destination))
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"

    _entries: "OrderedDict[str, Tuple[Any, float]]" = field(
        default_factory=OrderedDict, repr=False
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)
    _evictions: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        if self.max_size is not None and self.max_size <= 0:
            raise ValueError(f"max_size must be positive, got {self.max_size}")
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[1] < time.monotonic():
                del self._entries[key]
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return entry[0]

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Store `value`; `ttl` overrides the default lifetime."""
        lifetime = self.default_ttl_seconds if ttl is None else ttl
        expires_at = float("inf") if lifetime is None else time.monotonic() + lifetime
        with self._lock:
            self._entries[key] = (value, expires_at)
            self._entries.move_to_end(key)
            if self.max_size is not None and len(self._entries) > self.max_size:
                self._make_room()

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        value = self.get(key)
        if value is not None:
            return value
        # compute_fn may be slow; it runs without holding the lock
        value = compute_fn()
        self.set(key, value)
        return value

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._hits = self._misses = self._evictions = 0
        self._logger.debug("Cache cleared", extra={"entries_cleared": dropped})
        return dropped

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were dropped."""
        now = time.monotonic()
        with self._lock:
            expired = [k for k, (_, expires_at) in self._entries.items() if expires_at < now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate_percent": round(self._hits / lookups * 100, 1) if lookups else 0.0,
            }

    def _make_room(self) -> None:
        if self.purge_expired():
            return
        oldest, _ = self._entries.popitem(last=False)
        self._evictions += 1
        self._logger.debug("Cache evicted least recently used entry", extra={"key": oldest})
