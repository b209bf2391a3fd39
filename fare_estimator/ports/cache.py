"""Cache port - Injectable caching abstraction.

Geocoding suggestions and resolved routes are cached behind this
protocol so tests can swap in a cache that never remembers anything.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache) - Production
    - adapters/cache/null_cache.py (NullCache) - Testing
    """

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if absent or expired."""
        ...

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Store a value, optionally overriding the default TTL."""
        ...

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Return the cached value or compute, store and return it."""
        ...

    def invalidate(self, key: str) -> bool:
        """Drop one entry; True if it existed."""
        ...

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        ...

    def size(self) -> int:
        """Number of live entries."""
        ...
