"""Autocomplete place lookup behind the debounce scheduler.

Suggestions degrade silently: any provider failure yields an empty list so
a flaky geocoder never breaks typing in an input field.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import GeocodingConfig, get_config
from ..domain.errors import GeocodingError, LocationUnavailableError
from ..domain.models import LatLng, Location
from ..ports.cache import CachePort
from ..ports.geocoding import PlaceSearchPort
from ..ports.location import DeviceLocationPort
from ..adapters.cache.memory_cache import InMemoryCache
from .debounce import DebounceScheduler


def _resolved(value: List[Location]) -> asyncio.Future[List[Location]]:
    future: asyncio.Future[List[Location]] = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


@dataclass
class GeocodingResolver:
    """Debounced, cached, failure-tolerant place lookup.

    Attributes:
        provider: Remote place search (blocking; run in a worker thread)
        scheduler: Debounce scheduler shared by the input fields
        config: Geocoding configuration (debounce delay, TTLs)
        cache: Suggestions per normalized query
    """

    provider: PlaceSearchPort
    scheduler: DebounceScheduler = field(default_factory=DebounceScheduler)
    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    cache: CachePort[Tuple[Location, ...]] = field(
        default_factory=lambda: InMemoryCache(name="geocode")
    )

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def lookup(self, query_text: str, key: str) -> asyncio.Future[List[Location]]:
        """Debounced place search for one input field.

        Must be called from a running event loop.

        Args:
            query_text: Raw text typed by the user.
            key: Debounce key, usually the input field name.

        Returns:
            A future with candidate locations. Blank queries resolve to []
            immediately; superseded calls never resolve.
        """
        query = query_text.strip()
        if not query:
            self.scheduler.cancel(key)
            return _resolved([])

        return self.scheduler.schedule(
            key, self.config.debounce_ms, lambda: self.search_now(query)
        )

    async def search_now(self, query: str) -> List[Location]:
        """Undebounced search; never raises for provider failures."""
        cache_key = f"{' '.join(query.lower().split())}:{self.config.country_codes or ''}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            self._logger.debug("Geocode cache hit", extra={"query": query})
            return list(cached)

        try:
            locations = await asyncio.to_thread(self.provider.search, query)
        except GeocodingError as e:
            self._logger.warning(
                "Geocode service error",
                extra={
                    "query": query,
                    "error": str(e),
                    "rate_limited": e.is_rate_limited,
                },
            )
            return []
        except Exception as e:
            self._logger.error(
                "Geocode unexpected error",
                extra={"query": query, "error": str(e)},
            )
            return []

        # Callers get their own list; the cache keeps an immutable copy
        self.cache.set(cache_key, tuple(locations), ttl=self.config.cache_ttl_seconds)
        return list(locations)

    async def reverse(self, coordinates: LatLng) -> Optional[Location]:
        """Name the place at the given coordinates, or None on failure."""
        try:
            return await asyncio.to_thread(self.provider.reverse, coordinates)
        except GeocodingError as e:
            self._logger.warning(
                "Reverse geocode failed",
                extra={"lat": coordinates.lat, "lon": coordinates.lng, "error": str(e)},
            )
            return None

    async def locate_current(self, device: DeviceLocationPort) -> Optional[Location]:
        """Origin auto-fill from the device position.

        Returns:
            The named place at the device position; a coordinate-named
            Location when reverse lookup fails; None if the device cannot
            report a position.
        """
        try:
            coordinates = await device.get_current_coordinates()
        except LocationUnavailableError as e:
            self._logger.info(
                "Device location unavailable",
                extra={"reason": e.reason.value},
            )
            return None

        place = await self.reverse(coordinates)
        if place is not None:
            return place
        return Location(
            name=f"{coordinates.lat:.5f}, {coordinates.lng:.5f}",
            latitude=coordinates.lat,
            longitude=coordinates.lng,
        )

    def cancel(self, key: str) -> bool:
        """Drop the pending lookup of one field."""
        return self.scheduler.cancel(key)
