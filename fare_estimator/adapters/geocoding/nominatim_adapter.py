"""Nominatim place search adapter.

Wraps geopy's Nominatim client with:
- The identifying User-Agent the Nominatim usage policy requires
- Rate limiting to one request per `rate_limit_delay` seconds
- Country scoping and result limits from configuration
- Typed errors instead of geopy exceptions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from geopy.exc import GeocoderRateLimited, GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.errors import GeocodingError
from ...domain.models import LatLng, Location


def _to_location(result: Any) -> Location:
    """Map a geopy result onto a domain Location."""
    raw = getattr(result, "raw", None) or {}
    name = raw.get("display_name") or result.address
    return Location(
        name=str(name),
        latitude=float(result.latitude),
        longitude=float(result.longitude),
    )


@dataclass
class NominatimPlaceSearchAdapter:
    """Place search backed by OpenStreetMap's Nominatim service.

    Implements PlaceSearchPort. Calls block; GeocodingResolver runs
    them in a worker thread.

    Attributes:
        config: Geocoding configuration
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)

    _geolocator: Optional[Nominatim] = field(default=None, repr=False)
    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _reverse_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _init_geocoder(self) -> None:
        """Create the geopy client and its rate-limited entry points."""
        if self._geolocator is not None:
            return

        self._logger.debug(
            "Initializing Nominatim geocoder",
            extra={
                "user_agent": self.config.user_agent,
                "timeout": self.config.timeout_seconds,
            },
        )

        self._geolocator = Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
            domain=self.config.domain,
        )
        self._geocode_fn = RateLimiter(
            self._geolocator.geocode,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,  # Failures surface as GeocodingError
        )
        self._reverse_fn = RateLimiter(
            self._geolocator.reverse,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,
        )

    def search(self, query: str) -> List[Location]:
        """Find places matching free text.

        Args:
            query: The text typed by the user.

        Returns:
            Candidate locations, possibly empty.

        Raises:
            GeocodingError: If the service fails or answers garbage.
        """
        self._init_geocoder()
        try:
            results = self._geocode_fn(  # type: ignore[misc]
                query,
                exactly_one=False,
                limit=self.config.limit,
                language=self.config.language,
                country_codes=self.config.country_codes or None,
            )
        except GeocoderRateLimited as e:
            raise GeocodingError(
                "Geocoding rate limit hit", cause=e, query=query, is_rate_limited=True
            )
        except GeopyError as e:
            raise GeocodingError("Geocoding service error", cause=e, query=query)

        if not results:
            self._logger.debug("Geocode returned no result", extra={"query": query})
            return []

        try:
            locations = [_to_location(result) for result in results]
        except (AttributeError, TypeError, ValueError) as e:
            raise GeocodingError("Malformed geocoding payload", cause=e, query=query)

        self._logger.debug(
            "Geocode success",
            extra={"query": query, "results": len(locations)},
        )
        return locations

    def reverse(self, coordinates: LatLng) -> Optional[Location]:
        """Name the place at the given coordinates.

        Args:
            coordinates: GPS position to look up.

        Returns:
            The place found there, or None.

        Raises:
            GeocodingError: If the service fails or answers garbage.
        """
        self._init_geocoder()
        query = f"{coordinates.lat},{coordinates.lng}"
        try:
            result = self._reverse_fn(  # type: ignore[misc]
                (coordinates.lat, coordinates.lng),
                exactly_one=True,
                language=self.config.language,
            )
        except GeopyError as e:
            raise GeocodingError("Reverse geocoding failed", cause=e, query=query)

        if result is None:
            return None

        try:
            return _to_location(result)
        except (AttributeError, TypeError, ValueError) as e:
            raise GeocodingError("Malformed geocoding payload", cause=e, query=query)
