"""Geocoding port - Abstraction for place search and reverse lookup.

This protocol defines the contract for place lookup services, allowing
different providers (Nominatim, a test double, ...) to back the
GeocodingResolver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import LatLng, Location


class PlaceSearchPort(Protocol):
    """Port for remote place lookup.

    Implementation: adapters/geocoding/nominatim_adapter.py

    Implementations are blocking; the resolver runs them off the event loop.
    """

    def search(self, query: str) -> List[Location]:
        """Find places matching free text.

        Args:
            query: Non-empty text typed by the user.

        Returns:
            Candidate locations in provider relevance order.

        Raises:
            GeocodingError: On network, status or payload failures.
        """
        ...

    def reverse(self, coordinates: LatLng) -> Optional[Location]:
        """Name the place at the given coordinates.

        Args:
            coordinates: GPS position to look up.

        Returns:
            The place found there, or None if the provider knows nothing.

        Raises:
            GeocodingError: On network, status or payload failures.
        """
        ...
