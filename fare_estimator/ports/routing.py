"""Routing port - Abstraction for road-network distance providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import Location, RouteResult


class RoutingProviderPort(Protocol):
    """Port for remote road routing.

    Implementation: adapters/routing/osrm_adapter.py
    """

    async def route(self, origin: Location, destination: Location) -> RouteResult:
        """Compute a road route with full geometry.

        Args:
            origin: Start of the trip.
            destination: End of the trip.

        Returns:
            RouteResult with distance, duration and (lat, lng) geometry.

        Raises:
            RoutingError: On any failure, including "no route".
        """
        ...
