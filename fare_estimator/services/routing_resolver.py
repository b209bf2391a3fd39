"""Travel distance resolution with a straight-line safety net.

The road router is tried first. Any failure, including the provider
saying no route exists, falls back to the haversine distance with an
empty geometry. `resolve` never raises for provider problems.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ..config import RoutingConfig, get_config
from ..domain.errors import RoutingError
from ..domain.geo import distance_between
from ..domain.models import Location, RouteResult
from ..ports.cache import CachePort
from ..ports.routing import RoutingProviderPort
from ..adapters.cache.memory_cache import InMemoryCache


def fallback_route(origin: Location, destination: Location) -> RouteResult:
    """Great-circle distance, no duration, no geometry."""
    return RouteResult(
        distance_meters=distance_between(origin, destination),
        duration_seconds=None,
        geometry=(),
        provider="haversine",
    )


@dataclass
class RoutingResolver:
    """Resolve a RouteResult for an origin/destination pair.

    Attributes:
        provider: Remote road router
        config: Routing configuration
        cache: Successful provider routes per coordinate pair
    """

    provider: RoutingProviderPort
    config: RoutingConfig = field(default_factory=lambda: get_config().routing)
    cache: CachePort[RouteResult] = field(
        default_factory=lambda: InMemoryCache(name="routes")
    )

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def cache_key(origin: Location, destination: Location) -> str:
        return (
            f"{origin.latitude:.6f},{origin.longitude:.6f};"
            f"{destination.latitude:.6f},{destination.longitude:.6f}"
        )

    async def resolve(self, origin: Location, destination: Location) -> RouteResult:
        """Road route if available, haversine fallback otherwise.

        Args:
            origin: Start of the trip.
            destination: End of the trip.

        Returns:
            RouteResult; an empty geometry marks the fallback.
        """
        key = self.cache_key(origin, destination)
        cached = self.cache.get(key)
        if cached is not None:
            self._logger.debug("Route cache hit", extra={"key": key})
            return cached

        try:
            route = await asyncio.wait_for(
                self.provider.route(origin, destination),
                timeout=self.config.timeout_seconds,
            )
        except RoutingError as e:
            self._logger.warning(
                "Routing failed, using straight-line distance",
                extra={
                    "origin": origin.name,
                    "destination": destination.name,
                    "error": str(e),
                    "no_route": e.no_route,
                    "status_code": e.status_code,
                },
            )
            return fallback_route(origin, destination)
        except asyncio.TimeoutError:
            self._logger.warning(
                "Routing timed out, using straight-line distance",
                extra={"origin": origin.name, "destination": destination.name},
            )
            return fallback_route(origin, destination)
        except Exception as e:
            self._logger.error(
                "Routing unexpected error, using straight-line distance",
                extra={"origin": origin.name, "destination": destination.name, "error": str(e)},
            )
            return fallback_route(origin, destination)

        self.cache.set(key, route, ttl=self.config.cache_ttl_seconds)
        self._logger.info(
            "Route resolved",
            extra={
                "provider": route.provider,
                "distance_m": route.distance_meters,
                "vertices": len(route.geometry),
            },
        )
        return route
