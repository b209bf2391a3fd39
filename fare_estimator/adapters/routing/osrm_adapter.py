"""OSRM road routing adapter.

Requests a single route with full GeoJSON geometry from an OSRM server
and maps it onto a RouteResult. GeoJSON coordinates are [lng, lat]; they
are flipped to (lat, lng) here so nothing downstream sees the provider's
axis order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ...config import RoutingConfig, get_config
from ...domain.errors import RoutingError
from ...domain.models import LatLng, Location, RouteResult

PROVIDER = "osrm"


def parse_route_payload(data: Any) -> RouteResult:
    """Build a RouteResult from an OSRM /route response body.

    Raises:
        RoutingError: If OSRM reports no route or the body is malformed.
    """
    if not isinstance(data, dict):
        raise RoutingError("Malformed OSRM payload", provider=PROVIDER)

    code = data.get("code")
    if code != "Ok":
        raise RoutingError(
            f"OSRM returned {code}: {data.get('message', '')}".rstrip(": "),
            provider=PROVIDER,
            no_route=code in ("NoRoute", "NoSegment"),
        )

    routes = data.get("routes") or []
    if not routes:
        raise RoutingError("OSRM returned no routes", provider=PROVIDER, no_route=True)

    try:
        route = routes[0]
        distance = float(route["distance"])
        duration = route.get("duration")
        coordinates = (route.get("geometry") or {}).get("coordinates") or []
        geometry = tuple(LatLng(lat=float(lat), lng=float(lng)) for lng, lat in coordinates)
    except (KeyError, TypeError, ValueError) as e:
        raise RoutingError("Malformed OSRM payload", cause=e, provider=PROVIDER)

    if distance < 0:
        raise RoutingError("OSRM returned a negative distance", provider=PROVIDER)

    return RouteResult(
        distance_meters=distance,
        duration_seconds=float(duration) if duration is not None else None,
        geometry=geometry,
        provider=PROVIDER,
    )


@dataclass
class OSRMRoutingAdapter:
    """Routing provider backed by an OSRM HTTP server.

    Implements RoutingProviderPort. The adapter owns its httpx client
    unless one is injected; call `aclose()` when done.

    Attributes:
        config: Routing configuration
        client: Optional pre-built async HTTP client
    """

    config: RoutingConfig = field(default_factory=lambda: get_config().routing)
    client: Optional[httpx.AsyncClient] = None

    _owns_client: bool = field(default=False, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout_seconds)
            )
            self._owns_client = True
        return self.client

    def build_url(self, origin: Location, destination: Location) -> str:
        """OSRM path for a two-point route; coordinates go lng,lat."""
        base = self.config.base_url.rstrip("/")
        return (
            f"{base}/route/v1/{self.config.profile}/"
            f"{origin.longitude},{origin.latitude};"
            f"{destination.longitude},{destination.latitude}"
        )

    async def route(self, origin: Location, destination: Location) -> RouteResult:
        """Compute a road route with full geometry.

        Raises:
            RoutingError: On network errors, timeouts, bad status codes,
                "no route" answers and malformed payloads.
        """
        url = self.build_url(origin, destination)
        self._logger.debug("Requesting route", extra={"url": url})

        try:
            response = await self._get_client().get(
                url, params={"overview": "full", "geometries": "geojson"}
            )
        except httpx.HTTPError as e:
            raise RoutingError("OSRM request failed", cause=e, provider=PROVIDER)

        try:
            data = response.json()
        except ValueError as e:
            data = None
            if response.is_success:
                raise RoutingError(
                    "OSRM answered with invalid JSON",
                    cause=e,
                    provider=PROVIDER,
                    status_code=response.status_code,
                )

        if not response.is_success:
            # OSRM answers NoRoute with HTTP 400 and a JSON body
            code = data.get("code") if isinstance(data, dict) else None
            raise RoutingError(
                f"OSRM returned HTTP {response.status_code}",
                provider=PROVIDER,
                status_code=response.status_code,
                no_route=code in ("NoRoute", "NoSegment"),
            )

        return parse_route_payload(data)

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False
