"""Fare estimation service - Main orchestrator.

Wires the resolvers and the fare engine into the user-facing flow:
suggestions while typing, then route and fares for the selected pair.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..config import FarePolicyConfig, get_config
from ..domain.catalog import FareCatalog
from ..domain.models import Confidence, FareQuote, Location
from ..ports.fares import FareSourcePort
from .fare_engine import FareComputationEngine
from .geocoding_resolver import GeocodingResolver
from .routing_resolver import RoutingResolver

ORIGIN_FIELD = "origin"
DESTINATION_FIELD = "destination"


@dataclass
class FareEstimationService:
    """Main service for estimating fares between two places.

    The flow is:
    1. Debounced suggestions per input field
    2. Route resolution (road route or straight-line fallback)
    3. Fare computation over the loaded catalog

    Attributes:
        geocoder: Suggestion lookup for the input fields
        router: Route resolution with fallback
        fares: Source of the fare catalog
        policy: Default pricing policy
    """

    geocoder: GeocodingResolver
    router: RoutingResolver
    fares: FareSourcePort
    policy: FarePolicyConfig = field(default_factory=lambda: get_config().policy)

    _engine: Optional[FareComputationEngine] = field(default=None, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def engine(self) -> FareComputationEngine:
        """Engine over the current catalog, built on first use.

        Loads the catalog synchronously; async callers use `load_engine`.

        Raises:
            DataIntegrityError: If the fare reference data is corrupt.
        """
        return self._engine_for(self.fares.load())

    async def load_engine(self) -> FareComputationEngine:
        """Like `engine`, with the catalog read in a worker thread."""
        catalog = await asyncio.to_thread(self.fares.load)
        return self._engine_for(catalog)

    def _engine_for(self, catalog: FareCatalog) -> FareComputationEngine:
        if self._engine is None or self._engine.catalog is not catalog:
            self._engine = FareComputationEngine(catalog)
        return self._engine

    def suggest(self, query: str, field_name: str = ORIGIN_FIELD) -> asyncio.Future[List[Location]]:
        """Debounced suggestions for one input field."""
        return self.geocoder.lookup(query, field_name)

    async def estimate(
        self,
        origin: Location,
        destination: Location,
        provincial: Optional[bool] = None,
    ) -> FareQuote:
        """Resolve the route and price every applicable mode.

        Args:
            origin: Selected origin.
            destination: Selected destination.
            provincial: Provincial pricing; None uses the configured policy.

        Returns:
            FareQuote with the route and the ranked estimates.

        Raises:
            DataIntegrityError: If reference data or the distance is corrupt.
        """
        engine = await self.load_engine()
        self._logger.info(
            "Starting fare estimation",
            extra={"origin": origin.name, "destination": destination.name},
        )

        route = await self.router.resolve(origin, destination)
        use_provincial = self.policy.provincial if provincial is None else provincial
        estimates = engine.estimate(origin, destination, route, provincial=use_provincial)

        self._logger.info(
            "Fares estimated",
            extra={
                "distance_km": round(route.distance_km, 3),
                "fallback": route.is_fallback,
                "estimates": len(estimates),
            },
        )
        return FareQuote(
            origin=origin,
            destination=destination,
            route=route,
            estimates=tuple(estimates),
        )

    def format_quote(self, quote: FareQuote) -> str:
        """Format a quote as a human-readable table."""
        distance = f"{quote.route.distance_km:.2f} km"
        if quote.route.is_fallback:
            distance += " (straight line)"
        lines = [
            f"{quote.origin.name} -> {quote.destination.name}",
            f"Distance: {distance}",
        ]
        if not quote.estimates:
            lines.append("No fares available")
        for estimate in quote.estimates:
            label = f"{estimate.mode}/{estimate.sub_type}" if estimate.sub_type else estimate.mode
            marker = "~" if estimate.confidence is Confidence.APPROXIMATE else " "
            lines.append(f"{marker} {label:<28} {estimate.amount:>10.2f}  [{estimate.basis.value}]")
        return "\n".join(lines)
