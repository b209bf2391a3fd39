"""Services layer - Application orchestration.

Available services:
- DebounceScheduler: Keyed, cancellable delayed execution
- GeocodingResolver: Debounced place suggestions
- RoutingResolver: Road distance with straight-line fallback
- FareComputationEngine: Ranked fares for a resolved route
- FareEstimationService: End-to-end fare estimation
"""

from .debounce import DebounceScheduler
from .fare_engine import FareComputationEngine
from .fare_estimation import FareEstimationService
from .geocoding_resolver import GeocodingResolver
from .routing_resolver import RoutingResolver

__all__ = [
    "DebounceScheduler",
    "GeocodingResolver",
    "RoutingResolver",
    "FareComputationEngine",
    "FareEstimationService",
]
