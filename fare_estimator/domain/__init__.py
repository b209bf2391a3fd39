"""Domain layer - Core business models and errors.

This module contains immutable domain models, typed errors and the
fare catalog used throughout the application. No external dependencies.
"""

from .catalog import FareCatalog
from .errors import (
    ConfigurationError,
    DataIntegrityError,
    FareEstimatorError,
    GeocodingError,
    LocationUnavailableError,
    RoutingError,
)
from .geo import distance_between, haversine_meters
from .models import (
    Confidence,
    FareBasis,
    FareEstimate,
    FareFormula,
    FareQuote,
    FixedFareEntry,
    FixedFareTable,
    LatLng,
    Location,
    LocationFailureReason,
    RouteResult,
)

__all__ = [
    # Models
    "Location",
    "LatLng",
    "RouteResult",
    "FareFormula",
    "FixedFareEntry",
    "FixedFareTable",
    "FareEstimate",
    "FareQuote",
    "FareBasis",
    "Confidence",
    "LocationFailureReason",
    # Catalog
    "FareCatalog",
    # Geometry
    "haversine_meters",
    "distance_between",
    # Errors
    "FareEstimatorError",
    "GeocodingError",
    "RoutingError",
    "DataIntegrityError",
    "LocationUnavailableError",
    "ConfigurationError",
]
