"""Immutable domain models for the Fare Estimator.

All models are frozen dataclasses with slots. They carry no external
dependencies and represent the core business concepts: places picked by
the user, resolved routes, fare rules and the estimates computed from them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FareBasis(str, Enum):
    """How a fare estimate was priced."""

    FORMULA = "formula"
    FIXED = "fixed"


class Confidence(str, Enum):
    """Whether an estimate relied on a fallback distance or a loose key match."""

    EXACT = "exact"
    APPROXIMATE = "approximate"


class LocationFailureReason(Enum):
    """Reasons a device location provider can fail with."""

    SERVICE_DISABLED = "service_disabled"
    PERMISSION_DENIED = "permission_denied"
    PERMISSION_DENIED_FOREVER = "permission_denied_forever"


def _validate_coordinates(latitude: float, longitude: float) -> None:
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValueError(
            f"Coordinates must be finite, got ({latitude}, {longitude})"
        )
    if not -90 <= latitude <= 90:
        raise ValueError(f"Latitude must be between -90 and 90, got {latitude}")
    if not -180 <= longitude <= 180:
        raise ValueError(
            f"Longitude must be between -180 and 180, got {longitude}"
        )


@dataclass(frozen=True, slots=True)
class LatLng:
    """A single vertex of a route geometry."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        _validate_coordinates(self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class Location:
    """A named place with GPS coordinates.

    Attributes:
        name: Display name as returned by the geocoder or typed by the user
        latitude: Latitude in degrees
        longitude: Longitude in degrees
    """

    name: str
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        _validate_coordinates(self.latitude, self.longitude)

    @property
    def coordinates(self) -> LatLng:
        """Return the location as a geometry vertex."""
        return LatLng(lat=self.latitude, lng=self.longitude)


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Result of resolving a travel distance between two locations.

    An empty geometry marks a straight-line fallback distance. It is a
    valid result, not an error.

    Attributes:
        distance_meters: Travel distance in meters
        duration_seconds: Travel time if the provider reported one
        geometry: Ordered path vertices, possibly empty
        provider: Name of the source that produced the distance
    """

    distance_meters: float
    duration_seconds: Optional[float] = None
    geometry: tuple[LatLng, ...] = field(default_factory=tuple)
    provider: str = "haversine"

    @property
    def is_fallback(self) -> bool:
        """Check if the distance came from the straight-line fallback."""
        return len(self.geometry) == 0

    @property
    def distance_km(self) -> float:
        """Return the distance in kilometers."""
        return self.distance_meters / 1000


@dataclass(frozen=True, slots=True)
class FareFormula:
    """Distance-based pricing rule for one (mode, sub_type) pair.

    Attributes:
        mode: Transport mode (e.g. 'jeepney', 'taxi')
        sub_type: Variant of the mode (e.g. 'aircon', 'regular')
        base_fare: Flag-down amount
        per_kilometer: Rate applied to each kilometer travelled
        minimum_fare: Floor applied to the computed amount
        provincial_multiplier: Factor applied when provincial pricing is requested
        notes: Free-text remarks from the reference data
    """

    mode: str
    sub_type: str
    base_fare: float
    per_kilometer: float
    minimum_fare: Optional[float] = None
    provincial_multiplier: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate amounts."""
        if not self.mode:
            raise ValueError("Formula mode must not be empty")
        for name in ("base_fare", "per_kilometer"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number, got {value}")
        if self.minimum_fare is not None and (
            not math.isfinite(self.minimum_fare) or self.minimum_fare < 0
        ):
            raise ValueError(
                f"minimum_fare must be a non-negative number, got {self.minimum_fare}"
            )
        if self.provincial_multiplier is not None and (
            not math.isfinite(self.provincial_multiplier)
            or self.provincial_multiplier <= 0
        ):
            raise ValueError(
                "provincial_multiplier must be a positive number, "
                f"got {self.provincial_multiplier}"
            )

    @property
    def key(self) -> tuple[str, str]:
        return (self.mode, self.sub_type)


@dataclass(frozen=True, slots=True)
class FixedFareEntry:
    """Pre-negotiated point-to-point price.

    Direction matters: an entry for A -> B says nothing about B -> A.
    """

    origin_key: str
    destination_key: str
    price: float
    operator: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate keys and price."""
        if not self.origin_key or not self.destination_key:
            raise ValueError("Fixed fare keys must not be empty")
        if not math.isfinite(self.price) or self.price < 0:
            raise ValueError(f"price must be a non-negative number, got {self.price}")


@dataclass(frozen=True, slots=True)
class FixedFareTable:
    """All fixed fares published for one (mode, sub_type), e.g. one ferry line.

    Attributes:
        mode: Transport mode (e.g. 'ferry', 'lrt1')
        sub_type: Variant of the mode (e.g. 'economy', 'stored_value')
        entries: Directed origin -> destination prices
    """

    mode: str
    sub_type: str
    entries: tuple[FixedFareEntry, ...] = field(default_factory=tuple)

    @property
    def key(self) -> tuple[str, str]:
        return (self.mode, self.sub_type)


@dataclass(frozen=True, slots=True)
class FareEstimate:
    """One priced option in the result list.

    `basis` tags which pricing representation produced the amount.
    """

    mode: str
    sub_type: str
    amount: float
    basis: FareBasis
    confidence: Confidence
    operator: Optional[str] = None
    notes: Optional[str] = None

    @property
    def sort_key(self) -> tuple[float, str, str]:
        return (self.amount, self.mode, self.sub_type)


@dataclass(frozen=True, slots=True)
class FareQuote:
    """Complete answer for one origin/destination request.

    Attributes:
        origin: Selected origin
        destination: Selected destination
        route: Resolved route (possibly a fallback)
        estimates: Fares ordered by amount
    """

    origin: Location
    destination: Location
    route: RouteResult
    estimates: tuple[FareEstimate, ...] = field(default_factory=tuple)

    @property
    def cheapest(self) -> Optional[FareEstimate]:
        """Return the lowest fare, if any mode applied."""
        return self.estimates[0] if self.estimates else None
