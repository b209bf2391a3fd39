"""Great-circle distance used when no road route can be resolved."""

from __future__ import annotations

import math

from .models import Location

EARTH_RADIUS_METERS = 6_371_000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return great-circle distance in meters between two lat/lng pairs."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dl / 2) ** 2
    )
    # Rounding can push a slightly outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.asin(math.sqrt(a))
    return EARTH_RADIUS_METERS * c


def distance_between(origin: Location, destination: Location) -> float:
    """Haversine distance in meters between two locations."""
    return haversine_meters(
        origin.latitude, origin.longitude, destination.latitude, destination.longitude
    )
