"""Tests for domain models and great-circle distance."""

import math

import pytest

from fare_estimator.domain.errors import (
    DataIntegrityError,
    FareEstimatorError,
    GeocodingError,
    RoutingError,
)
from fare_estimator.domain.geo import EARTH_RADIUS_METERS, distance_between, haversine_meters
from fare_estimator.domain.models import (
    FareFormula,
    FixedFareEntry,
    LatLng,
    Location,
    RouteResult,
)


@pytest.mark.parametrize(
    "latitude,longitude",
    [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.1), (0.0, -181.0), (math.nan, 0.0), (0.0, math.inf)],
)
def test_location_rejects_invalid_coordinates(latitude, longitude):
    with pytest.raises(ValueError):
        Location("Nowhere", latitude, longitude)


def test_location_accepts_the_edges():
    place = Location("Pole", 90.0, -180.0)

    assert place.coordinates == LatLng(90.0, -180.0)


def test_route_without_geometry_is_a_fallback():
    assert RouteResult(1500.0).is_fallback
    assert RouteResult(1500.0).distance_km == 1.5
    assert not RouteResult(1500.0, 120.0, (LatLng(0.0, 0.0),), "osrm").is_fallback


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_fare": -1.0, "per_kilometer": 1.0},
        {"base_fare": 1.0, "per_kilometer": math.inf},
        {"base_fare": 1.0, "per_kilometer": 1.0, "minimum_fare": -5.0},
        {"base_fare": 1.0, "per_kilometer": 1.0, "provincial_multiplier": 0.0},
    ],
)
def test_formula_rejects_invalid_amounts(kwargs):
    with pytest.raises(ValueError):
        FareFormula("bus", "ordinary", **kwargs)


def test_fixed_entry_requires_keys_and_a_valid_price():
    with pytest.raises(ValueError):
        FixedFareEntry("", "Calapan Port", 340.0)
    with pytest.raises(ValueError):
        FixedFareEntry("Batangas Port", "Calapan Port", math.nan)


def test_one_degree_of_latitude():
    assert haversine_meters(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.93, abs=0.01)


def test_haversine_is_symmetric_and_zero_for_same_point(makati, quezon_city):
    assert distance_between(makati, makati) == 0.0
    assert distance_between(makati, quezon_city) == pytest.approx(
        distance_between(quezon_city, makati)
    )


def test_haversine_crosses_the_date_line():
    across = haversine_meters(0.0, 179.9, 0.0, -179.9)

    assert across == pytest.approx(haversine_meters(0.0, 0.0, 0.0, 0.2))


def test_errors_carry_their_cause():
    cause = ConnectionError("reset by peer")
    error = RoutingError("OSRM request failed", cause=cause, provider="osrm")

    assert isinstance(error, FareEstimatorError)
    assert str(error) == "OSRM request failed: reset by peer"
    assert str(GeocodingError("Geocoding timed out", query="Makati")) == "Geocoding timed out"
    assert DataIntegrityError("bad", source="fares.csv").source == "fares.csv"


@pytest.mark.parametrize(
    "lat1,lon1,lat2,lon2",
    [
        (-43.5577, -28.3277, 43.5577, 151.6723),
        (0.0, 0.0, 0.0, 180.0),
        (90.0, 0.0, -90.0, 0.0),
        (14.5547, 121.0244, -14.5547, -58.9756),
    ],
)
def test_antipodal_points_are_half_a_circumference_apart(lat1, lon1, lat2, lon2):
    assert haversine_meters(lat1, lon1, lat2, lon2) == pytest.approx(
        math.pi * EARTH_RADIUS_METERS, rel=1e-9
    )
