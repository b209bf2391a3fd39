"""Shared fixtures: places, fare rules and routes."""

from __future__ import annotations

from typing import List

import pytest

from fare_estimator.domain.catalog import FareCatalog
from fare_estimator.domain.errors import RoutingError
from fare_estimator.domain.models import (
    FareFormula,
    FixedFareEntry,
    FixedFareTable,
    LatLng,
    Location,
    RouteResult,
)


@pytest.fixture
def batangas() -> Location:
    return Location(name="Batangas Port", latitude=13.7565, longitude=121.0583)


@pytest.fixture
def calapan() -> Location:
    return Location(name="Calapan Port", latitude=13.4115, longitude=121.1803)


@pytest.fixture
def makati() -> Location:
    return Location(name="Makati", latitude=14.5547, longitude=121.0244)


@pytest.fixture
def quezon_city() -> Location:
    return Location(name="Quezon City", latitude=14.6760, longitude=121.0437)


@pytest.fixture
def road_route() -> RouteResult:
    return RouteResult(
        distance_meters=5000.0,
        duration_seconds=600.0,
        geometry=(LatLng(14.5547, 121.0244), LatLng(14.6760, 121.0437)),
        provider="osrm",
    )


@pytest.fixture
def formulas() -> List[FareFormula]:
    return [
        FareFormula(mode="jeepney", sub_type="traditional", base_fare=14.0, per_kilometer=1.75),
        FareFormula(
            mode="taxi",
            sub_type="regular",
            base_fare=45.0,
            per_kilometer=13.5,
            provincial_multiplier=1.2,
        ),
        FareFormula(
            mode="bus",
            sub_type="aircon",
            base_fare=14.0,
            per_kilometer=1.75,
            minimum_fare=25.0,
            provincial_multiplier=1.1,
        ),
    ]


@pytest.fixture
def ferry_table() -> FixedFareTable:
    return FixedFareTable(
        mode="ferry",
        sub_type="economy",
        entries=(
            FixedFareEntry("Batangas Port", "Calapan Port", 340.0, "Montenegro Lines"),
            FixedFareEntry("Cebu Port", "Tagbilaran Port", 500.0, "OceanJet"),
        ),
    )


@pytest.fixture
def catalog(formulas, ferry_table) -> FareCatalog:
    return FareCatalog.load(formulas, [ferry_table])


@pytest.fixture
def routing_error() -> RoutingError:
    return RoutingError("OSRM request failed", provider="osrm")
