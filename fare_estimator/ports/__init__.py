"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the application core and external
adapters. They enable dependency injection and make the system testable.

This module follows the Hexagonal Architecture pattern:
- Input ports: How the application is driven (services)
- Output ports: How the application drives external systems (adapters)
"""

from .cache import CachePort
from .fares import FareSourcePort
from .geocoding import PlaceSearchPort
from .location import DeviceLocationPort
from .routing import RoutingProviderPort

__all__ = [
    # Geocoding
    "PlaceSearchPort",
    "DeviceLocationPort",
    # Routing
    "RoutingProviderPort",
    # Fares
    "FareSourcePort",
    # Cache
    "CachePort",
]
