"""Geocoding adapters - Implementations of PlaceSearchPort.

Available implementations:
- NominatimPlaceSearchAdapter: OpenStreetMap Nominatim place search
"""

from .nominatim_adapter import NominatimPlaceSearchAdapter

__all__ = ["NominatimPlaceSearchAdapter"]
