"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Geocoding services (Nominatim)
- Road routing services (OSRM)
- Fare reference data (CSV files)
- Caching systems (in-memory, null)
"""
