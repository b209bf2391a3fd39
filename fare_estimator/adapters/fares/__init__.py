"""Fare adapters - Implementations of FareSourcePort.

Available implementations:
- CSVFareRepository: Loads formulas and fixed fare tables from CSV files
"""

from .csv_repository import CSVFareRepository, read_fixed_fare_tables

__all__ = ["CSVFareRepository", "read_fixed_fare_tables"]
