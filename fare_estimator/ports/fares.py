"""Fare source port - Abstraction over fare reference data storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.catalog import FareCatalog


class FareSourcePort(Protocol):
    """Port for loading the fare catalog.

    Implementation: adapters/fares/csv_repository.py

    The repository loads the catalog once and hands out the same
    read-only instance until reload() is called.
    """

    def load(self) -> FareCatalog:
        """Return the catalog, loading it on first use.

        Raises:
            DataIntegrityError: If the reference data is corrupt.
        """
        ...

    def reload(self) -> FareCatalog:
        """Discard the cached catalog and load it again.

        Raises:
            DataIntegrityError: If the reference data is corrupt.
        """
        ...
