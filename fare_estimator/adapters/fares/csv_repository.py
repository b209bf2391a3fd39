"""CSV fare repository adapter.

Loads the fare catalog from:
- `fare_formulas.csv`: mode,sub_type,base_fare,per_kilometer,minimum_fare,
  provincial_multiplier,notes
- every `*.csv` under the fixed fares directory:
  mode,sub_type,origin,destination,price,operator

The catalog is loaded once and cached; `reload()` rebuilds it.
"""

from __future__ import annotations

import csv
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ...config import FareDataConfig, get_config
from ...domain.catalog import FareCatalog
from ...domain.errors import DataIntegrityError
from ...domain.models import FixedFareEntry, FixedFareTable


def read_fixed_fare_tables(paths: List[Path]) -> List[FixedFareTable]:
    """Group fixed fare rows from several CSV files into tables.

    Raises:
        DataIntegrityError: If a row is incomplete or a price is invalid.
    """
    grouped: Dict[Tuple[str, str], List[FixedFareEntry]] = {}
    for path in paths:
        with path.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            # Header is line 1
            for line_no, row in enumerate(reader, start=2):
                mode = (row.get("mode") or "").strip()
                sub_type = (row.get("sub_type") or "").strip()
                try:
                    if not mode:
                        raise ValueError("missing mode")
                    entry = FixedFareEntry(
                        origin_key=(row.get("origin") or "").strip(),
                        destination_key=(row.get("destination") or "").strip(),
                        price=float(row.get("price") or "nan"),
                        operator=(row.get("operator") or "").strip() or None,
                    )
                except ValueError as e:
                    raise DataIntegrityError(
                        f"Invalid fixed fare on line {line_no}",
                        cause=e,
                        source=str(path),
                    )
                grouped.setdefault((mode, sub_type), []).append(entry)

    return [
        FixedFareTable(mode=mode, sub_type=sub_type, entries=tuple(entries))
        for (mode, sub_type), entries in grouped.items()
    ]


@dataclass
class CSVFareRepository:
    """Fare repository that loads from CSV files.

    Implements FareSourcePort.

    Attributes:
        config: Fare data configuration (paths, file names)
    """

    config: FareDataConfig = field(default_factory=lambda: get_config().data)

    _catalog: Optional[FareCatalog] = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> FareCatalog:
        """Load the fare catalog from CSV files.

        Returns:
            The cached catalog, loading it on first use.

        Raises:
            DataIntegrityError: If a file is missing, unreadable or corrupt.
        """
        with self._lock:
            if self._catalog is None:
                self._catalog = self._load_catalog()
            return self._catalog

    def reload(self) -> FareCatalog:
        """Discard the cached catalog and read the files again."""
        with self._lock:
            self._catalog = None
        return self.load()

    def _fixed_fare_files(self) -> List[Path]:
        directory = self.config.fixed_fares_path
        if not directory.is_dir():
            self._logger.warning(
                "Fixed fares directory not found",
                extra={"path": str(directory)},
            )
            return []
        return sorted(directory.glob("*.csv"))

    def _load_catalog(self) -> FareCatalog:
        formulas_path = self.config.formulas_path
        self._logger.debug(
            "Loading fare catalog",
            extra={
                "formulas_path": str(formulas_path),
                "fixed_fares_path": str(self.config.fixed_fares_path),
            },
        )

        try:
            with formulas_path.open(encoding="utf-8", newline="") as f:
                formula_rows = list(csv.DictReader(f))
            fixed_files = self._fixed_fare_files()
            tables = read_fixed_fare_tables(fixed_files)
        except OSError as e:
            raise DataIntegrityError(
                f"Failed to read fare data: {e}",
                cause=e,
                source=str(formulas_path),
            )

        try:
            catalog = FareCatalog.load(formula_rows, tables)
        except DataIntegrityError as e:
            if e.source == "formulas":
                e.source = str(formulas_path)
            self._logger.error(
                "Fare catalog rejected",
                extra={"error": str(e), "source": e.source},
            )
            raise

        self._logger.info(
            "Fare catalog loaded",
            extra={
                "formulas": len(catalog.formulas()),
                "fixed_tables": len(catalog.fixed_tables()),
                "fixed_files": len(fixed_files),
            },
        )
        return catalog
