"""Read-only index of fare rules.

The catalog holds two structurally different pricing representations:
distance formulas keyed by (mode, sub_type), and fixed origin -> destination
tables for ferry and rail style modes. It is built once by `FareCatalog.load`
and never mutated afterwards, so concurrent readers need no locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .errors import DataIntegrityError
from .models import FareFormula, FixedFareEntry, FixedFareTable

FormulaRecord = Union[FareFormula, Mapping[str, Any]]

_EMPTY: Mapping[Any, Any] = MappingProxyType({})


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    return float(value)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def formula_from_record(record: FormulaRecord) -> FareFormula:
    """Build a FareFormula from a mapping such as a CSV row.

    Raises:
        ValueError: If a required field is missing or a number is invalid.
    """
    if isinstance(record, FareFormula):
        return record
    mode = record.get("mode")
    if mode is None or not str(mode).strip():
        raise ValueError("missing field 'mode'")
    try:
        return FareFormula(
            mode=str(mode).strip(),
            sub_type=str(record.get("sub_type") or "").strip(),
            base_fare=float(record["base_fare"]),
            per_kilometer=float(record["per_kilometer"]),
            minimum_fare=_optional_float(record.get("minimum_fare")),
            provincial_multiplier=_optional_float(record.get("provincial_multiplier")),
            notes=_optional_str(record.get("notes")),
        )
    except KeyError as e:
        raise ValueError(f"missing field {e.args[0]!r}") from e


@dataclass(frozen=True)
class FareCatalog:
    """Immutable fare rule index.

    Use `FareCatalog.load` to build one; the constructor performs no checks.
    """

    _formulas: Mapping[Tuple[str, str], FareFormula] = field(default_factory=lambda: _EMPTY)
    _fixed: Mapping[
        Tuple[str, str], Mapping[Tuple[str, str], FixedFareEntry]
    ] = field(default_factory=lambda: _EMPTY)
    _tables: Tuple[FixedFareTable, ...] = ()

    @classmethod
    def load(
        cls,
        formula_source: Iterable[FormulaRecord],
        fixed_fare_sources: Iterable[FixedFareTable] = (),
    ) -> FareCatalog:
        """Build a catalog, failing fast on inconsistent reference data.

        Args:
            formula_source: Formula records (FareFormula or CSV-like mappings).
            fixed_fare_sources: One table per fixed-fare (mode, sub_type).

        Returns:
            The loaded catalog.

        Raises:
            DataIntegrityError: On duplicate keys or invalid values.
        """
        formulas: Dict[Tuple[str, str], FareFormula] = {}
        for index, record in enumerate(formula_source):
            try:
                formula = formula_from_record(record)
            except (TypeError, ValueError) as e:
                raise DataIntegrityError(
                    f"Invalid fare formula at record {index}",
                    cause=e,
                    source="formulas",
                )
            if formula.key in formulas:
                raise DataIntegrityError(
                    f"Duplicate fare formula for mode={formula.mode!r} "
                    f"sub_type={formula.sub_type!r}",
                    source="formulas",
                )
            formulas[formula.key] = formula

        fixed: Dict[Tuple[str, str], Mapping[Tuple[str, str], FixedFareEntry]] = {}
        tables = []
        for table in fixed_fare_sources:
            if table.key in fixed:
                raise DataIntegrityError(
                    f"Duplicate fixed fare table for mode={table.mode!r} "
                    f"sub_type={table.sub_type!r}",
                    source=table.mode,
                )
            index_by_pair: Dict[Tuple[str, str], FixedFareEntry] = {}
            for entry in table.entries:
                pair = (entry.origin_key, entry.destination_key)
                if pair in index_by_pair:
                    raise DataIntegrityError(
                        f"Duplicate fixed fare {entry.origin_key!r} -> "
                        f"{entry.destination_key!r} in {table.mode}/{table.sub_type}",
                        source=table.mode,
                    )
                index_by_pair[pair] = entry
            fixed[table.key] = MappingProxyType(index_by_pair)
            tables.append(table)

        tables.sort(key=lambda t: t.key)
        return cls(
            _formulas=MappingProxyType(dict(sorted(formulas.items()))),
            _fixed=MappingProxyType(dict(sorted(fixed.items()))),
            _tables=tuple(tables),
        )

    def find_formula(
        self, mode: str, sub_type: Optional[str] = None
    ) -> Optional[FareFormula]:
        """Look up the formula for a mode.

        Without a sub_type the formula is only returned when the mode has
        exactly one sub type.
        """
        if sub_type is not None:
            return self._formulas.get((mode, sub_type))
        matches = [f for (m, _), f in self._formulas.items() if m == mode]
        if len(matches) == 1:
            return matches[0]
        return None

    def find_fixed(
        self,
        origin_key: str,
        destination_key: str,
        mode: Optional[str] = None,
        sub_type: Optional[str] = None,
    ) -> Optional[FixedFareEntry]:
        """Exact-match lookup of a directed fixed fare.

        Tables are searched in (mode, sub_type) order; the first hit wins.
        """
        pair = (origin_key, destination_key)
        for (table_mode, table_sub_type), entries in self._fixed.items():
            if mode is not None and table_mode != mode:
                continue
            if sub_type is not None and table_sub_type != sub_type:
                continue
            entry = entries.get(pair)
            if entry is not None:
                return entry
        return None

    def formulas(self) -> Tuple[FareFormula, ...]:
        """All formulas ordered by (mode, sub_type)."""
        return tuple(self._formulas.values())

    def fixed_tables(self) -> Tuple[FixedFareTable, ...]:
        """All fixed tables ordered by (mode, sub_type)."""
        return self._tables

    def fixed_keys(self, mode: str, sub_type: str) -> frozenset[str]:
        """Every origin or destination key used in one fixed table."""
        entries = self._fixed.get((mode, sub_type), _EMPTY)
        return frozenset(key for pair in entries for key in pair)

    def __len__(self) -> int:
        return len(self._formulas) + len(self._fixed)
