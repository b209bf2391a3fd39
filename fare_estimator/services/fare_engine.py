"""Fare computation across formula-priced and fixed-priced modes.

Formula modes price the resolved distance; fixed modes look up a published
origin -> destination price and are left out when no price exists. Both
end up as FareEstimate values tagged with their basis and sorted by amount,
then mode, then sub type.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..domain.catalog import FareCatalog
from ..domain.errors import DataIntegrityError
from ..domain.models import (
    Confidence,
    FareBasis,
    FareEstimate,
    FareFormula,
    FixedFareEntry,
    FixedFareTable,
    Location,
    RouteResult,
)


def normalize_key(name: str) -> str:
    """Loose form of a place name used for best-effort key matching.

    Geocoder display names look like "Batangas Port, Batangas City, ...";
    only the first segment is kept, case-folded with whitespace collapsed.
    """
    first = name.split(",", 1)[0]
    return " ".join(first.casefold().split())


def formula_amount(
    formula: FareFormula, distance_meters: float, provincial: bool = False
) -> float:
    """Price one formula for a distance.

    base + rate * km, clamped up to the minimum fare, then multiplied by
    the provincial factor when the caller asks for provincial pricing.
    """
    amount = formula.base_fare + formula.per_kilometer * (distance_meters / 1000)
    if formula.minimum_fare is not None and amount < formula.minimum_fare:
        amount = formula.minimum_fare
    if provincial and formula.provincial_multiplier is not None:
        amount *= formula.provincial_multiplier
    return round(amount, 2)


@dataclass
class FareComputationEngine:
    """Turn a resolved route into a ranked list of fares.

    Attributes:
        catalog: Loaded, read-only fare catalog
    """

    catalog: FareCatalog

    _logger: logging.Logger = field(init=False, repr=False)
    _loose_keys: Dict[Tuple[str, str], Dict[str, str]] = field(
        init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._loose_keys = {}
        for table in self.catalog.fixed_tables():
            loose: Dict[str, str] = {}
            for key in sorted(self.catalog.fixed_keys(table.mode, table.sub_type)):
                loose.setdefault(normalize_key(key), key)
            self._loose_keys[table.key] = loose

    def estimate(
        self,
        origin: Location,
        destination: Location,
        route: RouteResult,
        *,
        provincial: bool = False,
    ) -> List[FareEstimate]:
        """Compute every applicable fare for a trip.

        Args:
            origin: Selected origin; its name is the fixed-fare origin key.
            destination: Selected destination; its name is the destination key.
            route: Resolved route; an empty geometry marks a fallback distance.
            provincial: Apply provincial multipliers to formula fares.

        Returns:
            Estimates sorted by amount, then mode, then sub type.

        Raises:
            DataIntegrityError: If the distance is negative or not finite.
        """
        distance = route.distance_meters
        if not math.isfinite(distance) or distance < 0:
            raise DataIntegrityError(
                f"Invalid route distance: {distance}",
                source=route.provider,
            )

        formula_confidence = (
            Confidence.APPROXIMATE if route.is_fallback else Confidence.EXACT
        )
        estimates = [
            FareEstimate(
                mode=formula.mode,
                sub_type=formula.sub_type,
                amount=formula_amount(formula, distance, provincial),
                basis=FareBasis.FORMULA,
                confidence=formula_confidence,
                notes=formula.notes,
            )
            for formula in self.catalog.formulas()
        ]

        for table in self.catalog.fixed_tables():
            found = self._find_fixed(table, origin.name, destination.name)
            if found is None:
                continue
            entry, confidence = found
            estimates.append(
                FareEstimate(
                    mode=table.mode,
                    sub_type=table.sub_type,
                    amount=round(entry.price, 2),
                    basis=FareBasis.FIXED,
                    confidence=confidence,
                    operator=entry.operator,
                )
            )

        estimates.sort(key=lambda e: e.sort_key)
        self._logger.debug(
            "Fares computed",
            extra={
                "distance_m": distance,
                "fallback": route.is_fallback,
                "estimates": len(estimates),
            },
        )
        return estimates

    def _find_fixed(
        self, table: FixedFareTable, origin_name: str, destination_name: str
    ) -> Optional[Tuple[FixedFareEntry, Confidence]]:
        entry = self.catalog.find_fixed(
            origin_name, destination_name, mode=table.mode, sub_type=table.sub_type
        )
        if entry is not None:
            return entry, Confidence.EXACT

        loose = self._loose_keys.get(table.key, {})
        origin_key = loose.get(normalize_key(origin_name))
        destination_key = loose.get(normalize_key(destination_name))
        if origin_key is None or destination_key is None:
            return None

        entry = self.catalog.find_fixed(
            origin_key, destination_key, mode=table.mode, sub_type=table.sub_type
        )
        if entry is None:
            return None
        return entry, Confidence.APPROXIMATE
