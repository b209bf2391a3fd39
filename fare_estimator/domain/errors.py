"""Typed domain errors for the Fare Estimator.

Errors fall in three tiers:
- Transient provider failures (GeocodingError, RoutingError,
  LocationUnavailableError) are raised by adapters and recovered by the
  resolvers, which degrade to empty suggestions or a straight-line distance.
- Data integrity violations (DataIntegrityError) are fatal for the
  operation in progress.
- Empty user input is not an error at all and yields an empty result.

All errors inherit from FareEstimatorError and can optionally wrap a
root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import LocationFailureReason


@dataclass
class FareEstimatorError(Exception):
    """Base error for the fare estimator domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class GeocodingError(FareEstimatorError):
    """Place lookup failed.

    Attributes:
        query: The query that failed
        is_rate_limited: Whether the provider rejected us for going too fast
    """

    query: str = ""
    is_rate_limited: bool = False


@dataclass
class RoutingError(FareEstimatorError):
    """Road routing failed.

    Attributes:
        provider: Routing provider name
        status_code: HTTP status when the provider answered
        no_route: Whether the provider reported that no route exists
    """

    provider: str = ""
    status_code: Optional[int] = None
    no_route: bool = False


@dataclass
class DataIntegrityError(FareEstimatorError):
    """Reference data or computed input is corrupt.

    Raised for duplicate catalog keys, invalid fare values and
    negative or non-finite distances.

    Attributes:
        source: File or component the bad data came from
    """

    source: Optional[str] = None


@dataclass
class LocationUnavailableError(FareEstimatorError):
    """The device could not report its position.

    Attributes:
        reason: Why the position is unavailable
    """

    reason: LocationFailureReason = LocationFailureReason.SERVICE_DISABLED


@dataclass
class ConfigurationError(FareEstimatorError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None
