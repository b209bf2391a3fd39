"""Device location port - Current position of the user's device."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import LatLng


class DeviceLocationPort(Protocol):
    """Port for the local positioning service.

    Permission prompts live outside this package; implementations only
    report the outcome.
    """

    async def get_current_coordinates(self) -> LatLng:
        """Return the device position.

        Raises:
            LocationUnavailableError: With the reason the position is unavailable.
        """
        ...
