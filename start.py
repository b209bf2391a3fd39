"""Simple launcher for one fare estimation.

Asks for an origin and a destination, lets you pick among the geocoder's
suggestions, then prints the ranked fares.
"""

from __future__ import annotations

import asyncio
import sys
from typing import List, Optional

from fare_estimator.container import Container
from fare_estimator.domain.errors import DataIntegrityError
from fare_estimator.domain.models import Location
from fare_estimator.logging_setup import configure_logging
from fare_estimator.services import FareEstimationService
from fare_estimator.services.fare_estimation import DESTINATION_FIELD, ORIGIN_FIELD


def pick(label: str, places: List[Location]) -> Optional[Location]:
    if not places:
        print(f"No place found for {label}.")
        return None
    for index, place in enumerate(places, start=1):
        print(f"{index}) {place.name}")
    choice = input(f"Choice for {label} (1-{len(places)}) : ").strip()
    try:
        return places[int(choice) - 1]
    except (ValueError, IndexError):
        print("Choice not recognized, using the first one.")
        return places[0]


async def run(container: Container) -> int:
    service: FareEstimationService = container.resolve(FareEstimationService)
    try:
        origin_text = input("From: ")
        origin = pick(ORIGIN_FIELD, await service.suggest(origin_text, ORIGIN_FIELD))
        destination_text = input("To: ")
        destination = pick(
            DESTINATION_FIELD, await service.suggest(destination_text, DESTINATION_FIELD)
        )
        if origin is None or destination is None:
            return 1

        try:
            quote = await service.estimate(origin, destination)
        except DataIntegrityError as e:
            print(f"Invalid fare data: {e}")
            return 2
        print(service.format_quote(quote))
        return 0
    finally:
        await container.aclose()


def main() -> None:
    container = Container.create_default()
    configure_logging(container.config.observability)
    print("=== Fare Estimator ===")
    sys.exit(asyncio.run(run(container)))


if __name__ == "__main__":
    main()
