"""Latitude/longitude enrichment of a rental's pickup and drop-off locations.

The lookup itself is a collaborator: any callable taking the free-text
location and returning :class:`Coordinates` or ``None``. A failing lookup is
treated exactly like "not found", so a save never fails because of it and the
coordinate fields may stay stale or empty.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from rental_service.circuit_breaker import CircuitBreaker
from rental_service.config import GEOCODER_FAILURE_THRESHOLD, GEOCODER_RESET_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


Locate = Callable[[str], Optional[Coordinates]]

# location field -> (latitude field, longitude field)
ENDPOINTS = {
    "start_location": ("start_latitude", "start_longitude"),
    "end_location": ("end_latitude", "end_longitude"),
}


def locate_nothing(query: str) -> Optional[Coordinates]:
    return None


class GeocodeEnricher:
    def __init__(self, locate: Locate, breaker: Optional[CircuitBreaker] = None):
        self.locate = locate
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=GEOCODER_FAILURE_THRESHOLD,
            timeout=GEOCODER_RESET_TIMEOUT,
            name="geocoder"
        )

    def lookup(self, query: str) -> Optional[Coordinates]:
        return self.breaker.call(self.locate, query, fallback=lambda: None)

    def enrich(self, rental, changed_fields: Iterable[str]) -> None:
        changed = set(changed_fields)
        for location_field, (lat_field, lon_field) in ENDPOINTS.items():
            if location_field not in changed:
                continue
            query = getattr(rental, location_field)
            if not query:
                continue

            found = self.lookup(query)
            if found is None:
                logger.info(f"No coordinates found for {location_field} {query!r}")
                continue

            setattr(rental, lat_field, found.latitude)
            setattr(rental, lon_field, found.longitude)
