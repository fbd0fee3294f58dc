from types import SimpleNamespace

import pytest

from rental_service.circuit_breaker import CircuitBreaker, CircuitOpenError
from rental_service.geocoding import Coordinates, GeocodeEnricher, locate_nothing
from tests.conftest import FakeLocator


def blank_rental(**fields):
    values = {
        "start_location": "Central Station",
        "end_location": "Harbour Gate 4",
        "start_latitude": None,
        "start_longitude": None,
        "end_latitude": None,
        "end_longitude": None,
    }
    values.update(fields)
    return SimpleNamespace(**values)


PLACES = {
    "Central Station": Coordinates(52.52, 13.36),
    "Harbour Gate 4": Coordinates(53.54, 9.98),
}


def test_changed_locations_are_resolved():
    locator = FakeLocator(PLACES)
    rental = blank_rental()

    GeocodeEnricher(locator).enrich(rental, {"start_location", "end_location"})

    assert (rental.start_latitude, rental.start_longitude) == (52.52, 13.36)
    assert (rental.end_latitude, rental.end_longitude) == (53.54, 9.98)
    assert locator.queries == ["Central Station", "Harbour Gate 4"]


def test_unchanged_locations_are_not_looked_up():
    locator = FakeLocator(PLACES)
    rental = blank_rental(start_latitude=1.0, start_longitude=2.0)

    GeocodeEnricher(locator).enrich(rental, {"end_location", "price"})

    assert locator.queries == ["Harbour Gate 4"]
    assert (rental.start_latitude, rental.start_longitude) == (1.0, 2.0)


def test_not_found_keeps_previous_coordinates():
    rental = blank_rental(start_location="Nowhere Land", start_latitude=1.0, start_longitude=2.0)

    GeocodeEnricher(FakeLocator(PLACES)).enrich(rental, {"start_location", "end_location"})

    assert (rental.start_latitude, rental.start_longitude) == (1.0, 2.0)
    assert rental.end_latitude == 53.54


def test_lookup_failure_is_treated_as_not_found():
    locator = FakeLocator(error=ConnectionError("geocoder down"))
    rental = blank_rental(end_latitude=3.0, end_longitude=4.0)

    GeocodeEnricher(locator).enrich(rental, {"start_location", "end_location"})

    assert rental.start_latitude is None
    assert (rental.end_latitude, rental.end_longitude) == (3.0, 4.0)


def test_locate_nothing():
    rental = blank_rental()
    GeocodeEnricher(locate_nothing).enrich(rental, {"start_location"})
    assert rental.start_latitude is None


def test_open_breaker_skips_lookups_until_timeout():
    ticks = [100.0]
    breaker = CircuitBreaker(failure_threshold=2, timeout=30.0, name="geocoder", clock=lambda: ticks[0])
    locator = FakeLocator(error=TimeoutError("slow"))
    enricher = GeocodeEnricher(locator, breaker)

    enricher.enrich(blank_rental(), {"start_location", "end_location"})
    assert breaker.get_state()["state"] == "OPEN"
    assert len(locator.queries) == 2

    enricher.enrich(blank_rental(), {"start_location", "end_location"})
    assert len(locator.queries) == 2

    ticks[0] += 30.0
    locator.error = None
    locator.places = PLACES
    rental = blank_rental()
    enricher.enrich(rental, {"start_location"})

    assert rental.start_latitude == 52.52
    assert breaker.get_state()["state"] == "CLOSED"
    assert breaker.get_state()["failures"] == 0


def test_half_open_failure_reopens():
    ticks = [0.0]
    breaker = CircuitBreaker(failure_threshold=1, timeout=10.0, clock=lambda: ticks[0])

    def boom():
        raise RuntimeError("down")

    assert breaker.call(boom, fallback=lambda: "fallback") == "fallback"
    assert breaker.stats.state == "OPEN"

    ticks[0] = 10.0
    with pytest.raises(RuntimeError):
        breaker.call(boom)
    assert breaker.stats.state == "OPEN"

    with pytest.raises(CircuitOpenError):
        breaker.call(boom)
