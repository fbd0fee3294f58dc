"""Ordered save and destroy steps for a Rental.

save:    normalize_price -> convert_times -> validate -> geocode -> persist
destroy: guard -> delete -> decrement_renter_count

A failing save stage stops the chain and rolls back the unit of work; its
errors come back in the :class:`SaveResult`. Destroy aborts with
:class:`LifecycleViolation` before anything is written.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from rental_service.clock import local_to_utc as default_local_to_utc, utcnow
from rental_service.geocoding import GeocodeEnricher
from rental_service.lifecycle import (
    LifecycleViolation, can_delete_car, can_delete_rental, decrement_renter_count
)
from rental_service.status import StatusCode
from rental_service.validation import ValidationErrors, normalize_price, validate_rental

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    ok: bool
    stage: str
    errors: ValidationErrors = field(default_factory=ValidationErrors)


class RentalPipeline:
    def __init__(
        self,
        store,
        enricher: GeocodeEnricher,
        now: Callable[[], datetime] = utcnow,
        local_to_utc: Callable[[datetime], datetime] = default_local_to_utc
    ):
        self.store = store
        self.enricher = enricher
        self.now = now
        self.local_to_utc = local_to_utc

    def save(self, rental, commit: bool = True) -> SaveResult:
        stages = (
            ("normalize_price", self._normalize_price),
            ("convert_times", self._convert_times),
            ("validate", self._validate),
            ("geocode", self._geocode),
            ("persist", self._persist),
        )
        for name, stage in stages:
            errors = stage(rental)
            if errors:
                # discard the rejected values so a later commit cannot write them
                self.store.rollback()
                logger.info(f"Rental save stopped at {name}: {errors.full_messages()}")
                return SaveResult(ok=False, stage=name, errors=errors)

        if commit:
            self._commit()
        logger.info(f"Saved rental {rental.id}")
        return SaveResult(ok=True, stage="persist")

    def _normalize_price(self, rental) -> Optional[ValidationErrors]:
        rental.price = normalize_price(rental.price)
        return None

    def _convert_times(self, rental) -> Optional[ValidationErrors]:
        if rental.start_time is not None:
            rental.start_time = self.local_to_utc(rental.start_time)
        if rental.end_time is not None:
            rental.end_time = self.local_to_utc(rental.end_time)
        return None

    def _validate(self, rental) -> Optional[ValidationErrors]:
        return validate_rental(rental, self.now())

    def _geocode(self, rental) -> Optional[ValidationErrors]:
        self.enricher.enrich(rental, rental.changed_attributes())
        return None

    def _persist(self, rental) -> Optional[ValidationErrors]:
        self.store.persist(rental)
        return None

    def destroy(self, rental) -> None:
        rental_id = rental.id
        guard = can_delete_rental(rental)
        if not guard.allowed:
            logger.info(f"Refused to delete rental {rental_id}: {guard.message}")
        guard.raise_for_violation()

        try:
            self.store.delete(rental)
            decrement_renter_count(rental, self.store.find_user, self.store)
        except Exception:
            self.store.rollback()
            raise
        self._commit()
        logger.info(f"Deleted rental {rental_id}")

    def claim(self, rental, renter_id: int) -> SaveResult:
        """Hand an available rental to ``renter_id`` and count it for the renter."""
        if rental.renter_id is not None:
            raise LifecycleViolation("This rental has already been claimed")
        if rental.status != StatusCode.AVAILABLE:
            raise LifecycleViolation("Only available rentals can be claimed")

        renter = self.store.find_user(renter_id)
        rental.renter_id = renter_id
        rental.status = int(StatusCode.UPCOMING)

        result = self.save(rental, commit=False)
        if not result.ok:
            return result

        self.store.increment_renter_count(renter)
        self._commit()
        logger.info(f"Rental {rental.id} claimed by user {renter_id}")
        return result

    def delete_car(self, car) -> None:
        car_id = car.id
        can_delete_car(car_id, self.store.count_rentals_for_car).raise_for_violation()
        self.store.delete_car(car)
        self._commit()
        logger.info(f"Deleted car {car_id}")

    def _commit(self) -> None:
        try:
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
