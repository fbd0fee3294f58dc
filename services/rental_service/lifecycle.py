"""Checks that can veto a delete, and the renter counter kept alongside it."""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from rental_service.status import StatusCode

logger = logging.getLogger(__name__)

RENTAL_IN_PROGRESS_MESSAGE = (
    "This rental is currently in progress and cannot be deleted until it is complete"
)


class LifecycleViolation(Exception):
    """Raised to abort a destructive action before it takes effect."""


@dataclass(frozen=True)
class GuardResult:
    allowed: bool
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str) -> "GuardResult":
        return cls(allowed=False, message=message)

    def raise_for_violation(self) -> None:
        if not self.allowed:
            raise LifecycleViolation(self.message)


def can_delete_car(car_id: int, count_rentals_for_car: Callable[[int], int]) -> GuardResult:
    # Not hooked into car deletion automatically; the car path calls it.
    rentals = count_rentals_for_car(car_id)
    if rentals == 0:
        return GuardResult.allow()

    noun, pronoun = ("rental", "it") if rentals == 1 else ("rentals", "them")
    return GuardResult.deny(
        f"This car is used in {rentals} other {noun}. "
        f"You must first delete {pronoun} before you can delete this car"
    )


def can_delete_rental(rental) -> GuardResult:
    if rental.status == StatusCode.IN_PROGRESS:
        return GuardResult.deny(RENTAL_IN_PROGRESS_MESSAGE)
    return GuardResult.allow()


def decrement_renter_count(rental, find_user: Callable, counters) -> None:
    """Take one off the renter's ``renter_rentals_count`` if the rental was claimed.

    ``counters.decrement_renter_count`` writes the column directly; the value
    is not clamped at zero.
    """
    if rental.renter_id is None:
        return
    renter = find_user(rental.renter_id)
    counters.decrement_renter_count(renter)
    logger.info(f"Decremented renter_rentals_count for user {rental.renter_id}")
