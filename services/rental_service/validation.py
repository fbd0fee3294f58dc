"""Field and time-window rules a Rental must satisfy before it is persisted."""
import re
from datetime import datetime
from typing import Optional

from rental_service.status import MAX_STATUS

VALID_LOCATION = re.compile(r"[a-z0-9#().,' -]+", re.IGNORECASE | re.ASCII)
VALID_PRICE = re.compile(r"\d+(\.\d\d?)?", re.ASCII)
VALID_TERMS = re.compile(r"[\w\r\n`~!@#$%^&*()\-+=\[\]{}\\|:'\",<.>/? ]*", re.IGNORECASE | re.ASCII)
APPEND_PRICE = re.compile(r"\d+\.\d", re.ASCII)
INTEGER = re.compile(r"[+-]?\d+", re.ASCII)

SAME_TIMES_FIELD = "start_time_and_end_time"

BLANK = "can't be blank"
INVALID = "is invalid"


class ValidationErrors:
    """Messages grouped by the field (or pseudo-field) they belong to."""

    def __init__(self):
        self._errors: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def __getitem__(self, field: str) -> list[str]:
        return self._errors.get(field, [])

    def __contains__(self, field: str) -> bool:
        return field in self._errors

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._errors.values())

    def fields(self) -> list[str]:
        return list(self._errors)

    def to_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}

    def full_messages(self) -> list[str]:
        return [
            f"{field.replace('_', ' ').capitalize()} {message}"
            for field, messages in self._errors.items()
            for message in messages
        ]

    def __repr__(self) -> str:
        return f"ValidationErrors({self._errors!r})"


def normalize_price(price: Optional[str]) -> Optional[str]:
    """Pad a single-decimal price ("12.5") to two decimals ("12.50")."""
    if isinstance(price, str) and APPEND_PRICE.fullmatch(price):
        return price + "0"
    return price


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _check_presence(errors: ValidationErrors, field: str, value) -> None:
    if _is_blank(value):
        errors.add(field, BLANK)


def _check_length(errors, field, value, minimum=None, maximum=None) -> None:
    length = len(value) if isinstance(value, str) else len(str(value or ""))
    if minimum is not None and length < minimum:
        errors.add(field, f"is too short (minimum is {minimum} characters)")
    if maximum is not None and length > maximum:
        errors.add(field, f"is too long (maximum is {maximum} characters)")


def _check_format(errors, field, value, pattern: re.Pattern) -> None:
    text = value if isinstance(value, str) else ""
    if not pattern.fullmatch(text):
        errors.add(field, INVALID)


def _as_integer(errors, field, value) -> Optional[int]:
    """Integer numericality. Returns the parsed value or None after recording an error."""
    if value is None or isinstance(value, bool):
        errors.add(field, "is not a number")
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        errors.add(field, "must be an integer")
        return None
    if isinstance(value, str):
        if INTEGER.fullmatch(value.strip()):
            return int(value)
        try:
            float(value)
        except ValueError:
            errors.add(field, "is not a number")
        else:
            errors.add(field, "must be an integer")
        return None
    errors.add(field, "is not a number")
    return None


def _validate_fields(rental, errors: ValidationErrors) -> Optional[int]:
    """Record field errors and return the parsed status, or None if it is unusable."""
    _check_presence(errors, "user_id", rental.user_id)

    _as_integer(errors, "car_id", rental.car_id)

    _check_presence(errors, "status", rental.status)
    status = _as_integer(errors, "status", rental.status)
    if status is not None:
        if status < 0:
            errors.add("status", "must be greater than or equal to 0")
        if status > MAX_STATUS:
            errors.add("status", f"must be less than or equal to {MAX_STATUS}")

    for field in ("start_location", "end_location"):
        value = getattr(rental, field)
        _check_presence(errors, field, value)
        _check_length(errors, field, value, minimum=3, maximum=64)
        _check_format(errors, field, value, VALID_LOCATION)

    _check_presence(errors, "price", rental.price)
    _check_length(errors, "price", rental.price, minimum=1, maximum=8)
    _check_format(errors, "price", rental.price, VALID_PRICE)

    if not _is_blank(rental.terms):
        _check_length(errors, "terms", rental.terms, maximum=256)
        _check_format(errors, "terms", rental.terms, VALID_TERMS)

    _check_presence(errors, "start_time", rental.start_time)
    _check_presence(errors, "end_time", rental.end_time)
    return status


def times_cannot_be_in_the_past(rental, errors: ValidationErrors, now: datetime, status: Optional[int]) -> None:
    # Only one of the two checks reports per pass: a rental past both its
    # start and end time gets the start_time error alone.
    if status is None:
        return
    if rental.start_time < now and status > 1:
        errors.add("start_time", "cannot be in the past")
    elif rental.end_time < now and status > 2:
        errors.add("end_time", "cannot be in the past")


def times_cannot_be_the_same(rental, errors: ValidationErrors) -> None:
    if rental.start_time == rental.end_time:
        errors.add(SAME_TIMES_FIELD, "cannot be the same")


def start_time_cannot_be_after_end_time(rental, errors: ValidationErrors) -> None:
    if rental.end_time < rental.start_time:
        errors.add("start_time", "cannot be after the end time")


def end_time_cannot_be_before_start_time(rental, errors: ValidationErrors) -> None:
    if rental.end_time < rental.start_time:
        errors.add("end_time", "cannot be before the start time")


def validate_rental(rental, now: datetime, skip_in_seed: Optional[bool] = None) -> ValidationErrors:
    """Run every rule against ``rental`` and collect the violations.

    ``rental`` is anything exposing the Rental attributes. ``now`` must be
    comparable with the rental's timestamps (aware UTC after time conversion).
    ``skip_in_seed`` defaults to the rental's own flag; when true the four
    time-window rules are skipped.
    """
    errors = ValidationErrors()
    status = _validate_fields(rental, errors)

    if skip_in_seed is None:
        skip_in_seed = getattr(rental, "skip_in_seed", False)
    if skip_in_seed:
        return errors
    if rental.start_time is None or rental.end_time is None:
        return errors

    times_cannot_be_in_the_past(rental, errors, now, status)
    times_cannot_be_the_same(rental, errors)
    start_time_cannot_be_after_end_time(rental, errors)
    end_time_cannot_be_before_start_time(rental, errors)
    return errors
