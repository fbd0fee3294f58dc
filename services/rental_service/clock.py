from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from rental_service.config import RENTAL_TIMEZONE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def make_local_to_utc(tz_name: str = RENTAL_TIMEZONE) -> Callable[[datetime], datetime]:
    """Build a converter that reads naive timestamps as wall time in ``tz_name``.

    Aware timestamps already carry their offset and are only shifted to UTC,
    so converting the same value twice is harmless.
    """
    local_tz = timezone.utc if tz_name.upper() == "UTC" else ZoneInfo(tz_name)

    def local_to_utc(value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=local_tz)
        return value.astimezone(timezone.utc)

    return local_to_utc


local_to_utc = make_local_to_utc()
