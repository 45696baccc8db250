from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta, tzinfo
from enum import Enum

# =============================================================================
# Instant Helpers
# =============================================================================
# Instants are plain `datetime` values. Arithmetic that would leave the
# representable range [datetime.min, datetime.max] is reported as None so
# that callers can treat it the same way as "no further occurrence".
#
# Aware datetimes sharing a tzinfo use wall-clock arithmetic, exactly like
# the standard library does.
# =============================================================================

EPOCH = datetime(1970, 1, 1)

MIN_YEAR = MINYEAR
MAX_YEAR = MAXYEAR

ONE_SECOND = timedelta(seconds=1)


class Weekday(Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def number(self) -> int:
        """ISO 8601 day number: Monday=1, Sunday=7."""
        return _WEEKDAY_NUMBERS[self]

    @classmethod
    def from_number(cls, n: int) -> Weekday | None:
        return _NUMBER_TO_WEEKDAY.get(n)

    @classmethod
    def of(cls, d: date) -> Weekday:
        return _NUMBER_TO_WEEKDAY[d.isoweekday()]


_WEEKDAY_NUMBERS = {
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
    Weekday.SUNDAY: 7,
}

_NUMBER_TO_WEEKDAY = {v: k for k, v in _WEEKDAY_NUMBERS.items()}


def days_in_month(year: int, month: int) -> int:
    _, last = calendar.monthrange(year, month)
    return last


def checked_add(instant: datetime, delta: timedelta) -> datetime | None:
    try:
        return instant + delta
    except OverflowError:
        return None


def checked_sub(instant: datetime, delta: timedelta) -> datetime | None:
    try:
        return instant - delta
    except OverflowError:
        return None


def domain_min(tz: tzinfo | None = None) -> datetime:
    return datetime.min.replace(tzinfo=tz)


def domain_max(tz: tzinfo | None = None) -> datetime:
    return datetime.max.replace(tzinfo=tz)
