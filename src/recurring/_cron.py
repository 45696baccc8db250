from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime
from itertools import islice

from ._calendar import (
    MAX_YEAR,
    MIN_YEAR,
    ONE_SECOND,
    Weekday,
    checked_add,
    checked_sub,
    days_in_month,
)
from ._error import RecurringError
from ._pattern import Pattern

logger = logging.getLogger(__name__)

# =============================================================================
# Search Horizon
# =============================================================================
# SEARCH_HORIZON_YEARS (400): Maximum number of candidate years a single
# next_after/previous_before call inspects before giving up.
#
# 400 years is one full Gregorian cycle: every combination of month, day of
# month and weekday that can ever occur occurs within it. Constraint sets
# that can never be satisfied (e.g. day 31 in February) therefore stop after
# one cycle instead of scanning the whole calendar.
#
# Running out of horizon returns None, exactly like a pattern that has no
# further occurrences. The two cases are not distinguished.
# =============================================================================

SEARCH_HORIZON_YEARS = 400

# =============================================================================
# Day Matching
# =============================================================================
# Day of month and weekday follow conventional cron semantics:
#
# - both restricted: a date qualifies if it matches the day of month OR the
#   weekday
# - one restricted:  that one must match
# - none restricted: every date qualifies
#
# Days of month that do not exist in a given month (e.g. 31 in April) are
# skipped, never clamped.
# =============================================================================

_FIELD_BOUNDS: dict[str, tuple[str, int, int]] = {
    "seconds": ("second", 0, 59),
    "minutes": ("minute", 0, 59),
    "hours": ("hour", 0, 23),
    "days": ("day", 1, 31),
    "months": ("month", 1, 12),
    "years": ("year", MIN_YEAR, MAX_YEAR),
}


@dataclass(frozen=True, slots=True)
class Cron(Pattern):
    """A recurrence pattern constrained field by field, like a cron table entry.

    Every field is either unconstrained (empty, any value allowed) or a sorted tuple
    of allowed values. An unconstrained `Cron()` recurs every second.

    Fields accept a single value or any iterable of values; they are validated and
    normalized at construction.
    """

    seconds: tuple[int, ...] = ()
    minutes: tuple[int, ...] = ()
    hours: tuple[int, ...] = ()
    days: tuple[int, ...] = ()
    months: tuple[int, ...] = ()
    weekdays: tuple[Weekday, ...] = ()
    years: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        for attr, (name, min_val, max_val) in _FIELD_BOUNDS.items():
            values = _normalize(name, getattr(self, attr), min_val, max_val)
            object.__setattr__(self, attr, values)
        object.__setattr__(self, "weekdays", _normalize_weekdays(self.weekdays))

    # --- Builder ---

    def with_seconds(self, *values: int) -> Cron:
        return self._extend("seconds", values)

    def with_minutes(self, *values: int) -> Cron:
        return self._extend("minutes", values)

    def with_hours(self, *values: int) -> Cron:
        return self._extend("hours", values)

    def with_days(self, *values: int) -> Cron:
        return self._extend("days", values)

    def with_months(self, *values: int) -> Cron:
        return self._extend("months", values)

    def with_weekdays(self, *values: Weekday | int) -> Cron:
        return dataclasses.replace(self, weekdays=self.weekdays + tuple(values))

    def with_years(self, *values: int) -> Cron:
        return self._extend("years", values)

    def with_seconds_every(self, step: int, start: int = 0) -> Cron:
        return self._extend_every("seconds", step, start)

    def with_minutes_every(self, step: int, start: int = 0) -> Cron:
        return self._extend_every("minutes", step, start)

    def with_hours_every(self, step: int, start: int = 0) -> Cron:
        return self._extend_every("hours", step, start)

    def with_days_every(self, step: int, start: int = 1) -> Cron:
        return self._extend_every("days", step, start)

    def with_months_every(self, step: int, start: int = 1) -> Cron:
        return self._extend_every("months", step, start)

    def with_weekdays_every(self, step: int, start: Weekday = Weekday.MONDAY) -> Cron:
        if step < 1:
            message = f"weekday step must be positive, got {step}"
            raise RecurringError.invalid_field("weekday", message, step)
        return self.with_weekdays(*range(start.number, 8, step))

    def with_years_every(self, step: int, start: int) -> Cron:
        return self._extend_every("years", step, start)

    def _extend(self, attr: str, values: Iterable[int]) -> Cron:
        current: tuple[int, ...] = getattr(self, attr)
        return dataclasses.replace(self, **{attr: current + tuple(values)})

    def _extend_every(self, attr: str, step: int, start: int) -> Cron:
        name, min_val, max_val = _FIELD_BOUNDS[attr]
        if step < 1:
            message = f"{name} step must be positive, got {step}"
            raise RecurringError.invalid_field(name, message, step)
        if start < min_val or start > max_val:
            raise RecurringError.out_of_range(name, start, min_val, max_val)
        return self._extend(attr, range(start, max_val + 1, step))

    # --- Pattern ---

    def next_after(self, instant: datetime) -> datetime | None:
        start = checked_add(instant.replace(microsecond=0), ONE_SECOND)
        if start is None:
            return None
        return self._search_forward(start)

    def previous_before(self, instant: datetime) -> datetime | None:
        if instant.microsecond:
            start: datetime | None = instant.replace(microsecond=0)
        else:
            start = checked_sub(instant, ONE_SECOND)
        if start is None:
            return None
        return self._search_backward(start)

    def matches(self, instant: datetime) -> bool:
        return (
            instant.microsecond == 0
            and _allows(self.years, instant.year)
            and _allows(self.months, instant.month)
            and self._matches_day(instant.year, instant.month, instant.day)
            and _allows(self.hours, instant.hour)
            and _allows(self.minutes, instant.minute)
            and _allows(self.seconds, instant.second)
        )

    # --- Search ---

    def _search_forward(self, start: datetime) -> datetime | None:
        """Returns the earliest occurrence at or after `start` (a whole second)."""
        years = islice(_ascending(self.years, start.year, MAX_YEAR), SEARCH_HORIZON_YEARS)
        for year in years:
            in_start_year = year == start.year
            for month in _ascending(self.months, start.month if in_start_year else 1, 12):
                in_start_month = in_start_year and month == start.month
                first_day = start.day if in_start_month else 1
                for day in self._days_ascending(year, month, first_day):
                    on_start_day = in_start_month and day == start.day
                    found = self._first_time(start if on_start_day else None)
                    if found is not None:
                        return _at(start, year, month, day, found)

        logger.debug("cron search found no occurrence at or after %s", start)
        return None

    def _search_backward(self, start: datetime) -> datetime | None:
        """Returns the latest occurrence at or before `start` (a whole second)."""
        years = islice(_descending(self.years, MIN_YEAR, start.year), SEARCH_HORIZON_YEARS)
        for year in years:
            in_start_year = year == start.year
            for month in _descending(self.months, 1, start.month if in_start_year else 12):
                in_start_month = in_start_year and month == start.month
                last_day = start.day if in_start_month else days_in_month(year, month)
                for day in self._days_descending(year, month, last_day):
                    on_start_day = in_start_month and day == start.day
                    found = self._last_time(start if on_start_day else None)
                    if found is not None:
                        return _at(start, year, month, day, found)

        logger.debug("cron search found no occurrence at or before %s", start)
        return None

    def _first_time(self, floor: datetime | None) -> tuple[int, int, int] | None:
        """Smallest allowed (hour, minute, second) at or after the time of `floor`."""
        fh, fm, fs = (floor.hour, floor.minute, floor.second) if floor else (0, 0, 0)
        for hour in _ascending(self.hours, fh, 23):
            minute_floor = fm if hour == fh else 0
            for minute in _ascending(self.minutes, minute_floor, 59):
                second_floor = fs if hour == fh and minute == fm else 0
                second = next(_ascending(self.seconds, second_floor, 59), None)
                if second is not None:
                    return hour, minute, second
        return None

    def _last_time(self, ceiling: datetime | None) -> tuple[int, int, int] | None:
        """Largest allowed (hour, minute, second) at or before the time of `ceiling`."""
        ch, cm, cs = (ceiling.hour, ceiling.minute, ceiling.second) if ceiling else (23, 59, 59)
        for hour in _descending(self.hours, 0, ch):
            minute_ceiling = cm if hour == ch else 59
            for minute in _descending(self.minutes, 0, minute_ceiling):
                second_ceiling = cs if hour == ch and minute == cm else 59
                second = next(_descending(self.seconds, 0, second_ceiling), None)
                if second is not None:
                    return hour, minute, second
        return None

    def _days_ascending(self, year: int, month: int, first: int) -> Iterator[int]:
        last = days_in_month(year, month)
        if not self.weekdays:
            return _ascending(self.days, first, last)
        return (d for d in range(first, last + 1) if self._matches_day(year, month, d))

    def _days_descending(self, year: int, month: int, last: int) -> Iterator[int]:
        if not self.weekdays:
            return _descending(self.days, 1, last)
        return (d for d in range(last, 0, -1) if self._matches_day(year, month, d))

    def _matches_day(self, year: int, month: int, day: int) -> bool:
        if not self.weekdays:
            return _allows(self.days, day)
        on_weekday = Weekday.of(date(year, month, day)) in self.weekdays
        if self.days:
            return on_weekday or day in self.days
        return on_weekday


def cron(
    seconds: int | Iterable[int] = (),
    minutes: int | Iterable[int] = (),
    hours: int | Iterable[int] = (),
    days: int | Iterable[int] = (),
    months: int | Iterable[int] = (),
    weekdays: Weekday | Iterable[Weekday] = (),
    years: int | Iterable[int] = (),
) -> Cron:
    """Creates a cron pattern. Unless restricted, every field allows any value."""
    return Cron(
        seconds=seconds,  # type: ignore[arg-type]
        minutes=minutes,  # type: ignore[arg-type]
        hours=hours,  # type: ignore[arg-type]
        days=days,  # type: ignore[arg-type]
        months=months,  # type: ignore[arg-type]
        weekdays=weekdays,  # type: ignore[arg-type]
        years=years,  # type: ignore[arg-type]
    )


# --- Helpers ---


def _normalize(name: str, values: object, min_val: int, max_val: int) -> tuple[int, ...]:
    raw = (values,) if isinstance(values, int) else tuple(values)  # type: ignore[arg-type]
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int):
            message = f"{name} must be an integer, got {value!r}"
            raise RecurringError.invalid_field(name, message, value)
        if value < min_val or value > max_val:
            raise RecurringError.out_of_range(name, value, min_val, max_val)
    return tuple(sorted(set(raw)))


def _normalize_weekdays(values: object) -> tuple[Weekday, ...]:
    single = isinstance(values, (Weekday, int))
    raw = (values,) if single else tuple(values)  # type: ignore[arg-type]
    weekdays: set[Weekday] = set()
    for value in raw:
        if isinstance(value, Weekday):
            weekdays.add(value)
            continue
        is_number = isinstance(value, int) and not isinstance(value, bool)
        weekday = Weekday.from_number(value) if is_number else None
        if weekday is None:
            raise RecurringError.invalid_field(
                "weekday", f"weekday must be a Weekday, got {value!r}", value
            )
        weekdays.add(weekday)
    return tuple(sorted(weekdays, key=lambda d: d.number))


def _allows(values: tuple[int, ...], value: int) -> bool:
    return not values or value in values


def _ascending(values: tuple[int, ...], lo: int, hi: int) -> Iterator[int]:
    if not values:
        return iter(range(lo, hi + 1))
    return (v for v in values if lo <= v <= hi)


def _descending(values: tuple[int, ...], lo: int, hi: int) -> Iterator[int]:
    if not values:
        return iter(range(hi, lo - 1, -1))
    return (v for v in reversed(values) if lo <= v <= hi)


def _at(
    reference: datetime,
    year: int,
    month: int,
    day: int,
    time_of_day: tuple[int, int, int],
) -> datetime:
    hour, minute, second = time_of_day
    return reference.replace(
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        microsecond=0,
    )
