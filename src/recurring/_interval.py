from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo

from ._calendar import EPOCH, MAX_YEAR, MIN_YEAR, days_in_month
from ._error import RecurringError
from ._pattern import Combined, Pattern, combine

# =============================================================================
# Interval Alignment (Anchor)
# =============================================================================
# An interval pattern recurs at `anchor + k * step` for every integer k, so
# occurrences extend infinitely in both directions from the anchor.
#
# next_after(x):      k = floor((x - anchor) / step) + 1
# previous_before(x): k = ceil((x - anchor) / step) - 1
#
# Both are closed-form: no scanning, exact no matter how far x is from the
# anchor. The strict floor/ceil boundary handles x == anchor.
#
# Default anchor: Epoch (1970-01-01T00:00:00)
#
# A naive anchor is a wall-clock anchor: queried with an aware instant, it is
# read in that instant's tzinfo. An aware anchor keeps its own tzinfo.
# =============================================================================

_ZERO = timedelta(0)


@dataclass(frozen=True, slots=True)
class Interval(Pattern):
    step: timedelta
    anchor: datetime = EPOCH

    def __post_init__(self) -> None:
        if self.step <= _ZERO:
            raise RecurringError.pattern(f"interval step must be positive, got {self.step}")

    @property
    def tzinfo(self) -> tzinfo | None:
        return self.anchor.tzinfo

    def next_after(self, instant: datetime) -> datetime | None:
        anchor = _localize(self.anchor, instant)
        k = (instant - anchor) // self.step + 1
        return self._nth(anchor, k)

    def previous_before(self, instant: datetime) -> datetime | None:
        anchor = _localize(self.anchor, instant)
        k = -(-(instant - anchor) // self.step) - 1
        return self._nth(anchor, k)

    def matches(self, instant: datetime) -> bool:
        return (instant - _localize(self.anchor, instant)) % self.step == _ZERO

    def _nth(self, anchor: datetime, k: int) -> datetime | None:
        try:
            return anchor + self.step * k
        except OverflowError:
            return None


# =============================================================================
# Calendar Intervals (Months)
# =============================================================================
# A calendar interval recurs every `months` calendar months, on the anchor's
# day of month and time of day. Occurrence k is counted from the anchor, not
# from the previous occurrence, so a day that does not exist in a month is
# clamped to that month's last day for that occurrence only:
#
#   anchor 01-31, monthly: 01-31, 02-28, 03-31, 04-30, ...
#
# Occurrences lie in strictly increasing months, which keeps next_after and
# previous_before closed-form: only occurrence k = m // months (m being the
# month offset of x from the anchor) and its neighbour can be the answer.
# =============================================================================


@dataclass(frozen=True, slots=True)
class CalendarInterval(Pattern):
    months: int
    anchor: datetime = EPOCH

    def __post_init__(self) -> None:
        if isinstance(self.months, bool) or not isinstance(self.months, int) or self.months < 1:
            message = f"calendar interval must be a positive number of months, got {self.months!r}"
            raise RecurringError.pattern(message)

    @property
    def tzinfo(self) -> tzinfo | None:
        return self.anchor.tzinfo

    def next_after(self, instant: datetime) -> datetime | None:
        anchor = _localize(self.anchor, instant)
        k = _month_offset(anchor, instant) // self.months
        candidate = self._nth(anchor, k)
        if candidate is not None and candidate > instant:
            return candidate
        return self._nth(anchor, k + 1)

    def previous_before(self, instant: datetime) -> datetime | None:
        anchor = _localize(self.anchor, instant)
        k = -(-_month_offset(anchor, instant) // self.months)
        candidate = self._nth(anchor, k)
        if candidate is not None and candidate < instant:
            return candidate
        return self._nth(anchor, k - 1)

    def matches(self, instant: datetime) -> bool:
        anchor = _localize(self.anchor, instant)
        k, rest = divmod(_month_offset(anchor, instant), self.months)
        return rest == 0 and self._nth(anchor, k) == instant

    def _nth(self, anchor: datetime, k: int) -> datetime | None:
        year, month = divmod(anchor.year * 12 + anchor.month - 1 + k * self.months, 12)
        if year < MIN_YEAR or year > MAX_YEAR:
            return None
        day = min(anchor.day, days_in_month(year, month + 1))
        return anchor.replace(year=year, month=month + 1, day=day)


def _month_offset(anchor: datetime, instant: datetime) -> int:
    if anchor.tzinfo is not None and instant.tzinfo is not None:
        instant = instant.astimezone(anchor.tzinfo)
    return (instant.year - anchor.year) * 12 + instant.month - anchor.month


def _localize(anchor: datetime, instant: datetime) -> datetime:
    if anchor.tzinfo is None and instant.tzinfo is not None:
        return anchor.replace(tzinfo=instant.tzinfo)
    return anchor


def interval(step: timedelta, anchor: datetime = EPOCH) -> Interval:
    return Interval(step, anchor)


def secondly(n: int = 1, anchor: datetime = EPOCH) -> Interval:
    return Interval(timedelta(seconds=n), anchor)


def minutely(n: int = 1, anchor: datetime = EPOCH) -> Interval:
    return Interval(timedelta(minutes=n), anchor)


def hourly(n: int = 1, anchor: datetime = EPOCH) -> Interval:
    return Interval(timedelta(hours=n), anchor)


def daily(
    n: int = 1,
    at: time | Iterable[time] = (),
    anchor: datetime = EPOCH,
) -> Interval | Combined:
    """Every `n` days, counted from the anchor's date.

    With `at`, the pattern recurs at each of the given times of day instead of at the
    anchor's own time. Each time becomes its own interval, and several are combined.
    """
    step = timedelta(days=n)
    times = (at,) if isinstance(at, time) else tuple(at)
    if not times:
        return Interval(step, anchor)

    members = [
        Interval(
            step,
            anchor.replace(
                hour=t.hour,
                minute=t.minute,
                second=t.second,
                microsecond=t.microsecond,
            ),
        )
        for t in times
    ]
    if len(members) == 1:
        return members[0]
    return combine(*members)


def monthly(n: int = 1, anchor: datetime = EPOCH) -> CalendarInterval:
    """Every `n` calendar months on the anchor's day, clamped to short months."""
    return CalendarInterval(n, anchor)


def yearly(n: int = 1, anchor: datetime = EPOCH) -> CalendarInterval:
    """Every `n` years on the anchor's date. A Feb 29 anchor falls on Feb 28 otherwise."""
    return CalendarInterval(12 * n, anchor)
