from __future__ import annotations

from ._calendar import EPOCH, Weekday
from ._cron import SEARCH_HORIZON_YEARS, Cron, cron
from ._error import RecurringError, RecurringErrorKind
from ._event import Event
from ._interval import (
    CalendarInterval,
    Interval,
    daily,
    hourly,
    interval,
    minutely,
    monthly,
    secondly,
    yearly,
)
from ._pattern import Combined, Pattern, combine
from ._range import Bound, BoundKind, RangeLike, SeriesRange
from ._series import Series, SeriesBuilder, SplitMode

__all__ = [
    "Pattern",
    "Interval",
    "CalendarInterval",
    "Cron",
    "Combined",
    "interval",
    "secondly",
    "minutely",
    "hourly",
    "daily",
    "monthly",
    "yearly",
    "cron",
    "combine",
    "Weekday",
    "Event",
    "Bound",
    "BoundKind",
    "RangeLike",
    "SeriesRange",
    "Series",
    "SeriesBuilder",
    "SplitMode",
    "RecurringError",
    "RecurringErrorKind",
    "SEARCH_HORIZON_YEARS",
    "EPOCH",
]
