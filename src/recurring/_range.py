from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Literal

from ._error import RecurringError

BoundKind = Literal["unbounded", "included", "excluded"]


@dataclass(frozen=True, slots=True)
class Bound:
    kind: BoundKind
    instant: datetime | None = None

    def __post_init__(self) -> None:
        if (self.kind == "unbounded") != (self.instant is None):
            raise RecurringError.range(f"{self.kind} bound cannot have instant {self.instant}")

    @classmethod
    def unbounded(cls) -> Bound:
        return cls("unbounded")

    @classmethod
    def included(cls, instant: datetime) -> Bound:
        return cls("included", instant)

    @classmethod
    def excluded(cls, instant: datetime) -> Bound:
        return cls("excluded", instant)

    @property
    def is_bounded(self) -> bool:
        return self.instant is not None


@dataclass(frozen=True, slots=True)
class SeriesRange:
    """The time window of a series.

    Each end is independently unbounded, inclusive or exclusive. An occurrence `t` is
    in range iff it satisfies both bounds.
    """

    start: Bound = Bound.unbounded()
    end: Bound = Bound.unbounded()

    def __post_init__(self) -> None:
        lo, hi = self.start.instant, self.end.instant
        if lo is not None and hi is not None and lo > hi:
            raise RecurringError.range(f"range start ({lo}) must not be after range end ({hi})")

    @classmethod
    def half_open(cls, start: datetime | None, end: datetime | None) -> SeriesRange:
        """`[start, end)`; a None end means unbounded."""
        return cls(_as_bound(start, Bound.included), _as_bound(end, Bound.excluded))

    @classmethod
    def closed(cls, start: datetime | None, end: datetime | None) -> SeriesRange:
        """`[start, end]`; a None end means unbounded."""
        return cls(_as_bound(start, Bound.included), _as_bound(end, Bound.included))

    @classmethod
    def coerce(cls, value: RangeLike) -> SeriesRange:
        """Accepts a `SeriesRange` or a `(start, end)` pair.

        Plain datetimes in a pair are half-open: inclusive start, exclusive end. Either
        element may also be an explicit `Bound` or None for unbounded.
        """
        if isinstance(value, SeriesRange):
            return value
        start, end = value
        return cls(_as_bound(start, Bound.included), _as_bound(end, Bound.excluded))

    @property
    def tzinfo(self) -> tzinfo | None:
        for instant in (self.start.instant, self.end.instant):
            if instant is not None:
                return instant.tzinfo
        return None

    def contains(self, instant: datetime) -> bool:
        return self.after_start(instant) and self.before_end(instant)

    def after_start(self, instant: datetime) -> bool:
        match self.start:
            case Bound(kind="included", instant=lo):
                return instant >= lo  # type: ignore[operator]
            case Bound(kind="excluded", instant=lo):
                return instant > lo  # type: ignore[operator]
        return True

    def before_end(self, instant: datetime) -> bool:
        match self.end:
            case Bound(kind="included", instant=hi):
                return instant <= hi  # type: ignore[operator]
            case Bound(kind="excluded", instant=hi):
                return instant < hi  # type: ignore[operator]
        return True

    def intersect(self, other: SeriesRange) -> SeriesRange | None:
        """Returns the overlap of both windows, or None if they do not overlap."""
        start = _tighter(self.start, other.start, prefer_later=True)
        end = _tighter(self.end, other.end, prefer_later=False)
        lo, hi = start.instant, end.instant
        if lo is not None and hi is not None:
            if lo > hi:
                return None
            if lo == hi and (start.kind == "excluded" or end.kind == "excluded"):
                return None
        return SeriesRange(start, end)


RangeLike = SeriesRange | tuple[datetime | Bound | None, datetime | Bound | None]


def _as_bound(value: datetime | Bound | None, make: Callable[[datetime], Bound]) -> Bound:
    if value is None:
        return Bound.unbounded()
    if isinstance(value, Bound):
        return value
    return make(value)


def _tighter(a: Bound, b: Bound, prefer_later: bool) -> Bound:
    if a.instant is None:
        return b
    if b.instant is None:
        return a
    if a.instant == b.instant:
        return a if a.kind == "excluded" else b
    if (a.instant > b.instant) == prefer_later:
        return a
    return b
