from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from enum import Enum

from ._calendar import checked_add, domain_max, domain_min
from ._error import RecurringError
from ._event import Event
from ._pattern import Pattern, pick_closest
from ._range import Bound, RangeLike, SeriesRange

logger = logging.getLogger(__name__)

_ZERO = timedelta(0)


class SplitMode(Enum):
    """Where `Series.split_off` cuts relative to the instant it is given."""

    AT = "at"
    NEXT_AFTER = "next_after"
    PREVIOUS_BEFORE = "previous_before"
    CLOSEST_TO = "closest_to"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Series:
    """A recurrence pattern bounded to a time window.

    Occurrences of `pattern` inside `window` become events: point events, or spans of
    `event_duration` if one is set. A series is immutable; splitting or rebuilding it
    produces new series that share the same pattern.

    `window` accepts a `SeriesRange` or a `(start, end)` pair, which is read as
    half-open `[start, end)`. None on either side leaves that side unbounded.
    """

    window: SeriesRange
    pattern: Pattern
    event_duration: timedelta | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "window", SeriesRange.coerce(self.window))
        if not isinstance(self.pattern, Pattern):
            raise RecurringError.pattern(f"not a recurrence pattern: {self.pattern!r}")
        if self.event_duration is not None and self.event_duration <= _ZERO:
            raise RecurringError.event_duration(self.event_duration)

    @staticmethod
    def builder() -> SeriesBuilder:
        return SeriesBuilder()

    def rebuild(self) -> SeriesBuilder:
        """Returns a builder prefilled with this series' window, pattern and duration."""
        return SeriesBuilder(
            start=self.window.start,
            end=self.window.end,
            pattern=self.pattern,
            event_duration=self.event_duration,
        )

    # --- Iteration ---

    def iter(self) -> Iterator[Event]:
        """Returns a lazy iterator over all events in ascending order.

        Every call returns an independent iterator. Without an end bound the iterator
        only stops once the pattern has no further occurrences.
        """
        return self._ascending(self.window)

    def __iter__(self) -> Iterator[Event]:
        return self.iter()

    def __reversed__(self) -> Iterator[Event]:
        return self._descending(self.window)

    def range(self, sub: RangeLike) -> Iterator[Event]:
        """Returns a lazy iterator over the events inside both the window and `sub`.

        `sub` may reach outside the series window; the overlap may be empty.
        """
        window = self.window.intersect(SeriesRange.coerce(sub))
        if window is None:
            return iter(())
        return self._ascending(window)

    # --- Queries ---

    def first(self) -> Event | None:
        return self._frame(self._first(self.window))

    def last(self) -> Event | None:
        return self._frame(self._last(self.window))

    def get(self, instant: datetime) -> Event | None:
        """Returns the event starting exactly at `instant`, if any."""
        return self._frame(self._at(instant))

    def contains(self, instant: datetime) -> bool:
        return self._at(instant) is not None

    def get_next_after(self, instant: datetime) -> Event | None:
        return self._frame(self._next_after(instant))

    def get_previous_before(self, instant: datetime) -> Event | None:
        return self._frame(self._previous_before(instant))

    def get_closest_to(self, instant: datetime) -> Event | None:
        """Returns the event starting closest to `instant`.

        If two events are equally far away, the earlier one wins.
        """
        at_or_after = self._at(instant) or self._next_after(instant)
        return self._frame(pick_closest(instant, self._previous_before(instant), at_or_after))

    def get_containing(self, instant: datetime) -> Event | None:
        """Returns the event whose `[start, end)` span contains `instant`.

        Events without a duration only contain their own start.
        """
        event = self._frame(self._at(instant) or self._previous_before(instant))
        if event is not None and event.contains(instant):
            return event
        return None

    # --- Splitting ---

    def split_off(
        self,
        cutoff: datetime,
        mode: SplitMode = SplitMode.AT,
    ) -> tuple[Series, Series]:
        """Partitions the series at `cutoff` into `(left, right)`.

        `left` keeps the original start and ends before the cutoff (exclusive); `right`
        starts at the cutoff (inclusive) and keeps the original end. An event exactly at
        the cutoff therefore belongs to `right`. Both halves share this series' pattern
        and event duration.

        With a mode other than `SplitMode.AT`, the cut is made at the occurrence after,
        before or closest to `cutoff` instead of at `cutoff` itself.
        """
        point = self._split_point(cutoff, mode)
        logger.debug("splitting series at %s (mode=%s, requested=%s)", point, mode, cutoff)
        left = dataclasses.replace(
            self, window=SeriesRange(self.window.start, Bound.excluded(point))
        )
        right = dataclasses.replace(
            self, window=SeriesRange(Bound.included(point), self.window.end)
        )
        return left, right

    def _split_point(self, cutoff: datetime, mode: SplitMode) -> datetime:
        match mode:
            case SplitMode.AT:
                if not self.window.contains(cutoff):
                    raise RecurringError.range(f"{cutoff} is not within the series range")
                return cutoff
            case SplitMode.NEXT_AFTER:
                point = self._next_after(cutoff)
            case SplitMode.PREVIOUS_BEFORE:
                point = self._previous_before(cutoff)
            case SplitMode.CLOSEST_TO:
                point = pick_closest(
                    cutoff,
                    self._previous_before(cutoff),
                    self._at(cutoff) or self._next_after(cutoff),
                )
            case _:  # pragma: no cover
                raise RecurringError.range(f"unknown split mode: {mode!r}")
        if point is None:
            raise RecurringError.range(f"no series event {str(mode).replace('_', ' ')} {cutoff}")
        return point

    # --- Occurrence lookup within the window ---

    def _first(self, window: SeriesRange) -> datetime | None:
        match window.start:
            case Bound(kind="included", instant=lo):
                first = self.pattern.next_at_or_after(lo)  # type: ignore[arg-type]
            case Bound(kind="excluded", instant=lo):
                first = self.pattern.next_after(lo)  # type: ignore[arg-type]
            case _:
                first = self.pattern.next_at_or_after(domain_min(self._tzinfo(window)))
        if first is None or not window.before_end(first):
            return None
        return first

    def _last(self, window: SeriesRange) -> datetime | None:
        match window.end:
            case Bound(kind="included", instant=hi):
                last = self.pattern.previous_at_or_before(hi)  # type: ignore[arg-type]
            case Bound(kind="excluded", instant=hi):
                last = self.pattern.previous_before(hi)  # type: ignore[arg-type]
            case _:
                last = self.pattern.previous_at_or_before(domain_max(self._tzinfo(window)))
        if last is None or not window.after_start(last):
            return None
        return last

    def _tzinfo(self, window: SeriesRange) -> tzinfo | None:
        if window.start.is_bounded or window.end.is_bounded:
            return window.tzinfo
        return self.pattern.tzinfo

    def _at(self, instant: datetime) -> datetime | None:
        if self.window.contains(instant) and self.pattern.matches(instant):
            return instant
        return None

    def _next_after(self, instant: datetime) -> datetime | None:
        if not self.window.after_start(instant):
            logger.debug("%s is before the series range, using its first event", instant)
            return self._first(self.window)
        found = self.pattern.next_after(instant)
        if found is None or not self.window.before_end(found):
            return None
        return found

    def _previous_before(self, instant: datetime) -> datetime | None:
        if not self.window.before_end(instant):
            logger.debug("%s is past the series range, using its last event", instant)
            return self._last(self.window)
        found = self.pattern.previous_before(instant)
        if found is None or not self.window.after_start(found):
            return None
        return found

    def _frame(self, start: datetime | None) -> Event | None:
        if start is None:
            return None
        if self.event_duration is None:
            return Event.at(start)
        end = checked_add(start, self.event_duration)
        if end is None:
            return None
        return Event.new(start, end)

    def _ascending(self, window: SeriesRange) -> Iterator[Event]:
        current = self._first(window)
        while current is not None:
            event = self._frame(current)
            if event is None:
                return
            yield event
            current = self.pattern.next_after(current)
            if current is not None and not window.before_end(current):
                return

    def _descending(self, window: SeriesRange) -> Iterator[Event]:
        current = self._last(window)
        while current is not None:
            event = self._frame(current)
            if event is not None:
                yield event
            current = self.pattern.previous_before(current)
            if current is not None and not window.after_start(current):
                return


@dataclass(frozen=True, slots=True)
class SeriesBuilder:
    """Accumulates the configuration of a `Series`.

    Every `with_*` call returns a new builder; `build()` validates the whole
    configuration at once and either returns a series or raises.
    """

    start: Bound = Bound.unbounded()
    end: Bound = Bound.unbounded()
    pattern: Pattern | None = None
    event_duration: timedelta | None = None

    def with_range(self, window: RangeLike) -> SeriesBuilder:
        window = SeriesRange.coerce(window)
        return dataclasses.replace(self, start=window.start, end=window.end)

    def with_start(self, start: datetime | Bound) -> SeriesBuilder:
        bound = start if isinstance(start, Bound) else Bound.included(start)
        return dataclasses.replace(self, start=bound)

    def with_end(self, end: datetime | Bound) -> SeriesBuilder:
        bound = end if isinstance(end, Bound) else Bound.excluded(end)
        return dataclasses.replace(self, end=bound)

    def with_pattern(self, pattern: Pattern) -> SeriesBuilder:
        return dataclasses.replace(self, pattern=pattern)

    def with_event_duration(self, event_duration: timedelta | None) -> SeriesBuilder:
        return dataclasses.replace(self, event_duration=event_duration)

    def build(self) -> Series:
        if self.event_duration is not None and self.event_duration <= _ZERO:
            raise RecurringError.event_duration(self.event_duration)
        if self.pattern is None:
            raise RecurringError.pattern("series needs a recurrence pattern")
        return Series(SeriesRange(self.start, self.end), self.pattern, self.event_duration)
