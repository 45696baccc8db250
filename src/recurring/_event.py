from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import total_ordering

from ._error import RecurringError


@total_ordering
@dataclass(frozen=True, slots=True)
class Event:
    """A single occurrence of a series, optionally spanning until `end` (exclusive).

    Events order by `start`. For equal starts, an event without an end sorts first.
    """

    start: datetime
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.end is not None and self.end <= self.start:
            raise RecurringError.event(
                f"event end ({self.end}) must be after its start ({self.start})"
            )

    @classmethod
    def at(cls, instant: datetime) -> Event:
        return cls(instant)

    @classmethod
    def new(cls, start: datetime, end: datetime) -> Event:
        return cls(start, end)

    @property
    def duration(self) -> timedelta | None:
        if self.end is None:
            return None
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        if self.end is None:
            return instant == self.start
        return self.start <= instant < self.end

    def _sort_key(self) -> tuple[datetime, bool, datetime]:
        return (self.start, self.end is not None, self.end or self.start)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self._sort_key() < other._sort_key()
