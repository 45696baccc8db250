from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING

from ._error import RecurringError

if TYPE_CHECKING:
    from ._series import Series


class Pattern:
    """A recurrence rule.

    Patterns are immutable values without any notion of a current position: every
    query is a pure function of the instant passed in, so a single pattern can be
    shared freely between series, iterators and threads.

    The set of variants is closed: `Interval`, `CalendarInterval`, `Cron` and `Combined`.
    """

    __slots__ = ()

    @property
    def tzinfo(self) -> tzinfo | None:
        """The tzinfo the pattern is anchored in, if it is anchored at all."""
        return None

    def next_after(self, instant: datetime) -> datetime | None:
        """Returns the earliest occurrence strictly after `instant`, if any."""
        raise NotImplementedError

    def previous_before(self, instant: datetime) -> datetime | None:
        """Returns the latest occurrence strictly before `instant`, if any."""
        raise NotImplementedError

    def matches(self, instant: datetime) -> bool:
        """Returns True if `instant` is itself an occurrence of this pattern."""
        raise NotImplementedError

    def next_at_or_after(self, instant: datetime) -> datetime | None:
        if self.matches(instant):
            return instant
        return self.next_after(instant)

    def previous_at_or_before(self, instant: datetime) -> datetime | None:
        if self.matches(instant):
            return instant
        return self.previous_before(instant)

    def closest_to(self, instant: datetime) -> datetime | None:
        """Returns the occurrence closest to `instant`.

        If two occurrences are equally far away, the earlier one wins.
        """
        return pick_closest(
            instant,
            self.previous_before(instant),
            self.next_at_or_after(instant),
        )

    def combine(self, *others: Pattern) -> Combined:
        return combine(self, *others)

    def __or__(self, other: Pattern) -> Combined:
        if not isinstance(other, Pattern):
            return NotImplemented
        return combine(self, other)

    def to_series(self, start: datetime) -> Series:
        """Returns a series of this pattern starting at `start` (inclusive) without an end."""
        from ._series import Series

        return Series((start, None), self)


def pick_closest(
    instant: datetime,
    earlier: datetime | None,
    later: datetime | None,
) -> datetime | None:
    if earlier is None:
        return later
    if later is None:
        return earlier
    if later - instant < instant - earlier:
        return later
    return earlier


# =============================================================================
# Union
# =============================================================================
# A Combined pattern is an n-way merge of its members' occurrence sequences,
# evaluated one step at a time: each query asks every member for its own
# answer and keeps the minimum (or maximum). Members that occur at the same
# instant collapse into a single occurrence because only the instant itself
# is returned.
# =============================================================================


@dataclass(frozen=True, slots=True)
class Combined(Pattern):
    patterns: tuple[Pattern, ...]

    def __post_init__(self) -> None:
        flattened = tuple(_flatten(self.patterns))
        if not flattened:
            raise RecurringError.pattern("combined pattern needs at least one member pattern")
        object.__setattr__(self, "patterns", flattened)

    def next_after(self, instant: datetime) -> datetime | None:
        candidates = (p.next_after(instant) for p in self.patterns)
        return min((c for c in candidates if c is not None), default=None)

    def previous_before(self, instant: datetime) -> datetime | None:
        candidates = (p.previous_before(instant) for p in self.patterns)
        return max((c for c in candidates if c is not None), default=None)

    @property
    def tzinfo(self) -> tzinfo | None:
        return next((p.tzinfo for p in self.patterns if p.tzinfo is not None), None)

    def matches(self, instant: datetime) -> bool:
        return any(p.matches(instant) for p in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


def _flatten(patterns: Iterable[Pattern]) -> Iterator[Pattern]:
    for pattern in patterns:
        match pattern:
            case Combined(patterns=members):
                yield from members
            case Pattern():
                yield pattern
            case _:
                raise RecurringError.pattern(f"not a recurrence pattern: {pattern!r}")


def combine(*patterns: Pattern) -> Combined:
    """Unions `patterns` into a single pattern, flattening nested unions."""
    return Combined(tuple(patterns))
