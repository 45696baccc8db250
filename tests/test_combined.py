from __future__ import annotations

import itertools
from collections.abc import Iterable
from datetime import datetime

import pytest

from recurring import Combined, Event, RecurringError, Series, combine, cron, hourly, minutely

MIXED = cron(hours=10, minutes=30, seconds=0) | cron(hours=12, minutes=45, seconds=30) | hourly(6)


def starts(events: Iterable[Event], n: int) -> list[datetime]:
    return [e.start for e in itertools.islice(events, n)]


# =============================================================================
# Flattening
# =============================================================================


class TestFlattening:
    def test_operator_chain_is_flat(self) -> None:
        assert isinstance(MIXED, Combined)
        assert len(MIXED) == 3
        assert not any(isinstance(p, Combined) for p in MIXED.patterns)

    def test_nested_combine_is_flat(self) -> None:
        a, b, c = hourly(1), hourly(2), hourly(3)
        assert combine(a, combine(b, c)).patterns == (a, b, c)
        assert a.combine(b, c) == combine(a, b, c)

    def test_empty_union_rejected(self) -> None:
        with pytest.raises(RecurringError) as exc_info:
            combine()
        assert exc_info.value.kind == "invalid_pattern"

    def test_non_pattern_rejected(self) -> None:
        with pytest.raises(RecurringError):
            combine(hourly(), "every day")  # type: ignore[arg-type]


# =============================================================================
# Merged Occurrences
# =============================================================================


class TestMergedOccurrences:
    def test_forward(self) -> None:
        series = Series((datetime(2025, 1, 1, 12), datetime(2025, 12, 31, 23, 59, 59)), MIXED)

        assert starts(series, 10) == [
            datetime(2025, 1, 1, 12, 0, 0),
            datetime(2025, 1, 1, 12, 45, 30),
            datetime(2025, 1, 1, 18, 0, 0),
            datetime(2025, 1, 2, 0, 0, 0),
            datetime(2025, 1, 2, 6, 0, 0),
            datetime(2025, 1, 2, 10, 30, 0),
            datetime(2025, 1, 2, 12, 0, 0),
            datetime(2025, 1, 2, 12, 45, 30),
            datetime(2025, 1, 2, 18, 0, 0),
            datetime(2025, 1, 3, 0, 0, 0),
        ]

    def test_reverse(self) -> None:
        series = Series((datetime(2025, 1, 1, 12), datetime(2025, 12, 31, 23, 59, 59)), MIXED)

        assert starts(reversed(series), 10) == [
            datetime(2025, 12, 31, 18, 0, 0),
            datetime(2025, 12, 31, 12, 45, 30),
            datetime(2025, 12, 31, 12, 0, 0),
            datetime(2025, 12, 31, 10, 30, 0),
            datetime(2025, 12, 31, 6, 0, 0),
            datetime(2025, 12, 31, 0, 0, 0),
            datetime(2025, 12, 30, 18, 0, 0),
            datetime(2025, 12, 30, 12, 45, 30),
            datetime(2025, 12, 30, 12, 0, 0),
            datetime(2025, 12, 30, 10, 30, 0),
        ]

    def test_shared_instants_appear_once(self) -> None:
        pattern = hourly() | cron(minutes=0, seconds=0) | minutely(30)
        series = Series((datetime(2025, 1, 1), datetime(2025, 1, 1, 2)), pattern)

        assert [e.start for e in series] == [
            datetime(2025, 1, 1, 0, 0),
            datetime(2025, 1, 1, 0, 30),
            datetime(2025, 1, 1, 1, 0),
            datetime(2025, 1, 1, 1, 30),
        ]

    def test_members_that_run_out(self) -> None:
        once = cron(years=2025, months=1, days=1, hours=6, minutes=0, seconds=0)
        pattern = once | cron(hours=12, minutes=0, seconds=0)

        assert pattern.next_after(datetime(2025, 1, 1)) == datetime(2025, 1, 1, 6)
        assert pattern.next_after(datetime(2025, 1, 1, 6)) == datetime(2025, 1, 1, 12)
        assert pattern.next_after(datetime(2026, 1, 1)) == datetime(2026, 1, 1, 12)
        assert combine(once).next_after(datetime(2026, 1, 1)) is None


# =============================================================================
# Point Queries
# =============================================================================


class TestPointQueries:
    def test_matches_any_member(self) -> None:
        assert MIXED.matches(datetime(2025, 3, 1, 10, 30))
        assert MIXED.matches(datetime(2025, 3, 1, 18, 0))
        assert not MIXED.matches(datetime(2025, 3, 1, 10, 31))

    def test_previous_before(self) -> None:
        assert MIXED.previous_before(datetime(2025, 1, 2, 10, 30)) == datetime(2025, 1, 2, 6)

    def test_closest_to(self) -> None:
        assert MIXED.closest_to(datetime(2025, 1, 2, 8, 14, 59)) == datetime(2025, 1, 2, 6)
        assert MIXED.closest_to(datetime(2025, 1, 2, 8, 15, 0, 1)) == datetime(2025, 1, 2, 10, 30)

    def test_closest_to_tie_prefers_earlier(self) -> None:
        assert MIXED.closest_to(datetime(2025, 1, 2, 8, 15)) == datetime(2025, 1, 2, 6)

    def test_closest_to_occurrence_is_itself(self) -> None:
        assert MIXED.closest_to(datetime(2025, 1, 2, 10, 30)) == datetime(2025, 1, 2, 10, 30)
