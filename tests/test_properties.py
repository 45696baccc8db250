from __future__ import annotations

import itertools
from datetime import datetime, timedelta

import pytest

from recurring import Pattern, Series, Weekday, cron, daily, hourly, interval, monthly, yearly

PATTERNS: dict[str, Pattern] = {
    "interval": interval(timedelta(days=2), datetime(2025, 7, 1, 12)),
    "odd_interval": interval(timedelta(minutes=7, microseconds=3)),
    "cron": cron(hours=(12, 16), minutes=5, seconds=(10, 20)),
    "cron_weekdays": cron(days=13, weekdays=Weekday.FRIDAY, hours=0, minutes=0, seconds=0),
    "cron_leap": cron(months=2, days=29, hours=6, minutes=0, seconds=0),
    "combined": cron(hours=10, minutes=30, seconds=0) | hourly(6) | daily(at=[]),
    "monthly": monthly(anchor=datetime(2024, 1, 31, 6)),
    "yearly": yearly(anchor=datetime(2024, 2, 29, 6)),
}

INSTANTS = [
    datetime(2025, 7, 1, 12),
    datetime(2025, 7, 1, 12, 5, 10),
    datetime(2025, 7, 1, 12, 5, 10, 1),
    datetime(2024, 2, 29, 6),
    datetime(2025, 12, 31, 23, 59, 59, 999999),
    datetime(1999, 1, 1),
    datetime(2100, 3, 1, 0, 0, 1),
]


@pytest.fixture(params=sorted(PATTERNS))
def pattern(request: pytest.FixtureRequest) -> Pattern:
    return PATTERNS[request.param]


@pytest.mark.parametrize("x", INSTANTS)
def test_monotonicity(pattern: Pattern, x: datetime) -> None:
    after = pattern.next_after(x)
    before = pattern.previous_before(x)

    assert after is not None and after > x
    assert before is not None and before < x


@pytest.mark.parametrize("x", INSTANTS)
def test_inverse_consistency(pattern: Pattern, x: datetime) -> None:
    after = pattern.next_after(x)
    assert after is not None

    before = pattern.previous_before(after)
    assert before is not None
    assert before <= x < after


@pytest.mark.parametrize("x", INSTANTS)
def test_occurrences_step_back_to_themselves(pattern: Pattern, x: datetime) -> None:
    occurrence = pattern.next_after(x)
    assert occurrence is not None
    assert pattern.matches(occurrence)

    before = pattern.previous_before(occurrence)
    assert before is not None
    assert pattern.next_after(before) == occurrence


@pytest.mark.parametrize("x", INSTANTS)
def test_no_occurrence_skipped(pattern: Pattern, x: datetime) -> None:
    assert pattern.next_at_or_after(x + timedelta(microseconds=1)) == pattern.next_after(x)


def test_forward_and_reverse_agree(pattern: Pattern) -> None:
    window = (datetime(2025, 7, 1), datetime(2025, 7, 2))
    series = Series(window, pattern)

    forward = list(itertools.islice(series, 1000))
    backward = list(itertools.islice(reversed(series), 1000))

    assert forward == backward[::-1]
    assert forward == sorted(set(forward))
