from __future__ import annotations

from datetime import datetime

import pytest

from recurring import Bound, RecurringError, SeriesRange

JAN_1 = datetime(2025, 1, 1)
JAN_2 = datetime(2025, 1, 2)
JAN_3 = datetime(2025, 1, 3)


class TestCoerce:
    def test_pair_is_half_open(self) -> None:
        window = SeriesRange.coerce((JAN_1, JAN_2))
        assert window == SeriesRange(Bound.included(JAN_1), Bound.excluded(JAN_2))
        assert window == SeriesRange.half_open(JAN_1, JAN_2)

    def test_none_is_unbounded(self) -> None:
        window = SeriesRange.coerce((None, None))
        assert not window.start.is_bounded
        assert not window.end.is_bounded
        assert window.contains(datetime.min)
        assert window.contains(datetime.max)

    def test_explicit_bounds_pass_through(self) -> None:
        window = SeriesRange.coerce((Bound.excluded(JAN_1), Bound.included(JAN_2)))
        assert window.start == Bound.excluded(JAN_1)
        assert window.end == Bound.included(JAN_2)

    def test_range_passes_through(self) -> None:
        window = SeriesRange.closed(JAN_1, JAN_2)
        assert SeriesRange.coerce(window) is window


class TestValidation:
    def test_inverted_rejected(self) -> None:
        with pytest.raises(RecurringError) as exc_info:
            SeriesRange.half_open(JAN_2, JAN_1)
        assert exc_info.value.kind == "invalid_range"

    def test_empty_range_allowed(self) -> None:
        window = SeriesRange.half_open(JAN_1, JAN_1)
        assert not window.contains(JAN_1)

    def test_bound_kind_must_agree_with_instant(self) -> None:
        with pytest.raises(RecurringError):
            Bound("included")
        with pytest.raises(RecurringError):
            Bound("unbounded", JAN_1)


class TestContains:
    def test_half_open(self) -> None:
        window = SeriesRange.half_open(JAN_1, JAN_2)
        assert window.contains(JAN_1)
        assert not window.contains(JAN_2)

    def test_closed(self) -> None:
        window = SeriesRange.closed(JAN_1, JAN_2)
        assert window.contains(JAN_1)
        assert window.contains(JAN_2)

    def test_excluded_start(self) -> None:
        window = SeriesRange(Bound.excluded(JAN_1), Bound.unbounded())
        assert not window.contains(JAN_1)
        assert window.contains(JAN_2)


class TestIntersect:
    def test_overlap(self) -> None:
        a = SeriesRange.half_open(JAN_1, JAN_3)
        b = SeriesRange.closed(JAN_2, None)
        assert a.intersect(b) == SeriesRange.half_open(JAN_2, JAN_3)

    def test_same_instant_keeps_exclusive_bound(self) -> None:
        a = SeriesRange.closed(JAN_1, JAN_2)
        b = SeriesRange.half_open(JAN_1, JAN_2)
        assert a.intersect(b) == b
        assert b.intersect(a) == b

    def test_disjoint(self) -> None:
        a = SeriesRange.half_open(JAN_1, JAN_2)
        b = SeriesRange.half_open(JAN_2, JAN_3)
        assert a.intersect(b) is None

    def test_touching_closed_ranges_share_one_instant(self) -> None:
        a = SeriesRange.closed(JAN_1, JAN_2)
        b = SeriesRange.closed(JAN_2, JAN_3)
        assert a.intersect(b) == SeriesRange.closed(JAN_2, JAN_2)

    def test_unbounded_sides(self) -> None:
        a = SeriesRange.half_open(None, JAN_2)
        b = SeriesRange.half_open(JAN_1, None)
        assert a.intersect(b) == SeriesRange.half_open(JAN_1, JAN_2)
