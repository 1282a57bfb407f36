"""Tests for date parts validation."""

from datetime import date

import pytest

from hotelbook.domain.dates import calendar_date, resolve_date_window, stay_length
from hotelbook.domain.errors import IncompleteDateError, InvalidRangeError


class TestCalendarDate:
    def test_plain_date(self):
        assert calendar_date(2026, 5, 17) == date(2026, 5, 17)

    def test_day_overflow_rolls_into_next_month(self):
        assert calendar_date(2026, 2, 31) == date(2026, 3, 3)

    def test_leap_year_overflow(self):
        assert calendar_date(2028, 2, 31) == date(2028, 3, 2)

    def test_month_overflow_rolls_into_next_year(self):
        assert calendar_date(2026, 13, 1) == date(2027, 1, 1)

    def test_day_zero_is_last_day_of_previous_month(self):
        assert calendar_date(2026, 3, 0) == date(2026, 2, 28)


class TestResolveDateWindow:
    def test_no_bounds_is_no_filter(self):
        assert resolve_date_window((None, None, None), (None, None, None)) == (None, None)

    def test_both_bounds(self):
        start, end = resolve_date_window((1, 6, 2026), (10, 6, 2026))
        assert start == date(2026, 6, 1)
        assert end == date(2026, 6, 10)

    def test_only_start(self):
        assert resolve_date_window((1, 6, 2026), (None, None, None)) == (
            date(2026, 6, 1),
            None,
        )

    def test_only_end(self):
        assert resolve_date_window((None, None, None), (5, 7, 2026)) == (
            None,
            date(2026, 7, 5),
        )

    @pytest.mark.parametrize(
        "start",
        [(1, None, None), (None, 6, None), (None, None, 2026), (1, 6, None)],
    )
    def test_partial_start_is_incomplete(self, start):
        with pytest.raises(IncompleteDateError):
            resolve_date_window(start, (10, 6, 2026))

    def test_partial_end_is_incomplete(self):
        with pytest.raises(IncompleteDateError):
            resolve_date_window((1, 6, 2026), (10, None, 2026))

    def test_start_after_end(self):
        with pytest.raises(InvalidRangeError):
            resolve_date_window((11, 6, 2026), (10, 6, 2026))

    @pytest.mark.parametrize(
        "start",
        [(1, 6, 0), (10**9, 6, 2026), (1, 1, 10000)],
    )
    def test_unrepresentable_bound_is_invalid_range(self, start):
        with pytest.raises(InvalidRangeError):
            resolve_date_window(start, (None, None, None))

    def test_same_day_is_valid(self):
        start, end = resolve_date_window((10, 6, 2026), (10, 6, 2026))
        assert start == end


def test_stay_length():
    assert stay_length(date(2026, 6, 1), date(2026, 6, 4)) == 3
    assert stay_length(date(2026, 6, 1), date(2026, 6, 1)) == 0
