"""Tests for date-range and accuracy filtering."""

import pytest

from location_extract.filters import (
    LocationFilter,
    accept,
    accept_accuracy,
    accept_timestamp,
    next_day,
)


class TestNextDay:
    @pytest.mark.parametrize("day, expected", [
        ("2015-01-01", "2015-01-02"),
        ("2015-01-31", "2015-02-01"),
        ("2015-12-31", "2016-01-01"),
        ("2016-02-28", "2016-02-29"),
    ])
    def test_rollover(self, day, expected):
        assert next_day(day) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            next_day("2015-13-01")


class TestAcceptAccuracy:
    @pytest.mark.parametrize("accuracy, max_accuracy, expected", [
        ("5", "5", True),
        ("5", "6", True),
        ("5", "4", False),
        ("15", "5", False),
        ("15", "10", False),
        ("15", "15", True),
        ("15", "20", True),
        ("15", "", False),
    ])
    def test_table(self, accuracy, max_accuracy, expected):
        assert accept_accuracy(accuracy, max_accuracy) is expected

    def test_numeric_not_lexical_across_lengths(self):
        # "9" > "10" lexically, but 9 < 10
        assert accept_accuracy("9", "10") is True
        assert accept_accuracy("100", "99") is False


class TestAcceptTimestamp:
    def test_window_is_half_open(self):
        assert accept_timestamp("2012-01-27T00:00:00Z", "2012-01-27", "2012-01-28")
        assert accept_timestamp("2012-01-27T23:59:59.999Z", "2012-01-27", "2012-01-28")
        assert not accept_timestamp("2012-01-28T00:00:00Z", "2012-01-27", "2012-01-28")
        assert not accept_timestamp("2012-01-26T23:59:59Z", "2012-01-27", "2012-01-28")


class TestAccept:
    def test_both_conditions(self, make_location):
        loc = make_location(accuracy="24", timestamp="2012-01-27T21:14:42.352Z")
        assert accept(loc, "2012-01-27", "2012-01-28", "40")
        assert not accept(loc, "2012-01-27", "2012-01-28", "20")
        assert not accept(loc, "2012-01-28", "2012-01-29", "40")


class TestLocationFilter:
    def test_end_date_inclusive(self, make_location):
        f = LocationFilter("2012-01-01", "2012-01-27", "40")
        assert f.end_next_day == "2012-01-28"
        assert f(make_location(timestamp="2012-01-27T21:14:42.352Z"))
        assert not f(make_location(timestamp="2012-01-28T00:00:01Z"))

    def test_invalid_end_date(self):
        with pytest.raises(ValueError):
            LocationFilter("2012-01-01", "not-a-date", "40")
