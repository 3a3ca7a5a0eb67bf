"""
Date-range and accuracy filtering.

Both tests work on strings. Timestamps are all normalized to the same
ISO8601 UTC shape, which sorts lexically in chronological order, and
accuracies are integer digit strings without leading zeros, which sort
by (length, text) in numeric order.
"""

from datetime import date, timedelta

from .decoders.base import Location

DATE_FORMAT = "%Y-%m-%d"


def next_day(day: str) -> str:
    """Return the day after a YYYY-MM-DD date, e.g. "2015-12-31" -> "2016-01-01"."""
    return (date.fromisoformat(day) + timedelta(days=1)).strftime(DATE_FORMAT)


def accept_accuracy(accuracy: str, max_accuracy: str) -> bool:
    """True when accuracy <= max_accuracy, compared without parsing numbers."""
    if len(accuracy) != len(max_accuracy):
        return len(accuracy) <= len(max_accuracy)
    return accuracy <= max_accuracy


def accept_timestamp(timestamp: str, start_date: str, end_next_day: str) -> bool:
    return start_date <= timestamp < end_next_day


def accept(loc: Location, start_date: str, end_next_day: str, max_accuracy: str) -> bool:
    """Keep a location inside [start_date, end_next_day) with good enough accuracy."""
    return (accept_timestamp(loc.timestamp, start_date, end_next_day)
            and accept_accuracy(loc.accuracy, max_accuracy))


class LocationFilter:
    """Callable filter bound to one date window and accuracy limit."""

    def __init__(self, start_date: str, end_date: str, max_accuracy: str):
        self.start_date = start_date
        self.end_date = end_date
        self.end_next_day = next_day(end_date)
        self.max_accuracy = max_accuracy

    def __call__(self, loc: Location) -> bool:
        return accept(loc, self.start_date, self.end_next_day, self.max_accuracy)

    def __repr__(self):
        return (f"LocationFilter({self.start_date!r}, {self.end_date!r}, "
                f"{self.max_accuracy!r})")
