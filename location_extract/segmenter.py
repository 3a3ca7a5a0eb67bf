"""
Track and segment splitting.

Two consecutive accepted points stay in the same segment while their
coordinates agree on enough fractional digits. Fewer than
`segment_threshold` common digits starts a new segment, fewer than
`track_threshold` starts a new track. With 7 fractional digits, one
digit of latitude is roughly 11 km and two digits roughly 1.1 km.
"""

import enum
from typing import Optional

from .coords import FRACTION_DIGITS, is_fixed_point
from .decoders.base import Location

DEFAULT_TRACK_DIGITS = 1
DEFAULT_SEGMENT_DIGITS = 2


class Boundary(enum.Enum):
    NONE = "none"
    SEGMENT = "segment"
    TRACK = "track"


def match_digits(a: Optional[str], b: Optional[str]) -> int:
    """
    Count the leading fractional digits two fixed-point strings share.

    Returns 0 unless both are fixed-point strings (optional '-' and at
    least 7 digits) of equal length with the same integer part.

        match_digits("987654321", "987654021") -> 4
        match_digits("987654321", "987650321") -> 3
    """
    if not (is_fixed_point(a) and is_fixed_point(b)) or len(a) != len(b):
        return 0
    split = len(a) - FRACTION_DIGITS
    if a[:split] != b[:split]:
        return 0
    n = 0
    for x, y in zip(a[split:], b[split:]):
        if x != y:
            break
        n += 1
    return n


class Segmenter:
    """
    Decides where accepted locations start a new segment or track.

    Only the last accepted coordinate pair is kept. Callers must only pass
    locations that made it through the filter.
    """

    def __init__(self, track_threshold: int = DEFAULT_TRACK_DIGITS,
                 segment_threshold: int = DEFAULT_SEGMENT_DIGITS):
        self.track_threshold = track_threshold
        self.segment_threshold = segment_threshold
        self.last_latitude: Optional[str] = None
        self.last_longitude: Optional[str] = None
        self.tracks = 0
        self.segments = 0

    def place(self, loc: Location) -> Boundary:
        """Record an accepted location and return the boundary preceding it."""
        if self.last_latitude is None:
            boundary = Boundary.NONE
            self.tracks = 1
            self.segments = 1
        else:
            common = min(
                match_digits(self.last_latitude, loc.latitude),
                match_digits(self.last_longitude, loc.longitude),
            )
            if common < self.track_threshold:
                self.tracks += 1
                self.segments += 1
                boundary = Boundary.TRACK
            elif common < self.segment_threshold:
                self.segments += 1
                boundary = Boundary.SEGMENT
            else:
                boundary = Boundary.NONE

        self.last_latitude = loc.latitude
        self.last_longitude = loc.longitude
        return boundary
