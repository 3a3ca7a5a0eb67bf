"""
Decoder for the on-device timeline layout.

    {"rawSignals": [
        {"position": {
            "LatLng": "50.6443831°, 3.0536723°",
            "accuracyMeters": 13,
            "timestamp": "2024-12-07T17:46:25.000+01:00",
            ...}},
        ...
    ]}

Elements without a `position` (wifi scans, activity records) are skipped
like any other malformed element.
"""

import logging
import re
from datetime import datetime, timezone

from ..coords import FormatError, to_fixed_point
from .base import Location, RecordError, RecordSchema, require_int_string, require_timestamp

logger = logging.getLogger(__name__)

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})[.,]\d+")


def to_utc(timestamp: str) -> str:
    """
    Convert an RFC3339 timestamp to UTC ending with "Z".

    "2024-12-07T17:46:25.000+01:00" -> "2024-12-07T16:46:25Z"

    Strings without '+' or '-' are returned as is, and so is anything
    that does not parse.
    """
    if "+" not in timestamp and "-" not in timestamp:
        return timestamp

    text = timestamp
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # The output has second precision; fromisoformat before 3.11 only
    # takes 3 or 6 fractional digits
    text = _FRACTION.sub(r"\1", text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp kept as is: {timestamp}")
        return timestamp
    if parsed.tzinfo is None:
        return timestamp
    return parsed.astimezone(timezone.utc).strftime(UTC_FORMAT)


def parse_latlng(value) -> tuple[str, str]:
    """Split "DD.DDDDDDD°, DD.DDDDDDD°" into two fixed-point strings."""
    if not isinstance(value, str):
        raise RecordError(f"LatLng is not a string: {value!r}")
    parts = value.split(",")
    if len(parts) != 2:
        raise RecordError(f"invalid LatLng {value!r}")
    try:
        return to_fixed_point(parts[0]), to_fixed_point(parts[1])
    except FormatError as e:
        raise RecordError(str(e)) from e


def decode_signal(element) -> Location:
    """Hook-compatible decode function for one `rawSignals` element."""
    if not isinstance(element, dict):
        raise RecordError(f"expected an object, got {type(element).__name__}")
    position = element.get("position")
    if not isinstance(position, dict):
        raise RecordError("no position")

    latitude, longitude = parse_latlng(position.get("LatLng"))
    return Location(
        latitude=latitude,
        longitude=longitude,
        accuracy=require_int_string(position, "accuracyMeters"),
        timestamp=to_utc(require_timestamp(position)),
    )


SIGNALS_SCHEMA = RecordSchema(
    name="signals",
    key="rawSignals",
    decode=decode_signal,
    description="On-device timeline export (rawSignals/position)",
)
