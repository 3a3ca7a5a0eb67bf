"""
Decoder for the legacy Records.json layout.

    {"locations": [
        {"latitudeE7": 506553765, "longitudeE7": 30632229,
         "accuracy": 24, "timestamp": "2012-01-27T21:14:42.352Z"},
        ...
    ]}

Coordinates are already scaled integers and timestamps already UTC.
"""

from .base import Location, RecordError, RecordSchema, require_int_string, require_timestamp


def decode_record(element) -> Location:
    """Hook-compatible decode function for one `locations` element."""
    if not isinstance(element, dict):
        raise RecordError(f"expected an object, got {type(element).__name__}")

    return Location(
        latitude=require_int_string(element, "latitudeE7"),
        longitude=require_int_string(element, "longitudeE7"),
        accuracy=require_int_string(element, "accuracy"),
        timestamp=require_timestamp(element),
    )


RECORDS_SCHEMA = RecordSchema(
    name="records",
    key="locations",
    decode=decode_record,
    description="Records.json export (latitudeE7/longitudeE7)",
)
