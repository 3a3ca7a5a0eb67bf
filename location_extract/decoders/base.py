"""Base types for location history decoding."""

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Location:
    """A normalized location record."""

    latitude: str  # fixed-point E7 digits, e.g. "506553765"
    longitude: str
    accuracy: str  # non-negative integer digits
    timestamp: str  # ISO8601 UTC


@dataclass(frozen=True)
class RecordSchema:
    """
    One supported export layout.

    Selected once per stream by the array key that introduces the records;
    `decode` turns one array element into a Location or raises RecordError.
    """

    name: str
    key: str
    decode: Callable[[Any], Location]
    description: str = ""


class RecordError(ValueError):
    """A single array element could not be turned into a Location."""


class DecodeError(Exception):
    """Fatal error while reading the export stream."""

    def __init__(self, message: str, record_index: Optional[int] = None,
                 byte_offset: Optional[int] = None):
        self.record_index = record_index
        self.byte_offset = byte_offset
        context = []
        if record_index is not None:
            context.append(f"record {record_index}")
        if byte_offset is not None:
            context.append(f"byte {byte_offset}")
        if context:
            message = f"{message} (at {', '.join(context)})"
        super().__init__(message)


class SchemaError(DecodeError):
    """The stream does not hold a supported location array."""


class TruncatedStreamError(DecodeError):
    """The stream ended inside the location array."""


class CorruptStreamError(DecodeError):
    """The stream is not valid JSON inside the location array."""


def require_int_string(record: dict, field: str) -> str:
    """Return an integer field as its exact digit string."""
    value = record.get(field)
    # bool is an int subclass; JSON true/false is not a coordinate
    if not isinstance(value, int) or isinstance(value, bool):
        raise RecordError(f"field {field!r} is not an integer: {value!r}")
    return str(value)


def require_timestamp(record: dict, field: str = "timestamp") -> str:
    value = record.get(field)
    if not isinstance(value, str) or not value:
        raise RecordError(f"missing {field!r}")
    return value
