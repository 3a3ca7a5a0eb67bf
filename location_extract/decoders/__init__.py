"""
Location history decoding.

Turns an export byte stream into a lazy sequence of normalized Locations.
Which layout is present is decided once per stream by the key of the
record array; the known layouts come from the plugin hook system when it
is initialized, otherwise from the built-in table.
"""

import logging
from typing import BinaryIO, Callable, Optional

from .base import (
    CorruptStreamError,
    DecodeError,
    Location,
    RecordError,
    RecordSchema,
    SchemaError,
    TruncatedStreamError,
)
from .records import RECORDS_SCHEMA
from .signals import SIGNALS_SCHEMA, to_utc
from .stream import LocationStream

logger = logging.getLogger(__name__)

# Used directly until the plugin system is initialized
BUILTIN_SCHEMAS: list[RecordSchema] = [
    RECORDS_SCHEMA,
    SIGNALS_SCHEMA,
]


def get_schemas() -> list[RecordSchema]:
    """
    Return every known record schema.

    Plugin-contributed schemas come first, so a plugin can take over a key
    that a built-in schema also uses.
    """
    try:
        from location_extract.plugins import plugin_manager, _initialized

        if _initialized and plugin_manager.plugin_names:
            schemas = []
            for contributed in plugin_manager.call_hook("get_record_schemas"):
                schemas.extend(contributed)
            if schemas:
                return _dedupe(schemas)
    except ImportError:
        pass

    return list(BUILTIN_SCHEMAS)


def _dedupe(schemas: list[RecordSchema]) -> list[RecordSchema]:
    seen = set()
    result = []
    for schema in schemas:
        if schema.key in seen:
            logger.debug(f"Schema {schema.name} shadowed for key {schema.key!r}")
            continue
        seen.add(schema.key)
        result.append(schema)
    return result


def decode_locations(
    source: BinaryIO,
    schemas: Optional[list[RecordSchema]] = None,
    on_skip: Optional[Callable[[int, Exception], None]] = None,
) -> LocationStream:
    """
    Decode an export stream lazily.

    Malformed records are skipped (and reported to `on_skip`); a missing
    record array or a broken stream raises a DecodeError subclass while
    iterating.
    """
    if schemas is None:
        schemas = get_schemas()
    return LocationStream(source, schemas, on_skip=on_skip)


__all__ = [
    "BUILTIN_SCHEMAS",
    "CorruptStreamError",
    "DecodeError",
    "Location",
    "LocationStream",
    "RecordError",
    "RecordSchema",
    "SchemaError",
    "TruncatedStreamError",
    "decode_locations",
    "get_schemas",
    "to_utc",
]
