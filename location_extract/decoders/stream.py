"""
Incremental reader for location history exports.

The exports are single JSON documents that can reach several gigabytes,
so the document is walked as an ijson event stream: scan forward to the
array key, then build and decode one element at a time.
"""

import logging
from typing import BinaryIO, Callable, Iterator, Optional

import ijson
from ijson.common import ObjectBuilder

from .base import (
    CorruptStreamError,
    Location,
    RecordError,
    RecordSchema,
    SchemaError,
    TruncatedStreamError,
)

logger = logging.getLogger(__name__)

_CONTAINER_START = ("start_map", "start_array")
_CONTAINER_END = ("end_map", "end_array")


class CountingReader:
    """File-like wrapper that remembers how many bytes were consumed."""

    def __init__(self, raw: BinaryIO):
        self._raw = raw
        self.offset = 0
        self.eof = False

    def read(self, size: int = -1) -> bytes:
        data = self._raw.read(size)
        # ijson probes the source with read(0)
        if not data and size != 0:
            self.eof = True
        self.offset += len(data)
        return data


class LocationStream:
    """
    Lazy, single-pass sequence of Locations from one export stream.

    The schema is detected on the first call to `next()`, not in the
    constructor, so an empty or foreign document fails where it is read.
    """

    def __init__(
        self,
        source: BinaryIO,
        schemas: list[RecordSchema],
        on_skip: Optional[Callable[[int, Exception], None]] = None,
    ):
        self._reader = CountingReader(source)
        self._schemas = {s.key: s for s in schemas}
        self._on_skip = on_skip
        self._events = ijson.parse(self._reader)
        self._iter: Optional[Iterator[Location]] = None
        self.schema: Optional[RecordSchema] = None
        self.index = 0
        self.skipped = 0

    def __iter__(self):
        return self

    def __next__(self) -> Location:
        if self._iter is None:
            self._iter = self._decode()
        return next(self._iter)

    @property
    def byte_offset(self) -> int:
        return self._reader.offset

    def _next_event(self):
        try:
            return next(self._events)
        except StopIteration:
            if self.schema is None:
                return None
            raise TruncatedStreamError(
                "unexpected end of stream inside the location array",
                record_index=self.index, byte_offset=self.byte_offset,
            ) from None
        except ijson.JSONError as e:
            if self.schema is None:
                raise SchemaError(
                    f"invalid JSON before the location array: {e}",
                    byte_offset=self.byte_offset,
                ) from e
            if isinstance(e, ijson.IncompleteJSONError) and self._reader.eof:
                raise TruncatedStreamError(
                    f"unexpected end of stream inside the location array: {e}",
                    record_index=self.index, byte_offset=self.byte_offset,
                ) from e
            raise CorruptStreamError(
                f"invalid JSON inside the location array: {e}",
                record_index=self.index, byte_offset=self.byte_offset,
            ) from e

    def _detect_schema(self) -> RecordSchema:
        while True:
            item = self._next_event()
            if item is None:
                keys = ", ".join(f'"{k}"' for k in self._schemas)
                raise SchemaError(
                    f"none of the keys {keys} found",
                    byte_offset=self.byte_offset,
                )
            _, event, value = item
            if event == "map_key" and value in self._schemas:
                return self._schemas[value]

    def _read_element(self, event, value):
        """Assemble one array element from its events."""
        if event not in _CONTAINER_START:
            return value

        builder = ObjectBuilder()
        builder.event(event, value)
        depth = 1
        while depth:
            _, event, value = self._next_event()
            if event in _CONTAINER_START:
                depth += 1
            elif event in _CONTAINER_END:
                depth -= 1
            builder.event(event, value)
        return builder.value

    def _decode(self) -> Iterator[Location]:
        schema = self._detect_schema()
        self.schema = schema
        logger.info(f"Detected {schema.name} export (\"{schema.key}\" array)")

        _, event, _ = self._next_event()
        if event != "start_array":
            raise SchemaError(
                f"expected array start after \"{schema.key}\", got {event}",
                byte_offset=self.byte_offset,
            )

        while True:
            _, event, value = self._next_event()
            if event == "end_array":
                return

            element = self._read_element(event, value)
            index = self.index
            self.index += 1
            try:
                location = schema.decode(element)
            except (RecordError, KeyError, TypeError, ValueError) as e:
                self.skipped += 1
                logger.debug(f"Skipping record {index}: {e}")
                if self._on_skip:
                    self._on_skip(index, e)
                continue
            yield location
