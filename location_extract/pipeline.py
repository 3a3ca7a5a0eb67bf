"""
Extraction pipeline.

A reader thread decodes the export and feeds a bounded queue; the calling
thread filters, splits and writes. The queue keeps memory flat however big
the export is, and FIFO order keeps the track splitting deterministic.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterable, Optional, TextIO

from .config import ConfigError, ExtractConfig, PipelineConfig
from .decoders import Location, RecordSchema, decode_locations
from .filters import LocationFilter
from .segmenter import Boundary, Segmenter
from .writers import LocationWriter, create_writer

logger = logging.getLogger(__name__)

# Producer poll interval while the queue is full, so cancellation is noticed
_PUT_TIMEOUT = 0.1


@dataclass
class PipelineStats:
    """Counters reported to progress observers."""
    read: int = 0  # locations decoded
    written: int = 0  # locations accepted and written
    skipped: int = 0  # malformed records
    segments: int = 0
    tracks: int = 0
    last_timestamp: str = ""
    elapsed: float = 0.0
    done: bool = False


class _End:
    """Queue item marking the end of the stream."""


@dataclass
class _Failure:
    """Queue item carrying a reader-thread exception to the consumer."""
    error: BaseException


class Pipeline:
    """
    Wires decoder -> filter -> segmenter -> writer.

    `progress` is called with the PipelineStats every `progress_every`
    decoded locations and once more when the run ends.
    """

    def __init__(
        self,
        writer: LocationWriter,
        location_filter: Callable[[Location], bool],
        segmenter: Optional[Segmenter] = None,
        progress: Optional[Callable[[PipelineStats], None]] = None,
        progress_every: int = 0x8000,
        queue_size: int = 100,
        schemas: Optional[list[RecordSchema]] = None,
    ):
        self.writer = writer
        self.location_filter = location_filter
        self.segmenter = segmenter or Segmenter()
        self.progress = progress
        self.progress_every = progress_every
        self.queue_size = queue_size
        self.schemas = schemas
        self.stats = PipelineStats()
        self._started = 0.0

    # ---- Reader thread ----

    def _produce(self, locations: Iterable[Location], q: queue.Queue,
                 cancel: threading.Event):
        try:
            for loc in locations:
                if not self._put(q, loc, cancel):
                    logger.debug("Reader cancelled")
                    return
        except Exception as e:
            self._put(q, _Failure(e), cancel)
            return
        self._put(q, _End(), cancel)

    @staticmethod
    def _put(q: queue.Queue, item, cancel: threading.Event) -> bool:
        while not cancel.is_set():
            try:
                q.put(item, timeout=_PUT_TIMEOUT)
                return True
            except queue.Full:
                continue
        return False

    def _on_skip(self, index: int, error: Exception):
        self.stats.skipped += 1

    # ---- Consumer ----

    @staticmethod
    def _consume(q: queue.Queue):
        while True:
            item = q.get()
            if isinstance(item, _End):
                return
            if isinstance(item, _Failure):
                raise item.error
            yield item

    def _handle(self, loc: Location):
        stats = self.stats
        stats.read += 1
        stats.last_timestamp = loc.timestamp

        if self.location_filter(loc):
            boundary = self.segmenter.place(loc)
            if boundary is Boundary.TRACK:
                self.writer.write_new_track()
            elif boundary is Boundary.SEGMENT:
                self.writer.write_new_segment()
            self.writer.write_location(loc)
            stats.written += 1
            stats.tracks = self.segmenter.tracks
            stats.segments = self.segmenter.segments

        if self.progress_every and stats.read % self.progress_every == 0:
            self._report()

    def _report(self):
        self.stats.elapsed = time.monotonic() - self._started
        if self.progress:
            self.progress(self.stats)

    def run(self, source: BinaryIO) -> PipelineStats:
        """
        Stream `source` through to the writer.

        A fatal decode error propagates after the reader thread has been
        stopped; the footer is then not written, so the output is
        incomplete.
        """
        self.stats = PipelineStats()
        self._started = time.monotonic()

        q: queue.Queue = queue.Queue(maxsize=self.queue_size)
        cancel = threading.Event()
        locations = decode_locations(source, self.schemas, on_skip=self._on_skip)
        reader = threading.Thread(
            target=self._produce, args=(locations, q, cancel),
            name="location-reader", daemon=True,
        )
        reader.start()

        try:
            self.writer.write_header()
            for loc in self._consume(q):
                self._handle(loc)
            self.writer.write_footer()
        finally:
            cancel.set()
            reader.join()
            self.writer.flush()

        self.stats.done = True
        self._report()
        logger.info(
            f"Read {self.stats.read} positions, wrote {self.stats.written} in "
            f"{self.stats.segments} segments in {self.stats.tracks} tracks "
            f"({self.stats.skipped} malformed records skipped)"
        )
        return self.stats


def run_extract(
    config: ExtractConfig,
    source: BinaryIO,
    out: TextIO,
    progress: Optional[Callable[[PipelineStats], None]] = None,
    pipeline_config: Optional[PipelineConfig] = None,
) -> PipelineStats:
    """Validate `config`, build the pipeline for it and run it over `source`."""
    config.validate()
    pipeline_config = pipeline_config or PipelineConfig()

    writer = create_writer(config.output_format, out)
    if writer is None:
        raise ConfigError(f"no writer found for format {config.output_format!r}")

    pipeline = Pipeline(
        writer=writer,
        location_filter=LocationFilter(config.start_date, config.end_date, config.max_accuracy),
        segmenter=Segmenter(config.track_digits, config.segment_digits),
        progress=progress,
        progress_every=pipeline_config.progress_every,
        queue_size=pipeline_config.queue_size,
    )
    return pipeline.run(source)
