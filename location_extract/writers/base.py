"""Base classes for track output writers."""

from abc import ABC, abstractmethod
from typing import TextIO

from ..decoders.base import Location


class LocationWriter(ABC):
    """
    Base class for output formats.

    The pipeline calls write_header once, then write_location for every
    accepted location with write_new_segment / write_new_track in between
    where the track splits, then write_footer and flush.
    """

    name: str = ""
    extension: str = ""
    description: str = ""

    def __init__(self, out: TextIO):
        self.out = out

    @abstractmethod
    def write_header(self): ...

    @abstractmethod
    def write_location(self, loc: Location): ...

    @abstractmethod
    def write_new_segment(self): ...

    @abstractmethod
    def write_new_track(self): ...

    @abstractmethod
    def write_footer(self): ...

    def flush(self):
        self.out.flush()


class TemplateWriter(LocationWriter):
    """
    Writer made of fixed strings plus a per-location render function.

    Formats without tracks or segments leave `new_segment` and `new_track`
    empty, which makes those calls no-ops.
    """

    header: str = ""
    new_segment: str = ""
    new_track: str = ""
    footer: str = ""

    @staticmethod
    @abstractmethod
    def render_location(loc: Location) -> str:
        """Return the text for one location."""
        ...

    def write_header(self):
        self._write(self.header)

    def write_location(self, loc: Location):
        self.out.write(self.render_location(loc))

    def write_new_segment(self):
        self._write(self.new_segment)

    def write_new_track(self):
        self._write(self.new_track)

    def write_footer(self):
        self._write(self.footer)

    def _write(self, text: str):
        if text:
            self.out.write(text)
