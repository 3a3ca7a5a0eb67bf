"""
Track output writers.

When the plugin system is initialized, writer lookup dispatches through
the `create_writer` hook so plugins can add or replace formats. Otherwise
falls back to the built-in writers.
"""

import logging
from typing import Optional, TextIO

from .base import LocationWriter, TemplateWriter
from .csv import CSVWriter
from .gpx import GPXWriter
from .kml import KMLWriter
from .nmea import NMEAWriter
from .tcx import TCXWriter

logger = logging.getLogger(__name__)

# Used directly until the plugin system is initialized
WRITERS: dict[str, type[LocationWriter]] = {
    cls.name: cls for cls in (GPXWriter, KMLWriter, TCXWriter, CSVWriter, NMEAWriter)
}


def describe_writer(cls: type[LocationWriter]) -> dict:
    return {"name": cls.name, "description": cls.description, "extension": cls.extension}


def _plugins_active():
    try:
        from location_extract.plugins import plugin_manager, _initialized
    except ImportError:
        return None
    if _initialized and plugin_manager.plugin_names:
        return plugin_manager
    return None


def available_formats() -> list[dict]:
    """Describe every known output format, plugin formats included."""
    manager = _plugins_active()
    if manager is None:
        return [describe_writer(cls) for cls in WRITERS.values()]

    formats = {}
    for contributed in manager.call_hook("get_output_formats"):
        for fmt in contributed:
            formats.setdefault(fmt["name"], fmt)
    return list(formats.values())


def create_writer(format_name: str, out: TextIO) -> Optional[LocationWriter]:
    """Return a writer for `format_name` (case-insensitive), or None if unknown."""
    name = format_name.lower()
    manager = _plugins_active()
    if manager is not None:
        return manager.call_hook("create_writer", format_name=name, out=out)

    cls = WRITERS.get(name)
    return cls(out) if cls else None


__all__ = [
    "LocationWriter",
    "TemplateWriter",
    "GPXWriter",
    "KMLWriter",
    "TCXWriter",
    "CSVWriter",
    "NMEAWriter",
    "WRITERS",
    "available_formats",
    "create_writer",
    "describe_writer",
]
