"""
Built-in writer hooks.

Exposes the GPX, KML, TCX, CSV and NMEA writers through the plugin hook
system so third-party plugins can add their own output formats.
"""

import logging

from location_extract.writers import WRITERS, describe_writer

logger = logging.getLogger(__name__)


def _get_output_formats():
    """Hook impl: return built-in output format descriptors."""
    return [describe_writer(cls) for cls in WRITERS.values()]


def _create_writer(format_name=None, out=None, **kwargs):
    """Hook impl: build a built-in writer, or None for other formats."""
    cls = WRITERS.get((format_name or "").lower())
    if cls is None or out is None:
        return None
    return cls(out)


def register_writer_hooks(manager):
    """Register writer hooks with the plugin manager."""
    from . import PLUGIN_NAME

    manager.register_hook_impl(
        "get_output_formats", PLUGIN_NAME, _get_output_formats,
    )
    manager.register_hook_impl(
        "create_writer", PLUGIN_NAME, _create_writer,
        priority=100,  # built-in = lowest priority, custom plugins override
    )
