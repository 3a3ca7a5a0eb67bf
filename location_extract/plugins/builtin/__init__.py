"""
Built-in plugin for location-extract.

Registers the default output writers (GPX, KML, TCX, CSV, NMEA) and the
two export layouts through the same hook system that third-party plugins
use.
"""

from .schemas import register_schema_hooks
from .writers import register_writer_hooks

PLUGIN_NAME = "builtin"
PLUGIN_VERSION = "1.0.0"


def register(manager):
    """Register all built-in hooks with the plugin manager."""
    manager.register_plugin(
        name=PLUGIN_NAME,
        version=PLUGIN_VERSION,
        description="Built-in output writers and location history schemas",
    )
    register_writer_hooks(manager)
    register_schema_hooks(manager)
