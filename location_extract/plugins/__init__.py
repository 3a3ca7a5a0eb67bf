"""
Plugins for location-extract.

Writers and export layouts are looked up through hooks, so a separately
installed package can add an output format or decode another export
layout. The built-in formats and layouts register through the same hooks.

    from location_extract import plugins

    plugins.initialize_plugins()
    writer = plugins.plugin_manager.call_hook("create_writer", format_name="gpx", out=f)

Until `initialize_plugins()` has run, writer and schema lookups use the
built-in tables directly.
"""

import logging
from typing import Optional

from .hooks import HookSpec, create_default_hooks
from .manager import PluginInfo, PluginManager

logger = logging.getLogger(__name__)

# Process-wide registry; rebound by reset_plugins()
plugin_manager = PluginManager()

_initialized = False


def initialize_plugins(disabled_plugins: Optional[set[str]] = None):
    """
    Register the built-in plugin, then everything in the entry-point group.

    Only the first call does anything. Names in `disabled_plugins` are
    skipped, the built-in one included.
    """
    global _initialized

    if _initialized:
        return

    plugin_manager._disabled.update(disabled_plugins or ())

    from .builtin import register as register_builtin

    register_builtin(plugin_manager)
    plugin_manager.discover()

    _initialized = True
    logger.debug(f"Plugins ready: {', '.join(plugin_manager.plugin_names) or 'none'}")


def reset_plugins():
    """Drop all registrations and start over with an empty manager."""
    global plugin_manager, _initialized
    plugin_manager = PluginManager()
    _initialized = False


__all__ = [
    "HookSpec",
    "PluginInfo",
    "PluginManager",
    "create_default_hooks",
    "initialize_plugins",
    "plugin_manager",
    "reset_plugins",
]
