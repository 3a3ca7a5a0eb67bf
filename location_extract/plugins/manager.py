"""
Plugin registry for location-extract.

A plugin is any module reachable from the `location_extract.plugins`
entry-point group. It either exposes `register(manager)` or ships a
location-plugin.yaml manifest beside it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .hooks import BUILTIN_PRIORITY, HookSpec, create_default_hooks

logger = logging.getLogger(__name__)


@dataclass
class PluginInfo:
    """What `plugins list` and `plugins info` show about a plugin."""

    name: str
    version: str = "0.0.0"
    description: str = ""
    module: Any = None
    enabled: bool = True
    hooks: list[str] = field(default_factory=list)


class PluginManager:
    """
    Holds registered plugins and the hook table they implement.

    Disabling is by name and sticks: a disabled name can't register
    itself or any hook implementation until it is enabled again.
    """

    ENTRY_POINT_GROUP = "location_extract.plugins"

    def __init__(self):
        self._plugins: dict[str, PluginInfo] = {}
        self._hooks: dict[str, HookSpec] = create_default_hooks()
        self._disabled: set[str] = set()

    def _spec(self, hook_name: str) -> HookSpec:
        spec = self._hooks.get(hook_name)
        if spec is None:
            raise ValueError(f"Unknown hook: {hook_name}")
        return spec

    # ---- Registration ----

    def register_plugin(self, name: str, module: Any = None, version: str = "0.0.0",
                        description: str = "") -> Optional[PluginInfo]:
        """Add a plugin to the registry; disabled names are refused with None."""
        if self.is_disabled(name):
            logger.debug(f"Plugin {name} is disabled, not registering")
            return None

        info = PluginInfo(name=name, version=version, description=description.strip(),
                          module=module)
        self._plugins[name] = info
        logger.debug(f"Registered plugin {name} {version}")
        return info

    def unregister_plugin(self, name: str):
        info = self._plugins.pop(name, None)
        if info is None:
            return
        for spec in self._hooks.values():
            spec.unregister(name)
        logger.debug(f"Unregistered plugin {name}")

    def register_hook_impl(self, hook_name: str, plugin_name: str, func: Callable,
                           priority: int = BUILTIN_PRIORITY):
        """Plug `func` into a hook on behalf of `plugin_name`."""
        spec = self._spec(hook_name)
        if self.is_disabled(plugin_name):
            return
        spec.register(plugin_name, func, priority)

        info = self._plugins.get(plugin_name)
        if info is not None and hook_name not in info.hooks:
            info.hooks.append(hook_name)

    def call_hook(self, hook_name: str, **kwargs) -> Any:
        return self._spec(hook_name).call(**kwargs)

    # ---- Enable / disable ----

    def enable_plugin(self, name: str):
        """Lift a disable. Hook implementations are not restored."""
        self._disabled.discard(name)
        info = self._plugins.get(name)
        if info is not None:
            info.enabled = True
        logger.debug(f"Enabled plugin {name}")

    def disable_plugin(self, name: str):
        """Disable by name and pull its hook implementations; the info entry stays."""
        self._disabled.add(name)
        for spec in self._hooks.values():
            spec.unregister(name)

        info = self._plugins.get(name)
        if info is not None:
            info.enabled = False
            info.hooks.clear()
        logger.debug(f"Disabled plugin {name}")

    def is_disabled(self, name: str) -> bool:
        return name in self._disabled

    # ---- Discovery ----

    def discover(self, disabled_plugins: Optional[set[str]] = None):
        """
        Load every plugin in the entry-point group.

        A plugin package declares itself like this:

            [project.entry-points."location_extract.plugins"]
            geojson = "geojson_writer.plugin"

        A plugin that fails to import or register is logged and skipped.
        """
        self._disabled.update(disabled_plugins or ())

        from importlib.metadata import entry_points

        try:
            found = list(entry_points(group=self.ENTRY_POINT_GROUP))
        except Exception as e:
            logger.debug(f"Entry point lookup failed: {e}")
            return

        for ep in found:
            if self.is_disabled(ep.name) or ep.name in self._plugins:
                logger.debug(f"Not loading plugin {ep.name}: disabled or already loaded")
                continue
            try:
                self._load_entry_point(ep)
            except Exception as e:
                logger.warning(f"Failed to load plugin {ep.name}: {e}")

    def _load_entry_point(self, ep):
        module = ep.load()
        self.register_plugin(
            name=ep.name,
            module=module,
            version=getattr(module, "__version__", "0.0.0"),
            description=getattr(module, "__doc__", None) or "",
        )
        register = getattr(module, "register", None)
        if callable(register):
            register(self)
        else:
            self._try_manifest_registration(ep.name, module)

    def _try_manifest_registration(self, plugin_name: str, module):
        """Register a plugin module from the manifest shipped next to it."""
        from .manifest import find_manifest_in_package, load_manifest, register_from_manifest

        text = find_manifest_in_package(module)
        if not text:
            logger.warning(f"Plugin {plugin_name} has no register() function or manifest")
            return
        try:
            manifest = load_manifest(text)
        except ImportError:
            logger.warning(f"Plugin {plugin_name} ships a manifest but PyYAML is not installed")
            return
        register_from_manifest(self, manifest)
        logger.debug(f"Plugin {plugin_name} registered from its manifest")

    # ---- Introspection ----

    def get_plugin(self, name: str) -> Optional[PluginInfo]:
        return self._plugins.get(name)

    def list_plugins(self) -> dict[str, PluginInfo]:
        return dict(self._plugins)

    @property
    def hooks(self) -> dict[str, HookSpec]:
        return dict(self._hooks)

    @property
    def plugin_names(self) -> list[str]:
        return list(self._plugins)
