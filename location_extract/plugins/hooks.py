"""
Extension points for location-extract plugins.

A hook is either `firstresult` (the first implementation that returns
something wins, used to build a writer for a format name) or historic
(every implementation contributes, used to list formats and schemas).
Implementations are ordered by priority; the built-in plugin uses 100 so
anything registered lower takes precedence.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)

BUILTIN_PRIORITY = 100


@dataclass
class HookImpl:
    plugin_name: str
    func: Callable
    priority: int = BUILTIN_PRIORITY  # lower = called first


class HookSpec:
    """One named extension point and the implementations plugged into it."""

    def __init__(self, name: str, firstresult: bool = False,
                 argnames: Optional[tuple[str, ...]] = None):
        self.name = name
        self.firstresult = firstresult
        self.argnames = argnames
        self._impls: list[HookImpl] = []

    def __repr__(self):
        mode = "firstresult" if self.firstresult else "historic"
        return f"<HookSpec {self.name} {mode} impls={len(self._impls)}>"

    def register(self, plugin_name: str, func: Callable, priority: int = BUILTIN_PRIORITY):
        # sort is stable: equal priorities keep registration order
        self._impls.append(HookImpl(plugin_name, func, priority))
        self._impls.sort(key=lambda impl: impl.priority)

    def unregister(self, plugin_name: str):
        self._impls = [impl for impl in self._impls if impl.plugin_name != plugin_name]

    def _results(self, kwargs: dict) -> Iterator[Any]:
        """Yield each non-None result; a failing implementation is logged and skipped."""
        for impl in list(self._impls):
            try:
                result = impl.func(**kwargs)
            except Exception as e:
                logger.debug(f"Hook {self.name}: {impl.plugin_name} failed: {e}")
                continue
            if result is not None:
                yield result

    def call(self, **kwargs) -> Any:
        """Return the first result (firstresult) or the list of all results."""
        if self.argnames is not None:
            unknown = set(kwargs) - set(self.argnames)
            if unknown:
                raise TypeError(f"hook {self.name} got unexpected arguments: {sorted(unknown)}")

        results = self._results(kwargs)
        if self.firstresult:
            return next(results, None)
        return list(results)

    @property
    def implementations(self) -> list[HookImpl]:
        return list(self._impls)


def create_default_hooks() -> dict[str, HookSpec]:
    """Build the hook table every PluginManager starts with."""
    specs = [
        # (format_name, out) -> LocationWriter for that format, or None
        HookSpec("create_writer", firstresult=True, argnames=("format_name", "out")),
        # () -> [{"name", "description", "extension"}, ...]
        HookSpec("get_output_formats", argnames=()),
        # () -> [RecordSchema, ...]
        HookSpec("get_record_schemas", argnames=()),
    ]
    return {spec.name: spec for spec in specs}
