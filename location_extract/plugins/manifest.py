"""
location-plugin.yaml manifests.

A plugin module without a register() function can describe what it adds
in a manifest next to it:

    name: geojson-writer
    version: 1.0.0
    description: Adds GeoJSON output

    contributions:
      writers:
        - name: geojson
          extension: .geojson
          description: GeoJSON LineString per track
          python_name: geojson_writer.writer:GeoJSONWriter

      schemas:
        - python_name: my_exports.schemas:SEMANTIC_SEGMENTS_SCHEMA

Writers are LocationWriter subclasses, schemas are RecordSchema
instances. Both are imported lazily when the manifest is registered.
"""

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MANIFEST_NAME = "location-plugin.yaml"

# Manifest contributions run ahead of the built-in plugin
MANIFEST_PRIORITY = 50


@dataclass
class WriterContribution:
    name: str
    python_name: str  # "package.module:WriterClass"
    extension: str = ""
    description: str = ""


@dataclass
class SchemaContribution:
    python_name: str  # "package.module:SCHEMA"


@dataclass
class PluginManifest:
    name: str
    version: str = "0.0.0"
    description: str = ""
    writers: list[WriterContribution] = field(default_factory=list)
    schemas: list[SchemaContribution] = field(default_factory=list)


def _entries(contributions: dict, kind: str) -> list[dict]:
    entries = contributions.get(kind) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f"contributions.{kind} must be a list of mappings")
    for i, entry in enumerate(entries):
        if not entry.get("python_name"):
            raise ValueError(f"contributions.{kind}[{i}] has no python_name")
    return entries


def load_manifest(yaml_text: str) -> PluginManifest:
    """Parse manifest text. Raises ValueError for a malformed manifest."""
    try:
        import yaml
    except ImportError:
        raise ImportError(
            "PyYAML is needed for plugin manifests: "
            "pip install location-extract[plugins]"
        ) from None

    data = yaml.safe_load(yaml_text)
    if not isinstance(data, dict):
        raise ValueError("Manifest must be a YAML mapping")
    if not data.get("name"):
        raise ValueError("Manifest has no 'name'")

    contributions = data.get("contributions") or {}
    writers = [
        WriterContribution(
            name=str(entry.get("name", "")).lower(),
            python_name=entry["python_name"],
            extension=entry.get("extension", ""),
            description=entry.get("description", ""),
        )
        for entry in _entries(contributions, "writers")
    ]
    schemas = [
        SchemaContribution(python_name=entry["python_name"])
        for entry in _entries(contributions, "schemas")
    ]
    for writer in writers:
        if not writer.name:
            raise ValueError(f"writer {writer.python_name} has no name")

    return PluginManifest(
        name=str(data["name"]),
        version=str(data.get("version", "0.0.0")),
        description=data.get("description") or "",
        writers=writers,
        schemas=schemas,
    )


def find_manifest_in_package(module) -> Optional[str]:
    """Return the manifest text next to `module`, or None."""
    module_file = getattr(module, "__file__", None)
    if not module_file:
        return None
    path = Path(module_file).parent / MANIFEST_NAME
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


def _import_object(python_name: str):
    """Resolve "package.module:attr"."""
    module_path, sep, attr = python_name.partition(":")
    if not sep or not module_path or not attr:
        raise ValueError(f"expected 'module:name', got {python_name!r}")
    return getattr(importlib.import_module(module_path), attr)


def _make_writer_hooks(contrib: WriterContribution, writer_cls):
    descriptor = {
        "name": contrib.name,
        "description": contrib.description or getattr(writer_cls, "description", ""),
        "extension": contrib.extension or getattr(writer_cls, "extension", ""),
    }

    def get_output_formats():
        return [dict(descriptor)]

    def create_writer(format_name=None, out=None):
        if format_name != contrib.name or out is None:
            return None
        return writer_cls(out)

    return get_output_formats, create_writer


def _load(manifest: PluginManifest, kind: str, python_name: str):
    try:
        return _import_object(python_name)
    except Exception as e:
        logger.warning(f"Plugin {manifest.name}: failed to load {kind} {python_name}: {e}")
        return None


def register_from_manifest(manager, manifest: PluginManifest):
    """Plug a manifest's writers and schemas into `manager` under the manifest name."""
    for contrib in manifest.writers:
        writer_cls = _load(manifest, "writer", contrib.python_name)
        if writer_cls is None:
            continue
        get_formats, create = _make_writer_hooks(contrib, writer_cls)
        manager.register_hook_impl("get_output_formats", manifest.name, get_formats,
                                   priority=MANIFEST_PRIORITY)
        manager.register_hook_impl("create_writer", manifest.name, create,
                                   priority=MANIFEST_PRIORITY)

    schemas = [schema for schema in
               (_load(manifest, "schema", c.python_name) for c in manifest.schemas)
               if schema is not None]
    if schemas:
        manager.register_hook_impl(
            "get_record_schemas", manifest.name, lambda: list(schemas),
            priority=MANIFEST_PRIORITY,
        )
