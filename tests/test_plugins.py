"""Tests for the plugin manager, hook specs and manifests."""

import io
import logging
import types

import pytest

from location_extract import plugins
from location_extract.decoders import get_schemas
from location_extract.decoders.base import Location, RecordSchema
from location_extract.plugins import initialize_plugins
from location_extract.plugins.hooks import HookSpec, create_default_hooks
from location_extract.plugins.manager import PluginManager
from location_extract.plugins.manifest import (
    MANIFEST_NAME,
    find_manifest_in_package,
    load_manifest,
    register_from_manifest,
)
from location_extract.writers import CSVWriter, available_formats, create_writer
from location_extract.writers.base import TemplateWriter

MANIFEST = """
name: spreadsheet-writer
version: 2.1.0
description: CSV under another name
contributions:
  writers:
    - name: Spreadsheet
      extension: .sheet.csv
      python_name: location_extract.writers.csv:CSVWriter
  schemas:
    - python_name: location_extract.decoders.records:RECORDS_SCHEMA
"""


class LineWriter(TemplateWriter):
    name = "lines"
    extension = ".txt"
    description = "One coordinate pair per line"

    @staticmethod
    def render_location(loc):
        return f"{loc.latitude} {loc.longitude}\n"


class TestHookSpec:
    def test_firstresult_skips_none(self):
        hook = HookSpec("create_writer", firstresult=True)
        hook.register("a", lambda **kw: None)
        hook.register("b", lambda **kw: "b")
        hook.register("c", lambda **kw: "c")
        assert hook.call(format_name="gpx") == "b"

    def test_firstresult_nothing_registered(self):
        assert HookSpec("create_writer", firstresult=True).call() is None

    def test_priority(self):
        hook = HookSpec("create_writer", firstresult=True)
        hook.register("builtin", lambda: "builtin", priority=100)
        hook.register("custom", lambda: "custom", priority=50)
        assert hook.call() == "custom"
        assert [impl.plugin_name for impl in hook.implementations] == ["custom", "builtin"]

    def test_historic_collects(self):
        hook = HookSpec("get_output_formats")
        hook.register("a", lambda: [{"name": "a"}])
        hook.register("b", lambda: None)
        hook.register("c", lambda: [{"name": "c"}])
        assert hook.call() == [[{"name": "a"}], [{"name": "c"}]]

    def test_failing_impl_is_skipped(self, caplog):
        def broken(**kwargs):
            raise RuntimeError("boom")

        hook = HookSpec("create_writer", firstresult=True)
        hook.register("broken", broken, priority=10)
        hook.register("ok", lambda **kw: "ok")
        with caplog.at_level(logging.DEBUG, logger="location_extract.plugins.hooks"):
            assert hook.call(format_name="x") == "ok"
        assert "boom" in caplog.text

    def test_unregister(self):
        hook = HookSpec("get_record_schemas")
        hook.register("a", lambda: ["a"])
        hook.register("b", lambda: ["b"])
        hook.unregister("a")
        hook.unregister("missing")
        assert hook.call() == [["b"]]

    def test_declared_arguments_enforced(self):
        hooks = create_default_hooks()
        with pytest.raises(TypeError):
            hooks["create_writer"].call(fmt="gpx")
        with pytest.raises(TypeError):
            hooks["get_record_schemas"].call(key="locations")
        assert hooks["create_writer"].call(format_name="gpx") is None

    def test_default_hooks(self):
        hooks = create_default_hooks()
        assert set(hooks) == {"create_writer", "get_output_formats", "get_record_schemas"}
        assert hooks["create_writer"].firstresult
        assert not hooks["get_output_formats"].firstresult
        assert not hooks["get_record_schemas"].firstresult


class TestPluginManager:
    def test_register_and_list(self):
        pm = PluginManager()
        info = pm.register_plugin("lines", version="1.2.0", description="Line output")
        assert info.name == "lines"
        assert pm.plugin_names == ["lines"]
        assert pm.get_plugin("lines").version == "1.2.0"
        assert "lines" in pm.list_plugins()

    def test_hook_impl_tracked_on_plugin(self):
        pm = PluginManager()
        pm.register_plugin("lines")
        pm.register_hook_impl("get_output_formats", "lines", lambda: [{"name": "lines"}])
        assert pm.get_plugin("lines").hooks == ["get_output_formats"]
        assert pm.call_hook("get_output_formats") == [[{"name": "lines"}]]

    def test_unknown_hook(self):
        pm = PluginManager()
        with pytest.raises(ValueError):
            pm.register_hook_impl("no_such_hook", "x", lambda: None)
        with pytest.raises(ValueError):
            pm.call_hook("no_such_hook")

    def test_unregister_removes_hooks(self):
        pm = PluginManager()
        pm.register_plugin("lines")
        pm.register_hook_impl("create_writer", "lines", lambda **kw: "writer")
        pm.unregister_plugin("lines")
        assert pm.call_hook("create_writer", format_name="lines") is None
        assert pm.get_plugin("lines") is None
        pm.unregister_plugin("lines")

    def test_disabled_plugin_not_registered(self):
        pm = PluginManager()
        pm.disable_plugin("lines")
        assert pm.register_plugin("lines") is None
        pm.register_hook_impl("create_writer", "lines", lambda **kw: "writer")
        assert pm.call_hook("create_writer") is None
        assert pm.is_disabled("lines")

    def test_disable_then_enable(self):
        pm = PluginManager()
        pm.register_plugin("lines")
        pm.register_hook_impl("create_writer", "lines", lambda **kw: "writer")
        pm.disable_plugin("lines")
        assert pm.get_plugin("lines").enabled is False
        assert pm.call_hook("create_writer") is None
        pm.enable_plugin("lines")
        assert pm.get_plugin("lines").enabled is True
        assert not pm.is_disabled("lines")

    def test_manifest_fallback_without_register(self, tmp_path):
        (tmp_path / MANIFEST_NAME).write_text(MANIFEST)
        module = types.SimpleNamespace(__file__=str(tmp_path / "__init__.py"))
        pm = PluginManager()
        pm._try_manifest_registration("spreadsheet-writer", module)
        writer = pm.call_hook("create_writer", format_name="spreadsheet", out=io.StringIO())
        assert isinstance(writer, CSVWriter)

    def test_manifest_fallback_missing(self, tmp_path, caplog):
        module = types.SimpleNamespace(__file__=str(tmp_path / "__init__.py"))
        pm = PluginManager()
        with caplog.at_level(logging.WARNING):
            pm._try_manifest_registration("empty", module)
        assert "no register() function or manifest" in caplog.text


class TestInitialize:
    def test_builtin_registered(self):
        initialize_plugins()
        assert "builtin" in plugins.plugin_manager.plugin_names
        info = plugins.plugin_manager.get_plugin("builtin")
        assert set(info.hooks) == {"create_writer", "get_output_formats", "get_record_schemas"}

    def test_idempotent(self):
        initialize_plugins()
        initialize_plugins()
        assert plugins.plugin_manager.plugin_names.count("builtin") == 1

    def test_builtin_hooks(self):
        initialize_plugins()
        pm = plugins.plugin_manager
        writer = pm.call_hook("create_writer", format_name="CSV", out=io.StringIO())
        assert isinstance(writer, CSVWriter)
        assert pm.call_hook("create_writer", format_name="csv") is None
        formats = pm.call_hook("get_output_formats")
        assert [f["name"] for f in formats[0]] == ["gpx", "kml", "tcx", "csv", "nmea"]
        schemas = pm.call_hook("get_record_schemas")
        assert [s.name for s in schemas[0]] == ["records", "signals"]

    def test_disabled_builtin(self):
        initialize_plugins(disabled_plugins={"builtin"})
        assert "builtin" not in plugins.plugin_manager.plugin_names
        assert plugins.plugin_manager.is_disabled("builtin")

    def test_plugin_writer_reaches_lookup(self):
        initialize_plugins()
        pm = plugins.plugin_manager
        pm.register_plugin("lines")
        pm.register_hook_impl("get_output_formats", "lines", lambda: [{
            "name": "lines", "description": LineWriter.description, "extension": ".txt"}])
        pm.register_hook_impl(
            "create_writer", "lines",
            lambda format_name=None, out=None, **kw: LineWriter(out) if format_name == "lines" else None,
            priority=50,
        )
        out = io.StringIO()
        writer = create_writer("Lines", out)
        writer.write_location(Location("506553765", "30632229", "10", "2012-01-27T00:00:00Z"))
        assert out.getvalue() == "506553765 30632229\n"
        assert "lines" in [f["name"] for f in available_formats()]
        assert isinstance(create_writer("gpx", io.StringIO()), TemplateWriter)

    def test_plugin_schema_shadows_builtin(self):
        initialize_plugins()
        custom = RecordSchema(name="custom", key="locations", decode=lambda e: None)
        plugins.plugin_manager.register_plugin("custom")
        plugins.plugin_manager.register_hook_impl(
            "get_record_schemas", "custom", lambda: [custom], priority=10)
        schemas = get_schemas()
        assert schemas[0] is custom
        assert [s.key for s in schemas] == ["locations", "rawSignals"]


class TestManifest:
    def test_load(self):
        manifest = load_manifest(MANIFEST)
        assert manifest.name == "spreadsheet-writer"
        assert manifest.version == "2.1.0"
        assert manifest.writers[0].name == "spreadsheet"
        assert manifest.writers[0].extension == ".sheet.csv"
        assert manifest.schemas[0].python_name.endswith(":RECORDS_SCHEMA")

    def test_minimal(self):
        manifest = load_manifest("name: bare\nversion: 1\n")
        assert manifest.version == "1"
        assert manifest.writers == [] and manifest.schemas == []

    def test_missing_name(self):
        with pytest.raises(ValueError, match="name"):
            load_manifest("version: 1.0\n")

    def test_not_a_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            load_manifest("- just\n- a list\n")

    def test_register(self):
        pm = PluginManager()
        register_from_manifest(pm, load_manifest(MANIFEST))
        out = io.StringIO()
        assert isinstance(
            pm.call_hook("create_writer", format_name="spreadsheet", out=out), CSVWriter)
        assert pm.call_hook("create_writer", format_name="gpx", out=out) is None
        formats = pm.call_hook("get_output_formats")
        assert formats == [[{
            "name": "spreadsheet",
            "description": CSVWriter.description,
            "extension": ".sheet.csv",
        }]]
        assert [s.name for s in pm.call_hook("get_record_schemas")[0]] == ["records"]

    def test_bad_import_skipped(self, caplog):
        manifest = load_manifest(
            "name: broken\n"
            "contributions:\n"
            "  writers:\n"
            "    - name: nothing\n"
            "      python_name: location_extract.writers:NoSuchWriter\n"
            "  schemas:\n"
            "    - python_name: no_colon_here\n"
        )
        pm = PluginManager()
        with caplog.at_level(logging.WARNING):
            register_from_manifest(pm, manifest)
        assert pm.call_hook("create_writer", format_name="nothing", out=io.StringIO()) is None
        assert pm.call_hook("get_record_schemas") == []
        assert "failed to load writer" in caplog.text
        assert "failed to load schema" in caplog.text

    def test_find_in_package(self, tmp_path):
        (tmp_path / MANIFEST_NAME).write_text("name: here\n")
        module = types.SimpleNamespace(__file__=str(tmp_path / "plugin.py"))
        assert find_manifest_in_package(module) == "name: here\n"
        assert find_manifest_in_package(types.SimpleNamespace()) is None
        empty = tmp_path / "empty"
        empty.mkdir()
        assert find_manifest_in_package(
            types.SimpleNamespace(__file__=str(empty / "plugin.py"))) is None
