"""Built-in record schema hooks for the two export layouts."""


def _get_record_schemas():
    """Hook impl: return the Records.json and rawSignals schemas."""
    from location_extract.decoders import BUILTIN_SCHEMAS

    return list(BUILTIN_SCHEMAS)


def register_schema_hooks(manager):
    """Register schema hooks with the plugin manager."""
    from . import PLUGIN_NAME

    manager.register_hook_impl(
        "get_record_schemas", PLUGIN_NAME, _get_record_schemas,
        priority=100,
    )
