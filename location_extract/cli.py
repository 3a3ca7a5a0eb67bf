#!/usr/bin/env python3
"""
Location Extract CLI - Main entry point.

Usage:
    location-extract extract INPUT -s START [OPTIONS]   Extract a track file
    location-extract formats                            List output formats
    location-extract config                             Show/create configuration
    location-extract plugins list|enable|disable|info   Manage plugins

Examples:
    location-extract extract -s 2012-01-01 -e 2012-01-31 -a 40 takeout.zip
    location-extract extract -s 2024-12-07 -f nmea location-history.json
"""

import argparse
import json
import logging
import sys
import time
from dataclasses import asdict, replace

from . import __version__
from .config import Config, DEFAULT_CONFIG_PATH
from .inputs import open_input
from .pipeline import PipelineStats, run_extract

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", log_file: str = None):
    """Configure logging."""
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        handlers=handlers,
    )


def format_progress(stats: PipelineStats) -> str:
    """Two status lines: what was read, and what was written."""
    line = f"Read {stats.read:,} positions in {stats.elapsed:.2f} seconds"
    if stats.last_timestamp and not stats.done:
        line += f" until {stats.last_timestamp}"
    return (f"{line}\n"
            f"Wrote {stats.written:,} positions in {stats.segments:,} segments "
            f"in {stats.tracks:,} tracks")


class ProgressPrinter:
    """Redraws the two progress lines in place on a terminal."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr
        self._drawn = False

    def __call__(self, stats: PipelineStats):
        if self._drawn and self.stream.isatty():
            # cursor up one line, to the start of the previous report
            self.stream.write("\x1b[1F\x1b[J")
        elif self._drawn:
            self.stream.write("\n")
        self.stream.write(format_progress(stats))
        if stats.done:
            self.stream.write("\n")
        self.stream.flush()
        self._drawn = True


# ---------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------

def cmd_extract(args, config: Config):
    """Extract locations into a track file."""
    overrides = {
        "start_date": args.start,
        "end_date": args.end or args.start,
    }
    if args.accuracy is not None:
        overrides["max_accuracy"] = args.accuracy
    if args.track_digits is not None:
        overrides["track_digits"] = args.track_digits
    if args.segment_digits is not None:
        overrides["segment_digits"] = args.segment_digits
    if args.output_format:
        overrides["output_format"] = args.output_format
    extract = replace(config.extract, **overrides)

    # Fail on bad settings before creating the output file
    extract.validate()
    output = args.output or extract.default_output_name()

    progress = None if args.quiet else ProgressPrinter()
    start = time.monotonic()
    with open_input(args.input) as source, \
            open(output, "w", encoding="utf-8", newline="\n") as out:
        stats = run_extract(
            extract, source, out,
            progress=progress,
            pipeline_config=config.pipeline,
        )

    elapsed = time.monotonic() - start
    print(f"Wrote {stats.written:,} of {stats.read:,} positions to {output} "
          f"in {elapsed:.1f}s")
    if stats.skipped:
        print(f"  Skipped {stats.skipped:,} malformed records")


def cmd_formats(args, config: Config):
    """List available output formats."""
    from .writers import available_formats

    print("Available output formats:")
    for fmt in available_formats():
        print(f"  {fmt['name']:<8} {fmt['description']:<36} {fmt.get('extension', '')}")


def cmd_config(args, config: Config):
    """Show or create configuration."""
    if args.create:
        config.save(args.path)
        print(f"Config written to {args.path or DEFAULT_CONFIG_PATH}")
    else:
        print(json.dumps(asdict(config), indent=2))


def _plugins_list(args, config: Config, manager):
    registered = manager.list_plugins()
    disabled = set(config.plugins.disabled_plugins)
    if not registered and not disabled:
        print("No plugins registered.")
        return

    rows = [(name, info.version, "enabled" if info.enabled else "disabled",
             ", ".join(info.hooks) or "-")
            for name, info in sorted(registered.items())]
    rows += [(name, "?", "disabled", "-") for name in sorted(disabled - set(registered))]

    print(f"{'Plugin':<20} {'Version':<10} {'Status':<10} Hooks")
    for row in rows:
        print("{:<20} {:<10} {:<10} {}".format(*row))


def _plugins_set_enabled(args, config: Config, enabled: bool):
    name = args.plugin_name
    disabled = config.plugins.disabled_plugins
    if enabled == (name not in disabled):
        print(f"Plugin '{name}' is already {'enabled' if enabled else 'disabled'}.")
        return

    if enabled:
        disabled.remove(name)
    else:
        if name == "builtin":
            print("Warning: without the builtin plugin only plugin-provided formats "
                  "and export layouts remain.", file=sys.stderr)
        disabled.append(name)
    config.save(args.config)
    print(f"{'Enabled' if enabled else 'Disabled'} plugin {name} (takes effect on next run)")


def _plugins_info(args, config: Config, manager):
    info = manager.get_plugin(args.plugin_name)
    if info is None:
        print(f"Plugin '{args.plugin_name}' not found.", file=sys.stderr)
        sys.exit(1)
    for label, value in (
        ("Name", info.name),
        ("Version", info.version),
        ("Description", info.description or "-"),
        ("Enabled", "yes" if info.enabled else "no"),
        ("Hooks", ", ".join(info.hooks) or "none"),
    ):
        print(f"{label + ':':<13}{value}")


def cmd_plugins(args, config: Config):
    """Manage plugins: list, enable, disable, info."""
    from . import plugins

    manager = plugins.plugin_manager
    action = args.plugins_action
    if action == "list":
        _plugins_list(args, config, manager)
    elif action in ("enable", "disable"):
        _plugins_set_enabled(args, config, enabled=(action == "enable"))
    elif action == "info":
        _plugins_info(args, config, manager)
    else:
        print("Usage: location-extract plugins {list,enable,disable,info}", file=sys.stderr)
        sys.exit(1)


# ---------------------------------------------------------------
# Main
# ---------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="location-extract",
        description="Extract GPS tracks from a location history export",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", "-c", default=None, help="Config file path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # extract
    p_extract = subparsers.add_parser("extract", help="Extract a track file from an export")
    p_extract.add_argument("input", help="Input file (zip bundle or JSON)")
    p_extract.add_argument("-s", "--start", required=True,
                           help="Start date in YYYY-MM-DD format")
    p_extract.add_argument("-e", "--end",
                           help="End date in YYYY-MM-DD format (default: start date)")
    p_extract.add_argument("-a", "--accuracy",
                           help="Keep only locations with accuracy up to this many meters "
                                "(default: 40)")
    p_extract.add_argument("-t", "--track-digits", type=int,
                           help="New track if coordinates have fewer digits in common "
                                "(default: 1)")
    p_extract.add_argument("-g", "--segment-digits", type=int,
                           help="New segment if coordinates have fewer digits in common "
                                "(default: 2)")
    p_extract.add_argument("-f", "--format", dest="output_format",
                           help="Output format: gpx, kml, tcx, csv, nmea (default: gpx)")
    p_extract.add_argument("-o", "--output",
                           help="Output file (default: history_<start>_<end>.<format>)")

    # formats
    subparsers.add_parser("formats", help="List output formats")

    # config
    p_config = subparsers.add_parser("config", help="Show/create config")
    p_config.add_argument("--create", action="store_true",
                          help="Create default config file")
    p_config.add_argument("--path", help="Config file path")

    # plugins
    p_plugins = subparsers.add_parser("plugins", help="Manage plugins")
    p_plugins_sub = p_plugins.add_subparsers(dest="plugins_action")
    p_plugins_sub.add_parser("list", help="List all registered plugins")
    p_plugins_enable = p_plugins_sub.add_parser("enable", help="Enable a plugin")
    p_plugins_enable.add_argument("plugin_name", help="Plugin name to enable")
    p_plugins_disable = p_plugins_sub.add_parser("disable", help="Disable a plugin")
    p_plugins_disable.add_argument("plugin_name", help="Plugin name to disable")
    p_plugins_info = p_plugins_sub.add_parser("info", help="Show plugin details")
    p_plugins_info.add_argument("plugin_name", help="Plugin name")

    return parser


COMMANDS = {
    "extract": cmd_extract,
    "formats": cmd_formats,
    "config": cmd_config,
    "plugins": cmd_plugins,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config.load(args.config)
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"
    else:
        level = config.log_level
    setup_logging(level, config.log_file)

    from .plugins import initialize_plugins
    initialize_plugins(disabled_plugins=set(config.plugins.disabled_plugins))

    try:
        COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
