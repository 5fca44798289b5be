#!/usr/bin/env python3
import argparse
import sys
import os
import importlib
import logging
import pkgutil
import importlib.metadata as metadata
from benchparse.cli_plugins.base import SubcommandPlugin

PLUGIN_DIR = os.path.join(os.path.dirname(__file__), "cli_plugins")
LOG_LEVEL_ENV = "BENCHPARSE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_version():
    """Get the version from importlib.metadata or fallback to version.txt file."""
    try:
        return metadata.version("benchparse")
    except metadata.PackageNotFoundError:
        # Fallback for development
        version_file = os.path.join(os.path.dirname(__file__), "..", "version.txt")
        if os.path.exists(version_file):
            with open(version_file) as f:
                return f.read().strip()
    return "unknown"


def configure_logging(verbose=0):
    """Configure the root logger once for CLI runs.

    -v selects INFO and -vv DEBUG; otherwise the level comes from BENCHPARSE_LOG_LEVEL (default WARNING).
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").strip().upper()
        level = getattr(logging, level_name, None)
        if not isinstance(level, int):
            print(f"Warning: ignoring invalid {LOG_LEVEL_ENV}={level_name}", file=sys.stderr)
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    return level


def discover_plugins():
    """Discover and instantiate all CLI subcommand plugin classes from the cli_plugins directory.

    Only classes defined directly in a module (not imported) are considered to
    avoid duplicates from relative imports.

    Returns:
        list: A list of instantiated plugin objects, sorted by order then alphabetically by name.
    """
    plugins = []
    for _, name, ispkg in pkgutil.iter_modules([PLUGIN_DIR]):
        if not ispkg:
            try:
                mod = importlib.import_module(f"benchparse.cli_plugins.{name}")
                for attr in dir(mod):
                    obj = getattr(mod, attr)
                    if (
                        isinstance(obj, type)
                        and issubclass(obj, SubcommandPlugin)
                        and obj is not SubcommandPlugin
                        and obj.__module__ == mod.__name__
                    ):
                        plugins.append(obj())
            except Exception as e:
                print(f"Warning: Failed to load plugin {name}: {e}", file=sys.stderr)

    # Sort plugins by order first, then by name
    return sorted(plugins, key=lambda p: (p.get_order(), p.get_name()))


def build_arg_parser(plugins):
    """Build the main argument parser for the benchparse CLI.

    Epilog text (examples) from all plugins is concatenated into the main parser's epilog.

    Args:
        plugins (list): List of instantiated plugin objects.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    epilogs = [plugin.get_epilog() for plugin in plugins if plugin.get_epilog().strip()]
    epilog = "\n".join(epilogs) if epilogs else ""

    parser = argparse.ArgumentParser(
        prog="benchparse",
        description="Extract micro-benchmark results from cargo bench output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    parser.add_argument("--version", action="version", version=get_version())
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help=f"More log output (-vv for debug); see also {LOG_LEVEL_ENV}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    for plugin in plugins:
        plugin.get_parser(subparsers)
    return parser


def main(plugins=None):
    if plugins is None:
        plugins = discover_plugins()
    parser = build_arg_parser(plugins)
    args = parser.parse_args()
    configure_logging(getattr(args, "verbose", 0))

    # Dispatch to plugin
    if hasattr(args, "_plugin"):
        args._plugin.run(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
