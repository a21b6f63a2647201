"""scopeconf entry point.

Usage:
    scopeconf ui                        # Interactive editor at the root scope
    scopeconf ui net0                   # Start at scope net0
    scopeconf show                      # Print the tree with its values
    scopeconf get net0/ip               # Print one value
    scopeconf set net0/ip 10.0.0.5      # Set one value
    scopeconf set 175.3:hex 0a:0b       # Set an unregistered option
    scopeconf clear net0/ip             # Delete one value
    scopeconf scriptlet --run           # Run the boot scriptlet
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from .config import AppConfig, load_config
from .errors import ConfigError, ScopeConfError
from .logging_config import configure_logging

if TYPE_CHECKING:
    from .settings import Scope, SettingDescriptor, SettingsStore

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 3

UI_LOG_FILENAME = "scopeconf.log"
SCOPE_SEPARATOR = "/"


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="scopeconf",
        description="Browse and edit a hierarchical settings store.",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config directory path (default: config/).",
    )

    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Settings file (default: store_file from the config).",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Log file path.",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    ui = commands.add_parser("ui", help="Interactive editor (default).")
    ui.add_argument("scope", nargs="?", default="", help="Scope to start at.")

    show = commands.add_parser("show", help="Print scopes and their values.")
    show.add_argument("scope", nargs="?", default="", help="Scope to print.")

    get = commands.add_parser("get", help="Print a setting.")
    get.add_argument("name", help="[scope/]setting")

    set_ = commands.add_parser("set", help="Set a setting.")
    set_.add_argument("name", help="[scope/]setting")
    set_.add_argument("value", help="New value (empty to delete).")

    clear = commands.add_parser("clear", help="Delete a setting.")
    clear.add_argument("name", help="[scope/]setting")

    scriptlet = commands.add_parser("scriptlet", help="Print or run the boot scriptlet.")
    scriptlet.add_argument("--run", action="store_true", help="Run each line.")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "ui"
        args.scope = ""
    return args


def _resolve_name(store: "SettingsStore", name: str) -> tuple["Scope", "SettingDescriptor"]:
    """Split ``[scope/]setting`` and resolve both parts."""
    from .settings import resolve_setting

    path, _, setting = name.rpartition(SCOPE_SEPARATOR)
    return store.tree.find(path), resolve_setting(store.registry, setting)


def _show(store: "SettingsStore", path: str) -> int:
    tree = store.tree
    for scope in tree.walk(tree.find(path)):
        print(f"[{tree.full_name(scope) or '<root>'}]")
        for descriptor, value in store.items(scope):
            print(f"  {descriptor.name} = {value}")
    return EXIT_SUCCESS


def _get(store: "SettingsStore", name: str) -> int:
    from .settings import Lookup

    scope, descriptor = _resolve_name(store, name)
    value = store.fetch_effective(scope, descriptor, Lookup.INHERIT)
    if value is None:
        print(f"Error: {name} is not set", file=sys.stderr)
        return EXIT_ERROR
    print(value)
    return EXIT_SUCCESS


def _set(store: "SettingsStore", name: str, value: str) -> int:
    scope, descriptor = _resolve_name(store, name)
    if descriptor.readonly:
        print(f"Error: {descriptor.name} is read only", file=sys.stderr)
        return EXIT_ERROR
    reason = store.store(scope, descriptor, value)
    if reason:
        print(f"Error: Could not set {descriptor.name}: {reason}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_SUCCESS


def _clear(store: "SettingsStore", name: str) -> int:
    scope, descriptor = _resolve_name(store, name)
    if descriptor.readonly:
        print(f"Error: {descriptor.name} is read only", file=sys.stderr)
        return EXIT_ERROR
    reason = store.delete(scope, descriptor)
    if reason:
        print(f"Error: Could not clear {descriptor.name}: {reason}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_SUCCESS


def _scriptlet(store: "SettingsStore", run: bool) -> int:
    from .scriptlet import exec_scriptlet, find_scriptlet, scriptlet_lines

    if run:
        statuses = exec_scriptlet(store)
        return EXIT_SUCCESS if all(status == 0 for status in statuses) else EXIT_ERROR

    script = find_scriptlet(store)
    if script:
        for line in scriptlet_lines(script):
            print(line)
    return EXIT_SUCCESS


def _ui(store: "SettingsStore", path: str, config: AppConfig) -> int:
    from .tui import run_settings_ui

    run_settings_ui(store, store.tree.find(path), config)
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace, config: AppConfig) -> int:
    """Load the store and run one command.

    Args:
        args: Parsed command line arguments.
        config: Loaded application config.

    Returns:
        Exit code.
    """
    from .settings import YamlStorage, init_registry

    init_registry()
    store_file = args.store or config.store_file
    store = YamlStorage(store_file).load(auto_save=config.auto_save)

    match args.command:
        case "ui":
            exit_code = _ui(store, args.scope, config)
        case "show":
            exit_code = _show(store, args.scope)
        case "get":
            exit_code = _get(store, args.name)
        case "set":
            exit_code = _set(store, args.name, args.value)
        case "clear":
            exit_code = _clear(store, args.name)
        case "scriptlet":
            exit_code = _scriptlet(store, args.run)
        case _:
            raise ValueError(f"Unknown command: {args.command}")

    if args.command in ("ui", "set", "clear") and not config.auto_save:
        store.save()
    return exit_code


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, set up logging and run the command.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    level = "DEBUG" if args.debug else config.log_level
    log_file = args.log_file or config.log_file
    if args.command == "ui":
        # curses owns the terminal during a session
        if log_file is None:
            store_file = args.store or config.store_file
            log_file = store_file.parent / UI_LOG_FILENAME
        configure_logging(level, log_file, stderr=False)
    else:
        configure_logging(level, log_file)

    try:
        return run_command(args, config)
    except (ScopeConfError, OSError) as e:
        logger.debug(f"Command failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
