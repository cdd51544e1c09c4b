#!/usr/bin/env python3
"""
Show the configuration the application would load.

Runs one load (file, then store) and prints ``NAME = VALUE`` lines.

Examples:
    confstack                          # every value
    confstack ZM_PATH_WEB MAX_EVENTS   # selected values
    confstack --category system        # one category
    confstack --list-categories
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence

from confstack.config import (
    DEFAULT_LEGACY_LINE_LENGTH,
    ConfigFileUnavailableError,
    ConfigLoader,
    ConfigRecord,
    StoreUnavailableError,
)
from confstack.logging_config import configure_logging
from confstack.settings import get_settings

EXIT_MISSING_NAME = 1
EXIT_FILE_UNAVAILABLE = 2
EXIT_STORE_UNAVAILABLE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="confstack", description="Show resolved configuration values")
    parser.add_argument("names", nargs="*", help="Config names to show (default: all)")
    parser.add_argument("--config", help="Installed config file path (overrides CONFSTACK_CONFIG_PATH)")
    parser.add_argument("--category", help="Only show values in this store category")
    parser.add_argument("--list-categories", action="store_true", help="List store categories and exit")
    parser.add_argument("--no-store", action="store_true", help="Read the config file only")
    parser.add_argument("--strict-store", action="store_true", help="Fail if the config store is unavailable")
    parser.add_argument(
        "--legacy-line-length",
        action="store_true",
        help=f"Read lines in {DEFAULT_LEGACY_LINE_LENGTH}-byte chunks like the legacy loader",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def _print_records(records: Iterable[ConfigRecord]) -> None:
    for record in records:
        print(f"{record.name} = {record.value}")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    updates: dict[str, object] = {}
    if args.config:
        updates["config_path"] = args.config
    if args.no_store:
        updates["store_backend"] = "none"
    if args.strict_store:
        updates["strict_store"] = True
    if args.legacy_line_length:
        updates["max_line_length"] = DEFAULT_LEGACY_LINE_LENGTH
    settings = get_settings().model_copy(update=updates)

    configure_logging(source="confstack", level=settings.log_level, debug=args.debug)

    loader = ConfigLoader.from_settings(settings)
    try:
        registry = loader.load(define_symbols=False)
    except ConfigFileUnavailableError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FILE_UNAVAILABLE
    except StoreUnavailableError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_STORE_UNAVAILABLE

    if args.list_categories:
        for category in registry.category_names():
            print(category)
        return 0

    if args.category:
        _print_records(registry.get_category(args.category).values())
        return 0

    if not args.names:
        _print_records(registry)
        return 0

    status = 0
    for name in args.names:
        record, found = registry.get(name)
        if found:
            _print_records([record])
        else:
            print(f"{name}: not defined", file=sys.stderr)
            status = EXIT_MISSING_NAME
    return status


if __name__ == "__main__":
    sys.exit(main())
