"""
Layered configuration for the application.

Values come from a flat ``KEY = value`` file (a non-empty same-named file in
the working directory overrides the installed one) and are then overridden
by rows from the configuration store.

Usage:
    from confstack.config import ConfigLoader, constant

    # Initialize at application startup
    ConfigLoader.initialize()

    loader = ConfigLoader.get_instance()
    record, found = loader.get("ZM_PATH_WEB")
    system = loader.get_category("system")

    # Legacy-style direct access
    max_events = int(constant("MAX_EVENTS"))
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    ConfigFileUnavailableError,
    StoreUnavailableError,
    SymbolRedefinitionError,
    UnknownSymbolError,
)
from .loader import DEFAULT_CONFIG_PATH, ConfigLoader
from .parser import DEFAULT_LEGACY_LINE_LENGTH, parse_line, parse_lines
from .registry import ConfigRegistry, RegistryBuilder
from .resolver import open_config_file, resolve_config_file
from .sources import (
    ConfigSource,
    PocketBaseConfigSource,
    SqliteConfigSource,
    StaticConfigSource,
    load_store_rows,
)
from .symbols import SymbolTable, constant, constants, define, defined
from .types import EMPTY_RECORD, ConfigRecord, OverrideReason, ResolvedConfigFile

__all__ = [
    # Main loader
    "ConfigLoader",
    "DEFAULT_CONFIG_PATH",
    # Error classes
    "ConfigError",
    "ConfigFileUnavailableError",
    "StoreUnavailableError",
    "SymbolRedefinitionError",
    "UnknownSymbolError",
    # File resolution and parsing
    "resolve_config_file",
    "open_config_file",
    "parse_line",
    "parse_lines",
    "DEFAULT_LEGACY_LINE_LENGTH",
    # Store
    "ConfigSource",
    "SqliteConfigSource",
    "PocketBaseConfigSource",
    "StaticConfigSource",
    "load_store_rows",
    # Registries and types
    "ConfigRegistry",
    "RegistryBuilder",
    "ConfigRecord",
    "EMPTY_RECORD",
    "OverrideReason",
    "ResolvedConfigFile",
    # Process-wide symbols
    "SymbolTable",
    "constants",
    "constant",
    "define",
    "defined",
]
