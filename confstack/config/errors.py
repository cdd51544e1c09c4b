"""Configuration error classes.

All config-related exceptions share the ``ConfigError`` base so callers can
catch the whole family in one place.
"""

from __future__ import annotations

from collections.abc import Sequence


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileUnavailableError(ConfigError):
    """Raised when neither the override nor the canonical config file can be read."""

    def __init__(self, attempted: Sequence[str], reason: str | None = None):
        self.attempted = list(attempted)
        message = f"Could not open config file (tried: {', '.join(self.attempted)})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StoreUnavailableError(ConfigError):
    """Raised when the configuration store cannot be queried."""

    pass


class SymbolRedefinitionError(ConfigError):
    """Raised when a process-wide symbol is redefined with a different value."""

    def __init__(self, name: str, existing: str, value: str):
        self.name = name
        self.existing = existing
        self.value = value
        super().__init__(f"Symbol '{name}' already defined as '{existing}', refusing '{value}'")


class UnknownSymbolError(ConfigError, KeyError):
    """Raised when an undefined process-wide symbol is requested."""

    def __str__(self) -> str:
        return f"Undefined config symbol: '{self.args[0]}'"
