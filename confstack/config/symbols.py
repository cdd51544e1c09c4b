"""
Process-wide configuration symbols.

Loaded configuration can be projected into a ``SymbolTable`` so legacy call
sites can read values by name without holding a registry::

    from confstack.config import constant, constants

    max_events = constant("MAX_EVENTS")
    max_events = constants.MAX_EVENTS
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

from .errors import SymbolRedefinitionError, UnknownSymbolError


class SymbolTable:
    """
    Named string constants with define-once semantics.

    Defining a name again with the same value is a no-op. A different value
    raises SymbolRedefinitionError unless ``allow_redefine`` is set.
    """

    def __init__(self, allow_redefine: bool = False):
        self.allow_redefine = allow_redefine
        self._symbols: dict[str, str] = {}
        self._lock = threading.Lock()

    def define(self, name: str, value: str) -> bool:
        """
        Define a symbol.

        Returns:
            True if the table changed, False for an identical redefinition

        Raises:
            SymbolRedefinitionError: If name holds a different value and
                redefinition is not allowed
        """
        with self._lock:
            existing = self._symbols.get(name)
            if existing == value:
                return False
            if existing is not None and not self.allow_redefine:
                raise SymbolRedefinitionError(name, existing, value)
            self._symbols[name] = value
            return True

    def defined(self, name: str) -> bool:
        return name in self._symbols

    def constant(self, name: str) -> str:
        try:
            return self._symbols[name]
        except KeyError:
            raise UnknownSymbolError(name) from None

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._symbols.get(name, default)

    def clear(self) -> None:
        """Forget every symbol. For testing only."""
        with self._lock:
            self._symbols.clear()

    def as_dict(self) -> dict[str, str]:
        return dict(self._symbols)

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._symbols[name]
        except KeyError:
            raise AttributeError(f"Undefined config symbol: '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._symbols))

    def __len__(self) -> int:
        return len(self._symbols)


# Process-scoped table used when no explicit table is injected
constants = SymbolTable()


def define(name: str, value: str) -> bool:
    return constants.define(name, value)


def defined(name: str) -> bool:
    return constants.defined(name)


def constant(name: str) -> str:
    return constants.constant(name)
