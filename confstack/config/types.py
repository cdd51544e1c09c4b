"""Configuration type definitions.

Defines the record stored in the registries and the result of resolving
which configuration file to read.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OverrideReason(Enum):
    """Why a particular configuration file was chosen."""

    OVERRIDE_APPLIED = "override_applied"
    CANONICAL_USED = "canonical_used"


@dataclass(frozen=True)
class ConfigRecord:
    """
    One configuration entry.

    Attributes:
        name: Lookup key in every registry
        value: Opaque string value, never coerced
        category: Grouping label; empty for file-defined records
        id: Store identifier; None for file-defined records
    """

    name: str
    value: str
    category: str = ""
    id: int | None = None


EMPTY_RECORD = ConfigRecord(name="", value="", category="")


@dataclass(frozen=True)
class ResolvedConfigFile:
    """The configuration file chosen by the resolver."""

    path: str
    canonical_path: str
    reason: OverrideReason

    @property
    def overridden(self) -> bool:
        return self.reason is OverrideReason.OVERRIDE_APPLIED

    def candidates(self) -> list[str]:
        """Paths to try in order: the chosen one, then the canonical path."""
        if self.path == self.canonical_path:
            return [self.path]
        return [self.path, self.canonical_path]
