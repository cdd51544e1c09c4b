"""
Configuration registries.

A ``ConfigRegistry`` is an immutable snapshot built by a single load: a flat
name -> record map plus a category -> (name -> record) map. Loaders build a
fresh snapshot and swap it in whole, so readers never see a partial rebuild.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .types import EMPTY_RECORD, ConfigRecord


class RegistryBuilder:
    """Mutable accumulator used while a load is in progress."""

    def __init__(self) -> None:
        self.config: dict[str, ConfigRecord] = {}
        self.categories: dict[str, dict[str, ConfigRecord]] = {}

    def add_file_value(self, name: str, value: str) -> ConfigRecord:
        record = ConfigRecord(name=name, value=value, category="")
        self.config[name] = record
        return record

    def add_store_row(self, row: ConfigRecord) -> None:
        self.config[row.name] = row
        # dict preserves first-seen order of categories
        bucket = self.categories.setdefault(row.category, {})
        bucket[row.name] = row

    def add_store_rows(self, rows: Iterable[ConfigRecord]) -> None:
        for row in rows:
            self.add_store_row(row)

    def build(self) -> ConfigRegistry:
        return ConfigRegistry(self.config, self.categories)


class ConfigRegistry:
    """Read-only view over one load's flat and category registries."""

    def __init__(
        self,
        config: Mapping[str, ConfigRecord] | None = None,
        categories: Mapping[str, Mapping[str, ConfigRecord]] | None = None,
    ):
        self._config = dict(config or {})
        self._categories = {cat: dict(records) for cat, records in (categories or {}).items()}

    @property
    def config(self) -> Mapping[str, ConfigRecord]:
        """Flat registry: name -> active record."""
        return MappingProxyType(self._config)

    @property
    def categories(self) -> Mapping[str, Mapping[str, ConfigRecord]]:
        """Category registry in first-seen category order."""
        return MappingProxyType({cat: MappingProxyType(records) for cat, records in self._categories.items()})

    def get(self, name: str) -> tuple[ConfigRecord, bool]:
        """
        Flat lookup.

        Returns:
            (record, True) when found, otherwise (EMPTY_RECORD, False)
        """
        record = self._config.get(name)
        if record is None:
            return EMPTY_RECORD, False
        return record, True

    def get_category(self, category: str) -> dict[str, ConfigRecord]:
        """Records in a category keyed by name; empty for an unknown category."""
        return dict(self._categories.get(category, {}))

    def value(self, name: str, default: str | None = None) -> str | None:
        record = self._config.get(name)
        return record.value if record is not None else default

    def names(self) -> list[str]:
        return list(self._config)

    def category_names(self) -> list[str]:
        return list(self._categories)

    def __contains__(self, name: object) -> bool:
        return name in self._config

    def __iter__(self) -> Iterator[ConfigRecord]:
        return iter(list(self._config.values()))

    def __len__(self) -> int:
        return len(self._config)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigRegistry):
            return NotImplemented
        return (
            self._config == other._config
            and self._categories == other._categories
            and list(self._categories) == list(other._categories)
        )

    def __repr__(self) -> str:
        return f"ConfigRegistry(records={len(self._config)}, categories={list(self._categories)})"
