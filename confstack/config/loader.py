"""
ConfigLoader - layered configuration loading.

Loads ``KEY = value`` definitions from the resolved config file, then rows
from the configuration store, and builds the flat and category registries.
Store rows override file definitions of the same name.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from .errors import ConfigError, SymbolRedefinitionError
from .parser import parse_lines
from .registry import ConfigRegistry, RegistryBuilder
from .resolver import open_config_file, resolve_config_file
from .sources import ConfigSource, PocketBaseConfigSource, SqliteConfigSource, load_store_rows
from .symbols import SymbolTable, constants
from .types import ConfigRecord, ResolvedConfigFile

if TYPE_CHECKING:
    from confstack.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/zm/zm.conf"


class ConfigLoader:
    """
    Layered configuration loader.

    Usage:
        loader = ConfigLoader("/etc/zm/zm.conf", source=SqliteConfigSource("zm.db"))
        loader.load()

        record, found = loader.get("ZM_PATH_WEB")
        system = loader.get_category("system")

        # Process-wide instance built from settings
        ConfigLoader.initialize()
        loader = ConfigLoader.get_instance()

        # Test substitution
        with ConfigLoader.use(mock_loader):
            pass
    """

    _instance: ConfigLoader | None = None
    _initialized: bool = False
    _class_lock = threading.Lock()

    def __init__(
        self,
        config_path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH,
        source: ConfigSource | None = None,
        symbols: SymbolTable | None = None,
        strict_store: bool = False,
        max_line_length: int | None = None,
        cwd: str | os.PathLike[str] | None = None,
        interactive: bool | None = None,
    ):
        """
        Initialize the config loader.

        Args:
            config_path: Installed config file location.
            source: Configuration store. None loads the file only.
            symbols: Symbol table to project into (defaults to the process-wide table).
            strict_store: Raise StoreUnavailableError instead of continuing without store rows.
            max_line_length: Emulate the legacy bounded line reader.
            cwd: Directory searched for an override file (defaults to the process cwd).
            interactive: Force the override warning channel (detected when None).
        """
        self.config_path = os.fspath(config_path)
        self.source = source
        self.symbols = symbols if symbols is not None else constants
        self.strict_store = strict_store
        self.max_line_length = max_line_length
        self.cwd = cwd
        self.interactive = interactive

        self._lock = threading.Lock()
        self._registry = ConfigRegistry()
        self._resolved: ResolvedConfigFile | None = None
        self._loaded_path: str | None = None
        self._define_symbols = True
        self._load_count = 0

    @classmethod
    def from_settings(cls, settings: Settings, symbols: SymbolTable | None = None) -> ConfigLoader:
        """Build a loader and its store source from application settings."""
        source: ConfigSource | None
        backend = settings.store_backend
        if backend == "sqlite":
            source = SqliteConfigSource(settings.sqlite_path, table=settings.config_table)
        elif backend == "pocketbase":
            source = PocketBaseConfigSource.connect(
                settings.pocketbase_url,
                settings.pocketbase_admin_email,
                settings.pocketbase_admin_password,
                collection=settings.pocketbase_collection,
            )
        else:
            source = None

        return cls(
            settings.config_path,
            source=source,
            symbols=symbols,
            strict_store=settings.strict_store,
            max_line_length=settings.max_line_length,
        )

    @classmethod
    def initialize(cls, settings: Settings | None = None, load: bool = True) -> ConfigLoader:
        """
        Initialize the process-wide ConfigLoader.

        The first call performs the first load; later calls return the
        existing instance.

        Args:
            settings: Settings to build from (defaults to get_settings()).
            load: Run the first load immediately.

        Returns:
            The initialized ConfigLoader instance

        Raises:
            ConfigFileUnavailableError: If no config file can be opened
        """
        with cls._class_lock:
            if cls._initialized and cls._instance is not None:
                logger.debug("ConfigLoader already initialized, returning existing instance")
                return cls._instance

            if settings is None:
                from confstack.settings import get_settings

                settings = get_settings()

            instance = cls.from_settings(settings)
            if load:
                instance.load(define_symbols=settings.define_symbols)

            cls._instance = instance
            cls._initialized = True
            logger.info("ConfigLoader initialized successfully")
            return instance

    @classmethod
    def get_instance(cls) -> ConfigLoader:
        """Get the process-wide instance, initializing it from settings if needed."""
        if not cls._initialized or cls._instance is None:
            logger.debug("ConfigLoader auto-initializing (no explicit initialize() call)")
            return cls.initialize()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton state. For testing only."""
        cls._instance = None
        cls._initialized = False

    @classmethod
    @contextmanager
    def use(cls, loader: ConfigLoader) -> Iterator[None]:
        """
        Temporarily replace the singleton with a custom loader.

        Args:
            loader: The loader to use temporarily.
        """
        original = cls._instance
        original_initialized = cls._initialized
        cls._instance = loader
        cls._initialized = True
        try:
            yield
        finally:
            cls._instance = original
            cls._initialized = original_initialized

    def load(self, define_symbols: bool = True) -> ConfigRegistry:
        """
        Rebuild both registries from the config file and the store.

        Args:
            define_symbols: Also publish every record as a process-wide symbol.

        Returns:
            The new registry snapshot

        Raises:
            ConfigFileUnavailableError: If no config file can be opened
            StoreUnavailableError: If the store fails and strict_store is set
        """
        with self._lock:
            resolved = resolve_config_file(self.config_path, cwd=self.cwd, interactive=self.interactive)
            builder = RegistryBuilder()

            with open_config_file(resolved) as (path, handle):
                for name, value in parse_lines(handle, max_line_length=self.max_line_length):
                    builder.add_file_value(name, value)
            file_count = len(builder.config)
            logger.debug(f"Parsed {file_count} definitions from {path}")

            rows = load_store_rows(self.source, strict=self.strict_store)
            builder.add_store_rows(rows)

            registry = builder.build()
            self._registry = registry
            self._resolved = resolved
            self._loaded_path = path
            self._define_symbols = define_symbols
            self._load_count += 1

            if define_symbols:
                self._project_symbols(registry)

            logger.info(
                f"Loaded {len(registry)} config values ({file_count} from {path}, {len(rows)} store rows, "
                f"{len(registry.category_names())} categories)"
            )
            return registry

    def reload(self) -> ConfigRegistry:
        """Load again with the symbol setting of the previous load."""
        return self.load(define_symbols=self._define_symbols)

    def _project_symbols(self, registry: ConfigRegistry) -> None:
        skipped = 0
        for record in registry:
            try:
                self.symbols.define(record.name, record.value)
            except SymbolRedefinitionError as e:
                skipped += 1
                logger.warning(f"{e}; registry value stays authoritative")
        if skipped:
            logger.warning(f"Skipped {skipped} conflicting symbol definitions")

    @property
    def registry(self) -> ConfigRegistry:
        """Current registry snapshot (empty before the first load)."""
        return self._registry

    @property
    def resolved_file(self) -> ResolvedConfigFile | None:
        return self._resolved

    @property
    def loaded_path(self) -> str | None:
        """Path actually read by the last load."""
        return self._loaded_path

    @property
    def loaded(self) -> bool:
        return self._load_count > 0

    def get(self, name: str) -> tuple[ConfigRecord, bool]:
        return self._registry.get(name)

    def get_category(self, category: str) -> dict[str, ConfigRecord]:
        return self._registry.get_category(category)

    def value(self, name: str, default: str | None = None) -> str | None:
        return self._registry.value(name, default)

    def health_check(self) -> dict[str, Any]:
        """
        Perform a health check on the configuration system.

        Returns:
            Dict with status, chosen file, store reachability and any issues
        """
        result: dict[str, Any] = {
            "status": "healthy",
            "loaded": self.loaded,
            "config_file": self._loaded_path,
            "override_applied": bool(self._resolved and self._resolved.overridden),
            "store_configured": self.source is not None,
            "store_connected": False,
            "records": len(self._registry),
            "categories": self._registry.category_names(),
            "issues": [],
        }

        if not self.loaded:
            result["status"] = "unhealthy"
            result["issues"].append("Configuration has not been loaded")

        if self.source is not None:
            try:
                self.source.fetch_all_config()
                result["store_connected"] = True
            except ConfigError as e:
                result["status"] = "degraded" if self.loaded else "unhealthy"
                result["issues"].append(f"Config store unavailable: {e}")

        return result
