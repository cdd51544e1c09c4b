"""
Application settings using pydantic-settings for type-safe configuration.

Environment variables use the ``CONFSTACK_`` prefix and may also come from a
``.env`` file. Settings are loaded once and cached.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from confstack.config.loader import DEFAULT_CONFIG_PATH

STORE_BACKENDS = ("sqlite", "pocketbase", "none")


class Settings(BaseSettings):
    """
    Settings controlling where configuration is loaded from.

    All settings have defaults suitable for a standard install.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONFSTACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Config file ===
    config_path: str = Field(
        default=DEFAULT_CONFIG_PATH,
        description="Installed config file; a non-empty same-named file in the cwd overrides it",
    )
    max_line_length: int | None = Field(
        default=None,
        description="Emulate the legacy bounded line reader (e.g. 256); unset reads full lines",
    )

    # === Config store ===
    store_backend: str = Field(
        default="sqlite",
        description="Config store backend: 'sqlite', 'pocketbase' or 'none'",
    )
    strict_store: bool = Field(
        default=False,
        description="Fail the load when the config store is unavailable",
    )
    sqlite_path: str = Field(
        default="/var/lib/zm/zm.db",
        description="SQLite database holding the config table",
    )
    config_table: str = Field(
        default="Config",
        description="Name of the config table",
    )

    # === PocketBase Configuration ===
    pocketbase_url: str = Field(
        default="http://127.0.0.1:8090",
        description="PocketBase server URL",
    )
    pocketbase_admin_email: str = Field(
        default="admin@localhost",
        description="PocketBase admin email for API authentication",
    )
    pocketbase_admin_password: str = Field(
        default="",
        description="PocketBase admin password",
    )
    pocketbase_collection: str = Field(
        default="config",
        description="PocketBase collection holding config records",
    )

    # === Runtime ===
    define_symbols: bool = Field(
        default=True,
        description="Publish loaded values as process-wide symbols",
    )
    log_level: str | None = Field(
        default=None,
        description="Logging level; unset falls back to the LOG_LEVEL env var, then INFO",
    )

    @field_validator("store_backend", mode="after")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        """Validate and normalize store_backend."""
        v = v.lower()
        if v not in STORE_BACKENDS:
            raise ValueError(f"Invalid STORE_BACKEND: {v}. Must be one of {', '.join(STORE_BACKENDS)}")
        return v

    @field_validator("max_line_length", mode="before")
    @classmethod
    def parse_max_line_length(cls, v: str | int | None) -> int | None:
        """Treat an empty value as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v  # type: ignore[return-value]

    @field_validator("max_line_length", mode="after")
    @classmethod
    def validate_max_line_length(cls, v: int | None) -> int | None:
        if v is not None and v < 2:
            raise ValueError("MAX_LINE_LENGTH must be at least 2")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return Settings()
