"""
Configuration store backends.

Every source returns the full set of configuration rows ordered by ascending
identifier. Failures are reported as ``StoreUnavailableError``; whether that
is fatal is decided by ``load_store_rows``.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from .errors import StoreUnavailableError
from .types import ConfigRecord

if TYPE_CHECKING:
    from pocketbase import PocketBase

logger = logging.getLogger(__name__)

VALID_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConfigSource(Protocol):
    """Anything that can fetch all configuration rows ordered by id."""

    def fetch_all_config(self) -> list[ConfigRecord]: ...


class SqliteConfigSource:
    """Reads configuration rows from a relational ``Config`` table."""

    def __init__(self, db_path: str, table: str = "Config"):
        if not VALID_TABLE_NAME_PATTERN.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self.db_path = db_path
        self.table = table

    @property
    def query(self) -> str:
        return f"SELECT Id, Name, Value, Category FROM {self.table} ORDER BY Id ASC"

    @property
    def uri(self) -> str:
        # mode=ro keeps a missing database from being created on the fly
        return Path(self.db_path).resolve().as_uri() + "?mode=ro"

    def fetch_all_config(self) -> list[ConfigRecord]:
        try:
            conn = sqlite3.connect(self.uri, uri=True)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open config database {self.db_path}: {e}") from e

        try:
            rows = conn.execute(self.query).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Config query failed on {self.db_path}: {e}") from e
        finally:
            conn.close()

        records = []
        for row_id, name, value, category in rows:
            if name is None:
                logger.warning(f"Skipping config row {row_id} in {self.table}: no name")
                continue
            records.append(
                ConfigRecord(
                    name=str(name),
                    value="" if value is None else str(value),
                    category=str(category or ""),
                    id=row_id,
                )
            )
        return records


class PocketBaseConfigSource:
    """
    Reads configuration rows from a PocketBase collection.

    Records are expected to carry ``config_id``, ``name``, ``value`` and
    ``category`` fields; ``config_id`` provides the ordering.
    """

    def __init__(self, pb_client: PocketBase, collection: str = "config"):
        self._pb = pb_client
        self.collection = collection

    @classmethod
    def connect(
        cls, url: str, admin_email: str, admin_password: str, collection: str = "config"
    ) -> PocketBaseConfigSource:
        """Create and authenticate a PocketBase client."""
        from pocketbase import PocketBase

        pb = PocketBase(url)
        try:
            pb.collection("_superusers").auth_with_password(admin_email, admin_password)
        except Exception as e:
            # Log but don't fail yet - the first fetch reports the real problem
            logger.warning(f"Failed to authenticate with PocketBase: {e}")
        return cls(pb, collection=collection)

    def fetch_all_config(self) -> list[ConfigRecord]:
        try:
            records = self._pb.collection(self.collection).get_full_list(query_params={"sort": "+config_id"})
        except Exception as e:
            raise StoreUnavailableError(f"Failed to load config from PocketBase: {e}") from e

        result = []
        for record in records:
            try:
                config_record = self._to_record(record)
            except (AttributeError, TypeError, ValueError) as e:
                raise StoreUnavailableError(
                    f"Malformed record {getattr(record, 'id', '?')} in PocketBase collection {self.collection}: {e}"
                ) from e
            if config_record is not None:
                result.append(config_record)
        return result

    @staticmethod
    def _to_record(record: Any) -> ConfigRecord | None:
        """Map a PocketBase record; None for records without a name."""
        name = record.name
        if not name:
            logger.warning(f"Skipping PocketBase config record {getattr(record, 'id', '?')}: no name")
            return None

        raw_id = getattr(record, "config_id", None)
        value = getattr(record, "value", "")
        return ConfigRecord(
            name=str(name),
            value="" if value is None else str(value),
            category=str(getattr(record, "category", "") or ""),
            id=int(raw_id) if raw_id is not None else None,
        )


class StaticConfigSource:
    """In-memory rows, returned sorted by id."""

    def __init__(self, rows: Iterable[ConfigRecord] = ()):
        self.rows = list(rows)

    def fetch_all_config(self) -> list[ConfigRecord]:
        return sorted(self.rows, key=lambda r: r.id if r.id is not None else 0)


def load_store_rows(source: ConfigSource | None, strict: bool = False) -> list[ConfigRecord]:
    """
    Fetch all store rows, applying the store failure policy.

    Args:
        source: Store to query; None means no store is configured
        strict: Propagate StoreUnavailableError instead of continuing with no rows

    Returns:
        Rows ordered by ascending id (empty when the store is unavailable)
    """
    if source is None:
        return []

    try:
        return list(source.fetch_all_config())
    except StoreUnavailableError as e:
        if strict:
            raise
        logger.error(f"Config store unavailable, continuing with file configuration only: {e}")
        return []
