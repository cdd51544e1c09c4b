"""
Root test configuration and fixtures for confstack.

Provides sample config files, a seeded SQLite config table, mock PocketBase
clients and isolation of the process-wide loader and symbol table.

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import logging
import sqlite3
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import Mock

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from confstack.config import ConfigLoader, SymbolTable, constants  # noqa: E402
from confstack.settings import get_settings  # noqa: E402

SAMPLE_CONFIG = """\
# ZoneMinder configuration file
ZM_DB_HOST = localhost
ZM_DB_NAME=zm
ZM_PATH_WEB = /usr/share/zoneminder/www

MAX_EVENTS = 10
DATE_FMT = D jS M, g:ia
this line is not an assignment
"""

# (Id, Name, Value, Category)
SAMPLE_ROWS = [
    (1, "MAX_EVENTS", "20", "system"),
    (2, "ZM_LANG_DEFAULT", "en_gb", "system"),
    (3, "ZM_WEB_REFRESH_MAIN", "60", "web"),
    (4, "ZM_OPT_X10", "0", "x10"),
]


def create_config_db(path: Path, rows: list[tuple[int, str, str, str]] | None = None) -> Path:
    """Create a SQLite database with a populated Config table."""
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            "CREATE TABLE Config (Id INTEGER PRIMARY KEY, Name TEXT NOT NULL, Value TEXT, Category TEXT)"
        )
        # Insert out of order to prove the query sorts by Id
        conn.executemany(
            "INSERT INTO Config (Id, Name, Value, Category) VALUES (?, ?, ?, ?)",
            sorted(rows if rows is not None else SAMPLE_ROWS, reverse=True),
        )
        conn.commit()
    finally:
        conn.close()
    return path


def create_mock_pocketbase(records: list[Any] | None = None) -> Mock:
    """Create a mock PocketBase instance whose config collection returns records."""
    mock_pb = Mock()
    mock_collection = Mock()

    mock_collection.auth_with_password = Mock(return_value=True)
    mock_collection.get_full_list = Mock(return_value=records or [])

    mock_pb.collection = Mock(return_value=mock_collection)
    return mock_pb


def pb_record(config_id: int, name: str, value: str, category: str) -> SimpleNamespace:
    """Build an object shaped like a PocketBase config record."""
    return SimpleNamespace(id=f"pb{config_id:05d}", config_id=config_id, name=name, value=value, category=category)


@pytest.fixture
def mock_pocketbase():
    """Mock PocketBase client serving SAMPLE_ROWS from its config collection."""
    return create_mock_pocketbase([pb_record(*row) for row in SAMPLE_ROWS])


@pytest.fixture(autouse=True)
def isolate_process_state():
    """Reset the loader singleton, process-wide symbols and cached settings."""
    ConfigLoader.reset()
    constants.clear()
    get_settings.cache_clear()
    yield
    ConfigLoader.reset()
    constants.clear()
    get_settings.cache_clear()


@pytest.fixture
def work_dir(tmp_path, monkeypatch):
    """Empty working directory so no override file is picked up by accident."""
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    monkeypatch.delenv("REMOTE_ADDR", raising=False)
    return path


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Installed config file at <tmp>/etc/zm/zm.conf."""
    path = tmp_path / "etc" / "zm" / "zm.conf"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_CONFIG)
    return path


@pytest.fixture
def config_db(tmp_path) -> Path:
    """SQLite database seeded with SAMPLE_ROWS."""
    return create_config_db(tmp_path / "zm.db")


@pytest.fixture
def symbol_table() -> SymbolTable:
    """A private symbol table, independent of the process-wide one."""
    return SymbolTable()


@pytest.fixture
def make_config_db(tmp_path):
    """Factory creating a SQLite config database from (Id, Name, Value, Category) rows."""

    def _make(rows: list[tuple[int, str, str, str]], name: str = "custom.db") -> Path:
        return create_config_db(tmp_path / name, rows)

    return _make


@pytest.fixture
def make_pocketbase():
    """Factory creating a mock PocketBase client from (config_id, name, value, category) rows."""

    def _make(rows: list[tuple[int, str, str, str]]) -> Mock:
        return create_mock_pocketbase([pb_record(*row) for row in rows])

    return _make


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
