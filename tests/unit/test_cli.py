"""Tests for the confstack command."""

from __future__ import annotations

import logging

import pytest

from confstack.cli import EXIT_FILE_UNAVAILABLE, EXIT_MISSING_NAME, EXIT_STORE_UNAVAILABLE, build_parser, main
from confstack.config import constants


@pytest.fixture
def cli_env(config_file, config_db, work_dir, monkeypatch):
    """Point settings at the sample config file and database."""
    monkeypatch.setenv("CONFSTACK_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("CONFSTACK_SQLITE_PATH", str(config_db))
    monkeypatch.setenv("CONFSTACK_STORE_BACKEND", "sqlite")
    return config_file


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.names == []
        assert args.category is None
        assert args.no_store is False

    def test_names_and_flags(self):
        args = build_parser().parse_args(["--no-store", "--legacy-line-length", "A", "B"])

        assert args.names == ["A", "B"]
        assert args.no_store is True
        assert args.legacy_line_length is True


class TestMain:
    def test_prints_all_values(self, cli_env, capsys):
        assert main([]) == 0

        out = capsys.readouterr().out.splitlines()
        assert "MAX_EVENTS = 20" in out
        assert "ZM_DB_HOST = localhost" in out
        assert len(out) == 8

    def test_selected_names(self, cli_env, capsys):
        assert main(["MAX_EVENTS", "ZM_DB_NAME"]) == 0

        assert capsys.readouterr().out.splitlines() == ["MAX_EVENTS = 20", "ZM_DB_NAME = zm"]

    def test_missing_name(self, cli_env, capsys):
        assert main(["MAX_EVENTS", "NoSuchName"]) == EXIT_MISSING_NAME

        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["MAX_EVENTS = 20"]
        assert "NoSuchName: not defined" in captured.err

    def test_category(self, cli_env, capsys):
        assert main(["--category", "system"]) == 0

        assert capsys.readouterr().out.splitlines() == ["MAX_EVENTS = 20", "ZM_LANG_DEFAULT = en_gb"]

    def test_list_categories(self, cli_env, capsys):
        assert main(["--list-categories"]) == 0

        assert capsys.readouterr().out.splitlines() == ["system", "web", "x10"]

    def test_no_store(self, cli_env, capsys):
        assert main(["--no-store", "MAX_EVENTS"]) == 0

        assert capsys.readouterr().out.splitlines() == ["MAX_EVENTS = 10"]

    def test_config_option(self, cli_env, tmp_path, capsys):
        other = tmp_path / "other.conf"
        other.write_text("ONLY = here\n")

        assert main(["--config", str(other), "--no-store"]) == 0

        assert capsys.readouterr().out.splitlines() == ["ONLY = here"]

    def test_missing_config_file(self, cli_env, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "missing.conf")]) == EXIT_FILE_UNAVAILABLE

        assert "Could not open config file" in capsys.readouterr().err

    def test_strict_store_failure(self, cli_env, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("CONFSTACK_SQLITE_PATH", str(tmp_path / "missing.db"))

        assert main(["--strict-store"]) == EXIT_STORE_UNAVAILABLE

        assert "ERROR:" in capsys.readouterr().err

    def test_does_not_touch_process_symbols(self, cli_env, capsys):
        main([])

        assert len(constants) == 0

    def test_log_level_env_var_used_when_unset(self, cli_env, monkeypatch):
        monkeypatch.delenv("CONFSTACK_LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        main([])

        assert logging.getLogger().level == logging.ERROR

    def test_prefixed_log_level_wins(self, cli_env, monkeypatch):
        monkeypatch.setenv("CONFSTACK_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        main([])

        assert logging.getLogger().level == logging.WARNING
