"""Tests for database engine setup."""

import sqlite3
from pathlib import Path

import pytest
from sqlalchemy import inspect, select, text
from sqlalchemy.engine import Engine

from pagetree.infrastructure.database.engine import DB_FILENAME, STATE_DIR, init_database
from pagetree.infrastructure.database.schema import id_counters


class TestInitDatabase:
    def test_creates_db_file(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        engine.dispose()
        assert (tmp_path / STATE_DIR / DB_FILENAME).is_file()

    def test_creates_tables(self, db_engine: Engine) -> None:
        tables = set(inspect(db_engine).get_table_names())
        assert {"projects", "components", "id_counters"} <= tables

    def test_wal_mode(self, db_engine: Engine) -> None:
        with db_engine.connect() as conn:
            mode = conn.execute(text("PRAGMA journal_mode")).scalar()
        assert mode == "wal"

    def test_foreign_keys_on(self, db_engine: Engine) -> None:
        with db_engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path).dispose()
        engine = init_database(tmp_path)
        with engine.connect() as conn:
            rows = conn.execute(select(id_counters)).fetchall()
        engine.dispose()
        assert len(rows) == 1

    def test_transactions_take_write_lock(self, tmp_path: Path) -> None:
        """A transaction holds the write lock before its first write."""
        engine = init_database(tmp_path)
        other = sqlite3.connect(tmp_path / STATE_DIR / DB_FILENAME, timeout=0, isolation_level=None)
        try:
            with engine.begin() as conn:
                conn.execute(select(id_counters)).fetchall()
                with pytest.raises(sqlite3.OperationalError, match="locked"):
                    other.execute("BEGIN IMMEDIATE")
        finally:
            other.close()
            engine.dispose()
