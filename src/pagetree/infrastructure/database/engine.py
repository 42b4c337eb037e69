"""Database engine setup for SQLite with WAL mode.

The DB is stored at ``{workspace_root}/.pagetree/pagetree.db``. WAL mode
lets the persistence queue write from worker threads while the editor
reads. SQLAlchemy Core (not ORM) is used: layouts are stored as whole
documents, so there is no object graph to map.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from pagetree.infrastructure.database.counters import PROJECT_PREFIX
from pagetree.infrastructure.database.schema import id_counters, metadata

STATE_DIR = ".pagetree"
DB_FILENAME = "pagetree.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled.

    Transactions open with ``BEGIN IMMEDIATE`` so a save holds the write lock
    from its first read. Concurrent saves from the persistence queue then
    see each other's committed rows before deciding what to write.
    """
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to the "begin" listener below
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(workspace_root: Path) -> Engine:
    """Initialize the database at ``{workspace_root}/.pagetree/pagetree.db``.

    Creates the state directory, all tables, and seeds the id counters.
    Idempotent — safe to call on an existing workspace.
    """
    state_dir = workspace_root / STATE_DIR
    state_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(state_dir / DB_FILENAME)
    metadata.create_all(engine)
    _seed_counters(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    with engine.begin() as conn:
        row = conn.execute(
            select(id_counters.c.type_prefix).where(id_counters.c.type_prefix == PROJECT_PREFIX)
        ).first()
        if row is None:
            conn.execute(insert(id_counters).values(type_prefix=PROJECT_PREFIX, next_value=1))
