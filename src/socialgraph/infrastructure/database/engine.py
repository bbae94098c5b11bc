"""Database engine setup for SQLite with WAL mode.

SQLite is the default persistence layer: WAL mode for concurrent reads,
foreign keys for referential backstops, ACID transactions for the
check-then-write sequences the services run.

pysqlite normally defers ``BEGIN`` until the first DML statement, which
would leave a run of SELECTs outside any transaction. The engine turns
that off and emits ``BEGIN`` itself whenever SQLAlchemy starts a
transaction, so one ``engine.begin()`` block is one snapshot.

A connection carrying the ``sqlite_begin`` execution option opens with
that mode instead (``"IMMEDIATE"`` for writers). Writers then take the
write lock before their first read and queue on ``busy_timeout``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from socialgraph.infrastructure.database.schema import metadata

BEGIN_MODE_OPTION = "sqlite_begin"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode, foreign keys, and explicit BEGIN."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn: Connection) -> None:
        mode = conn.get_execution_options().get(BEGIN_MODE_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine


def init_database(db_path: Path) -> Engine:
    """Initialize the social graph database at *db_path*.

    Creates the parent directory and every table from
    :data:`schema.metadata`. Idempotent: safe to call on an existing
    database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
