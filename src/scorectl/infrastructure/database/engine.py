"""Database engine setup for SQLite.

The DB is stored at ``{root}/.scorectl/scorectl.db``. SQLAlchemy Core
(not ORM) is used because scorectl is a short-lived CLI process.

pysqlite's own transaction handling is switched off so SQLAlchemy emits
``BEGIN`` itself. Connections carrying the ``sqlite_begin="IMMEDIATE"``
execution option take the database write lock when their transaction
starts, which serializes concurrent writers for the whole
read-check-write sequence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Connection, Engine

from scorectl.infrastructure.database.migrations import stamp_head
from scorectl.infrastructure.database.schema import SEQUENCE_KINDS, id_counters, metadata

STATE_DIR = ".scorectl"
DB_FILENAME = "scorectl.db"


def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _emit_begin(conn: Connection) -> None:
    mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
    conn.exec_driver_sql(f"BEGIN {mode}")


def install_sqlite_listeners(engine: Engine) -> None:
    """Attach the pragma and explicit-BEGIN listeners to *engine*."""
    event.listen(engine, "connect", _set_sqlite_pragma)
    event.listen(engine, "begin", _emit_begin)


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode, foreign keys, and explicit BEGIN."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    install_sqlite_listeners(engine)
    return engine


def database_path(root: Path, filename: str = DB_FILENAME) -> Path:
    return root / STATE_DIR / filename


def init_database(root: Path, filename: str = DB_FILENAME) -> Engine:
    """Initialize the database at ``{root}/.scorectl/<filename>``.

    Creates the state directory, all tables from :data:`schema.metadata`,
    and seeds ``id_counters`` for every sequence kind. A database file
    created here is stamped at the newest migration revision.

    Idempotent — safe to call on an existing store.
    """
    db_path = database_path(root, filename)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    fresh = not db_path.exists()

    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    _seed_counters(engine)
    if fresh:
        stamp_head(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    """Insert initial counter rows if they don't exist."""
    with engine.begin() as conn:
        for kind in SEQUENCE_KINDS:
            stmt = select(id_counters.c.kind).where(id_counters.c.kind == kind)
            row = conn.execute(stmt).first()
            if row is None:
                conn.execute(insert(id_counters).values(kind=kind, next_value=1))
