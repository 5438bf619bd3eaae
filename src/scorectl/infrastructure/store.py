"""Store — repository pattern with serialized write transactions.

The Store is the single dependency injected into every service. It owns
the database engine and the clock. The :meth:`transaction` context
manager opens a ``BEGIN IMMEDIATE`` transaction, so every
read-check-write sequence inside it (capacity counts, duplicate checks,
sequence allocation, the insert itself) sees a stable database and
commits or rolls back as one unit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update

from scorectl.infrastructure.database.engine import database_path, init_database

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import ColumnElement, Connection, Table
    from sqlalchemy.engine import Engine

    from scorectl.config.settings import ScoreSettings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active write transaction with soft-delete aware row helpers.

    ``now`` is read once when the transaction opens so every timestamp
    written by one operation agrees.
    """

    conn: Connection
    now: datetime

    def fetch_live(self, table: Table, record_id: int) -> dict[str, Any] | None:
        """Fetch one non-deleted row by primary key."""
        row = (
            self.conn.execute(
                select(table).where(table.c.id == record_id, table.c.deleted_at.is_(None))
            )
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    def count_live(self, table: Table, *criteria: ColumnElement[bool]) -> int:
        """Count non-deleted rows matching *criteria*."""
        stmt = (
            select(func.count())
            .select_from(table)
            .where(table.c.deleted_at.is_(None), *criteria)
        )
        return int(self.conn.execute(stmt).scalar_one())

    def exists(self, table: Table, *criteria: ColumnElement[bool], live: bool = True) -> bool:
        """Whether any row matches *criteria* (optionally including soft-deleted ones)."""
        stmt = select(table.c.id).where(*criteria)
        if live:
            stmt = stmt.where(table.c.deleted_at.is_(None))
        return self.conn.execute(stmt.limit(1)).first() is not None

    def insert_row(self, table: Table, values: dict[str, Any]) -> int:
        """Insert a row stamped with created/updated timestamps. Returns its id."""
        result = self.conn.execute(
            insert(table).values(**values, created_at=self.now, updated_at=self.now)
        )
        return int(result.inserted_primary_key[0])

    def update_row(self, table: Table, record_id: int, values: dict[str, Any]) -> None:
        """Update one row and bump ``updated_at``."""
        self.conn.execute(
            update(table).where(table.c.id == record_id).values(**values, updated_at=self.now)
        )

    def soft_delete(self, table: Table, record_id: int) -> None:
        """Mark one row deleted. Rows are never physically removed."""
        self.conn.execute(
            update(table)
            .where(table.c.id == record_id)
            .values(deleted_at=self.now, updated_at=self.now)
        )


# ---------------------------------------------------------------------------
# Store — the repository
# ---------------------------------------------------------------------------


class Store:
    """Repository encapsulating database access and the current time.

    Constructed once at CLI startup from :class:`ScoreSettings`. Services
    receive the Store via their :class:`BaseService` constructor. Tests
    pass a fixed *clock* so time-derived rules are deterministic.
    """

    def __init__(self, settings: ScoreSettings, *, clock: Clock | None = None) -> None:
        self._settings = settings
        self._clock: Clock = clock or datetime.now
        self._engine: Engine = init_database(self.root, settings.store.db_filename)
        self._write_engine: Engine = self._engine.execution_options(sqlite_begin="IMMEDIATE")

    @property
    def root(self) -> Path:
        """The store root directory."""
        return self._settings.root

    @property
    def db_path(self) -> Path:
        return database_path(self.root, self._settings.store.db_filename)

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for read-side repositories)."""
        return self._engine

    @property
    def settings(self) -> ScoreSettings:
        """The resolved settings for this store."""
        return self._settings

    def now(self) -> datetime:
        """Current local time, as seen by this store's clock."""
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Serialized write transaction.

        Commits when the block exits normally and rolls back on any
        exception. Only one writer holds the database at a time.

        Usage::

            with store.transaction() as txn:
                if txn.count_live(scores, ...) >= limit:
                    ...
                txn.insert_row(scores, values)
        """
        with self._write_engine.begin() as conn:
            yield StoreTransaction(conn=conn, now=self.now())

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
