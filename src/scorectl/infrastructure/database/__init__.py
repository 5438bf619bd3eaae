"""SQLite database engine, schema, and sequence counters via SQLAlchemy Core."""

from scorectl.infrastructure.database.counters import next_sequential_value
from scorectl.infrastructure.database.engine import (
    create_db_engine,
    database_path,
    init_database,
)
from scorectl.infrastructure.database.schema import (
    competitions,
    contestants,
    id_counters,
    metadata,
    scores,
    supervisors,
    users,
)

__all__ = [
    "competitions",
    "contestants",
    "create_db_engine",
    "database_path",
    "id_counters",
    "init_database",
    "metadata",
    "next_sequential_value",
    "scores",
    "supervisors",
    "users",
]
