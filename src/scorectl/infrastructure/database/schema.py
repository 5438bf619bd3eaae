"""SQLAlchemy Core table definitions for the scorectl database.

Every record table carries ``created_at`` / ``updated_at`` and a
``deleted_at`` soft-delete marker; rows are never hard-deleted. A row
with ``deleted_at`` set is invisible to reads and does not count toward
capacity or uniqueness of score pairs.
"""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()


def _timestamps() -> list[Column]:  # type: ignore[type-arg]
    return [
        Column("created_at", DateTime, nullable=False),
        Column("updated_at", DateTime, nullable=False),
        Column("deleted_at", DateTime),
    ]


supervisors = Table(
    "supervisors",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("employee_id", Text, nullable=False, unique=True),
    Column("hire_date", Date, nullable=False),
    Column("department", Text, nullable=False),
    Column("qualification", Text, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True, server_default="1"),
    Column("max_contestants", Integer, nullable=False, default=10, server_default="10"),
    Column("notes", Text),
    *_timestamps(),
)

contestants = Table(
    "contestants",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("registration_number", Text, nullable=False, unique=True),
    Column("birth_date", Date, nullable=False),
    Column("address", Text),
    Column("education_level", Text, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True, server_default="1"),
    Column("supervisor_id", Integer, ForeignKey("supervisors.id")),
    Column("notes", Text),
    *_timestamps(),
)

competitions = Table(
    "competitions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("max_score", REAL, nullable=False, default=100.0, server_default="100.0"),
    Column("passing_score", REAL, nullable=False, default=50.0, server_default="50.0"),
    Column("max_contestants", Integer, nullable=False, default=100, server_default="100"),
    Column("notes", Text),
    *_timestamps(),
)

scores = Table(
    "scores",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("competition_id", Integer, ForeignKey("competitions.id"), nullable=False),
    Column("contestant_id", Integer, ForeignKey("contestants.id"), nullable=False),
    Column("supervisor_id", Integer, ForeignKey("supervisors.id"), nullable=False),
    Column("score_value", REAL, nullable=False),
    Column("entry_date", DateTime, nullable=False),
    Column("notes", Text),
    *_timestamps(),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", Text, nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("role", Text, nullable=False, default="viewer", server_default="viewer"),
    Column("full_name", Text, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True, server_default="1"),
    Column("last_login", DateTime),
    *_timestamps(),
)

id_counters = Table(
    "id_counters",
    metadata,
    Column("kind", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=1, server_default="1"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_contestants_supervisor", contestants.c.supervisor_id)
Index("ix_scores_competition", scores.c.competition_id)
Index("ix_scores_supervisor", scores.c.supervisor_id)
Index("ix_competitions_dates", competitions.c.start_date, competitions.c.end_date)

# One live score per contestant per competition; soft-deleted rows are exempt.
Index(
    "uq_scores_live_pair",
    scores.c.contestant_id,
    scores.c.competition_id,
    unique=True,
    sqlite_where=scores.c.deleted_at.is_(None),
    postgresql_where=scores.c.deleted_at.is_(None),
)

SEQUENCE_KINDS = ("supervisor", "contestant")
