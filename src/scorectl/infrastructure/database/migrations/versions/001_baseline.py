"""Baseline schema — supervisors, contestants, competitions, scores, users.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-03-02

Databases are created from the schema module and stamped here without
running this script. Later revisions build on it.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def _timestamps() -> list[sa.Column]:  # type: ignore[type-arg]
    return [
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.Column("deleted_at", sa.DateTime),
    ]


def upgrade() -> None:
    op.create_table(
        "supervisors",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("employee_id", sa.Text, nullable=False, unique=True),
        sa.Column("hire_date", sa.Date, nullable=False),
        sa.Column("department", sa.Text, nullable=False),
        sa.Column("qualification", sa.Text, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("max_contestants", sa.Integer, nullable=False, server_default="10"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )

    op.create_table(
        "contestants",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("registration_number", sa.Text, nullable=False, unique=True),
        sa.Column("birth_date", sa.Date, nullable=False),
        sa.Column("address", sa.Text),
        sa.Column("education_level", sa.Text, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("supervisor_id", sa.Integer, sa.ForeignKey("supervisors.id")),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_contestants_supervisor", "contestants", ["supervisor_id"])

    op.create_table(
        "competitions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("max_score", sa.REAL, nullable=False, server_default="100.0"),
        sa.Column("passing_score", sa.REAL, nullable=False, server_default="50.0"),
        sa.Column("max_contestants", sa.Integer, nullable=False, server_default="100"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_competitions_dates", "competitions", ["start_date", "end_date"])

    op.create_table(
        "scores",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "competition_id", sa.Integer, sa.ForeignKey("competitions.id"), nullable=False
        ),
        sa.Column("contestant_id", sa.Integer, sa.ForeignKey("contestants.id"), nullable=False),
        sa.Column("supervisor_id", sa.Integer, sa.ForeignKey("supervisors.id"), nullable=False),
        sa.Column("score_value", sa.REAL, nullable=False),
        sa.Column("entry_date", sa.DateTime, nullable=False),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_scores_competition", "scores", ["competition_id"])
    op.create_index("ix_scores_supervisor", "scores", ["supervisor_id"])
    op.create_index(
        "uq_scores_live_pair",
        "scores",
        ["contestant_id", "competition_id"],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL"),
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.Text, nullable=False, unique=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("role", sa.Text, nullable=False, server_default="viewer"),
        sa.Column("full_name", sa.Text, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("last_login", sa.DateTime),
        *_timestamps(),
    )

    op.create_table(
        "id_counters",
        sa.Column("kind", sa.Text, primary_key=True),
        sa.Column("next_value", sa.Integer, nullable=False, server_default="1"),
    )


def downgrade() -> None:
    op.drop_table("id_counters")
    op.drop_table("users")
    op.drop_index("uq_scores_live_pair", table_name="scores")
    op.drop_index("ix_scores_supervisor", table_name="scores")
    op.drop_index("ix_scores_competition", table_name="scores")
    op.drop_table("scores")
    op.drop_index("ix_competitions_dates", table_name="competitions")
    op.drop_table("competitions")
    op.drop_index("ix_contestants_supervisor", table_name="contestants")
    op.drop_table("contestants")
    op.drop_table("supervisors")
