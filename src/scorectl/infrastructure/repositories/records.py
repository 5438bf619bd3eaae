"""Read-oriented repository for list, search, statistics and export views.

Every query here excludes soft-deleted rows. Methods open their own
short-lived connection; writes never go through this class.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Engine

from scorectl.infrastructure.database.schema import (
    competitions,
    contestants,
    scores,
    supervisors,
    users,
)

_STATUS_FILTERS = {
    "upcoming": lambda today: [competitions.c.start_date > today],
    "ongoing": lambda today: [
        competitions.c.start_date <= today,
        competitions.c.end_date >= today,
    ],
    "ended": lambda today: [competitions.c.end_date < today],
}


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"


def _score_rows_stmt() -> Select[Any]:
    """Live scores joined with the names their views display."""
    return (
        select(
            scores,
            competitions.c.title.label("competition_title"),
            competitions.c.passing_score,
            competitions.c.max_score,
            contestants.c.name.label("contestant_name"),
            supervisors.c.name.label("supervisor_name"),
        )
        .join(competitions, competitions.c.id == scores.c.competition_id)
        .join(contestants, contestants.c.id == scores.c.contestant_id)
        .join(supervisors, supervisors.c.id == scores.c.supervisor_id)
        .where(scores.c.deleted_at.is_(None))
    )


class RecordRepository:
    """Encapsulates SQL for read-side record operations."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    def _paged(
        self,
        stmt: Select[Any],
        *,
        page: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """Run *stmt* for one page and return ``(rows, total)``."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        offset = (page - 1) * limit
        with self._engine.connect() as conn:
            total = int(conn.execute(count_stmt).scalar_one())
            rows = conn.execute(stmt.limit(limit).offset(offset)).mappings().all()
        return [dict(row) for row in rows], total

    def _all(self, stmt: Select[Any]) -> list[dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def _first(self, stmt: Select[Any]) -> dict[str, Any] | None:
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    # ------------------------------------------------------------------
    # Supervisors
    # ------------------------------------------------------------------

    def get_supervisor(self, supervisor_id: int) -> dict[str, Any] | None:
        return self._first(
            select(supervisors).where(
                supervisors.c.id == supervisor_id, supervisors.c.deleted_at.is_(None)
            )
        )

    def find_supervisor_by_name(self, name: str) -> dict[str, Any] | None:
        """First live supervisor whose name matches exactly (case-insensitive)."""
        return self._first(
            select(supervisors)
            .where(
                func.lower(supervisors.c.name) == name.strip().lower(),
                supervisors.c.deleted_at.is_(None),
            )
            .order_by(supervisors.c.id)
        )

    def list_supervisor_rows(
        self,
        *,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        stmt = select(supervisors).where(supervisors.c.deleted_at.is_(None))
        if search:
            stmt = stmt.where(func.lower(supervisors.c.name).like(_like(search), escape="\\"))
        stmt = stmt.order_by(supervisors.c.name, supervisors.c.id)
        return self._paged(stmt, page=page, limit=limit)

    def all_supervisor_rows(self) -> list[dict[str, Any]]:
        return self._all(
            select(supervisors)
            .where(supervisors.c.deleted_at.is_(None))
            .order_by(supervisors.c.name, supervisors.c.id)
        )

    def count_supervisor_contestants(self, supervisor_id: int) -> int:
        stmt = select(func.count(contestants.c.id)).where(
            contestants.c.supervisor_id == supervisor_id,
            contestants.c.deleted_at.is_(None),
        )
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one())

    def supervisor_score_values(self, supervisor_id: int) -> list[float]:
        """Score values of the supervisor's current contestants."""
        stmt = (
            select(scores.c.score_value)
            .join(contestants, contestants.c.id == scores.c.contestant_id)
            .where(
                contestants.c.supervisor_id == supervisor_id,
                contestants.c.deleted_at.is_(None),
                scores.c.deleted_at.is_(None),
            )
        )
        with self._engine.connect() as conn:
            return [float(v) for v in conn.execute(stmt).scalars()]

    # ------------------------------------------------------------------
    # Contestants
    # ------------------------------------------------------------------

    def get_contestant(self, contestant_id: int) -> dict[str, Any] | None:
        stmt = (
            select(contestants, supervisors.c.name.label("supervisor_name"))
            .outerjoin(
                supervisors,
                (supervisors.c.id == contestants.c.supervisor_id)
                & supervisors.c.deleted_at.is_(None),
            )
            .where(contestants.c.id == contestant_id, contestants.c.deleted_at.is_(None))
        )
        return self._first(stmt)

    def find_contestant_by_name(self, name: str) -> dict[str, Any] | None:
        return self._first(
            select(contestants)
            .where(
                func.lower(contestants.c.name) == name.strip().lower(),
                contestants.c.deleted_at.is_(None),
            )
            .order_by(contestants.c.id)
        )

    def _contestant_stmt(
        self,
        *,
        search: str | None,
        supervisor_id: int | None,
    ) -> Select[Any]:
        stmt = (
            select(contestants, supervisors.c.name.label("supervisor_name"))
            .outerjoin(
                supervisors,
                (supervisors.c.id == contestants.c.supervisor_id)
                & supervisors.c.deleted_at.is_(None),
            )
            .where(contestants.c.deleted_at.is_(None))
        )
        if search:
            stmt = stmt.where(func.lower(contestants.c.name).like(_like(search), escape="\\"))
        if supervisor_id is not None:
            stmt = stmt.where(contestants.c.supervisor_id == supervisor_id)
        return stmt.order_by(contestants.c.name, contestants.c.id)

    def list_contestant_rows(
        self,
        *,
        search: str | None = None,
        supervisor_id: int | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        stmt = self._contestant_stmt(search=search, supervisor_id=supervisor_id)
        return self._paged(stmt, page=page, limit=limit)

    def search_contestant_rows(
        self,
        term: str,
        *,
        supervisor_id: int | None = None,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        stmt = self._contestant_stmt(search=term, supervisor_id=supervisor_id)
        return self._all(stmt.limit(limit))

    def contestant_export_rows(self, ids: list[int] | None = None) -> list[dict[str, Any]]:
        stmt = self._contestant_stmt(search=None, supervisor_id=None)
        if ids is not None:
            stmt = stmt.where(contestants.c.id.in_(ids))
        return self._all(stmt)

    def contestant_score_values(self, contestant_id: int) -> list[float]:
        stmt = select(scores.c.score_value).where(
            scores.c.contestant_id == contestant_id,
            scores.c.deleted_at.is_(None),
        )
        with self._engine.connect() as conn:
            return [float(v) for v in conn.execute(stmt).scalars()]

    def latest_contestant_score(self, contestant_id: int) -> dict[str, Any] | None:
        """Most recently created live score for a contestant."""
        stmt = (
            _score_rows_stmt()
            .where(scores.c.contestant_id == contestant_id)
            .order_by(scores.c.created_at.desc(), scores.c.id.desc())
            .limit(1)
        )
        return self._first(stmt)

    # ------------------------------------------------------------------
    # Competitions
    # ------------------------------------------------------------------

    def get_competition(self, competition_id: int) -> dict[str, Any] | None:
        return self._first(
            select(competitions).where(
                competitions.c.id == competition_id, competitions.c.deleted_at.is_(None)
            )
        )

    def find_competition_by_title(self, title: str) -> dict[str, Any] | None:
        return self._first(
            select(competitions)
            .where(
                func.lower(competitions.c.title) == title.strip().lower(),
                competitions.c.deleted_at.is_(None),
            )
            .order_by(competitions.c.id)
        )

    def list_competition_rows(
        self,
        *,
        today: date,
        search: str | None = None,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        """Page through competitions, filtering on the date-derived status.

        Raises:
            ValueError: If *status* is not a known competition status.
        """
        stmt = select(competitions).where(competitions.c.deleted_at.is_(None))
        if search:
            stmt = stmt.where(func.lower(competitions.c.title).like(_like(search), escape="\\"))
        if status:
            if status not in _STATUS_FILTERS:
                msg = f"Unknown competition status: {status!r}"
                raise ValueError(msg)
            stmt = stmt.where(*_STATUS_FILTERS[status](today))
        stmt = stmt.order_by(competitions.c.start_date.desc(), competitions.c.id.desc())
        return self._paged(stmt, page=page, limit=limit)

    def competition_score_values(self, competition_id: int) -> list[float]:
        stmt = select(scores.c.score_value).where(
            scores.c.competition_id == competition_id,
            scores.c.deleted_at.is_(None),
        )
        with self._engine.connect() as conn:
            return [float(v) for v in conn.execute(stmt).scalars()]

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def get_score(self, score_id: int) -> dict[str, Any] | None:
        return self._first(_score_rows_stmt().where(scores.c.id == score_id))

    def _filtered_scores(
        self,
        *,
        competition_id: int | None,
        supervisor_id: int | None,
        contestant_id: int | None,
    ) -> Select[Any]:
        stmt = _score_rows_stmt()
        if competition_id is not None:
            stmt = stmt.where(scores.c.competition_id == competition_id)
        if supervisor_id is not None:
            stmt = stmt.where(scores.c.supervisor_id == supervisor_id)
        if contestant_id is not None:
            stmt = stmt.where(scores.c.contestant_id == contestant_id)
        return stmt

    def list_score_rows(
        self,
        *,
        competition_id: int | None = None,
        supervisor_id: int | None = None,
        contestant_id: int | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        stmt = self._filtered_scores(
            competition_id=competition_id,
            supervisor_id=supervisor_id,
            contestant_id=contestant_id,
        ).order_by(scores.c.entry_date.desc(), scores.c.id.desc())
        return self._paged(stmt, page=page, limit=limit)

    def score_export_rows(
        self,
        *,
        competition_id: int | None = None,
        supervisor_id: int | None = None,
    ) -> list[dict[str, Any]]:
        stmt = self._filtered_scores(
            competition_id=competition_id,
            supervisor_id=supervisor_id,
            contestant_id=None,
        ).order_by(scores.c.score_value.desc(), scores.c.id)
        return self._all(stmt)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_by_username(self, username: str) -> dict[str, Any] | None:
        return self._first(
            select(users).where(users.c.username == username, users.c.deleted_at.is_(None))
        )

    def list_user_rows(self) -> list[dict[str, Any]]:
        return self._all(
            select(users).where(users.c.deleted_at.is_(None)).order_by(users.c.username)
        )
