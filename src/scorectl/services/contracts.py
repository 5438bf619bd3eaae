"""Typed payload contracts for service boundaries.

These models validate operation payload shapes before they leave the
service layer, so key regressions (for example ``items`` vs ``rows``,
or a password hash leaking into output) fail fast in tests.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class CompetitionStatsData(BaseModel):
    total_contestants: int
    passed_count: int
    failed_count: int
    average_score: float
    success_rate: float


class SupervisorStatsData(BaseModel):
    contestants_count: int
    scores_count: int
    average_score: float
    available_slots: int


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class SupervisorRecord(BaseModel):
    """One supervisor as returned by create/get/list."""

    id: int
    name: str
    employee_id: str
    hire_date: date
    department: str
    qualification: str
    is_active: bool
    max_contestants: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    statistics: SupervisorStatsData | None = None


class ContestantRecord(BaseModel):
    """One contestant; ``supervisor_name`` is filled on reads."""

    id: int
    name: str
    registration_number: str
    birth_date: date
    address: str | None = None
    education_level: str
    is_active: bool
    supervisor_id: int | None = None
    supervisor_name: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class CompetitionRecord(BaseModel):
    """One competition with its date-derived status."""

    id: int
    title: str
    description: str | None = None
    start_date: date
    end_date: date
    max_score: float
    passing_score: float
    max_contestants: int
    status: Literal["upcoming", "ongoing", "ended"]
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    statistics: CompetitionStatsData | None = None


class ScoreRecord(BaseModel):
    """One score; display names and ``passed`` are derived on read."""

    id: int
    competition_id: int
    contestant_id: int
    supervisor_id: int
    score_value: float
    entry_date: datetime
    notes: str | None = None
    passed: bool
    competition_title: str | None = None
    contestant_name: str | None = None
    supervisor_name: str | None = None
    created_at: datetime
    updated_at: datetime


class UserRecord(BaseModel):
    """Account view. The password hash is never part of a payload."""

    id: int
    username: str
    role: Literal["viewer", "editor", "admin"]
    full_name: str
    is_active: bool
    last_login: datetime | None = None


# ---------------------------------------------------------------------------
# Operation payloads
# ---------------------------------------------------------------------------


class ListResultData(BaseModel):
    """Payload contract for every paged ``list_*`` operation."""

    count: int
    total: int
    page: int
    pages: int
    items: list[dict[str, Any]]


class SearchResultData(BaseModel):
    """Payload contract for ``ContestantService.search_contestants``."""

    query: str
    count: int
    items: list[dict[str, Any]]


class AverageResultData(BaseModel):
    contestant_id: int
    average_score: float
    score_count: int


class RankResultData(BaseModel):
    score_id: int
    competition_id: int
    rank: int
    out_of: int


class ImportResultData(BaseModel):
    """Payload contract for every ``import_*`` operation."""

    path: str
    success_count: int
    error_count: int
    errors: list[str] = Field(default_factory=list)


class ExportResultData(BaseModel):
    """Payload contract for every ``export_*`` operation."""

    path: str
    sheet: str
    row_count: int
