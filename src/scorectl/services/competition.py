"""CompetitionService — competitions and their date-derived status.

Status is never written. Every payload computes it from today's date,
so a competition read immediately after a save always reports the
status that matches its dates.
"""

from __future__ import annotations

import logging
from typing import Any

from scorectl.domain.lifecycle import derive_competition_status
from scorectl.domain.types import CompetitionStatus
from scorectl.domain.validation import validate_competition
from scorectl.infrastructure.database.schema import competitions, scores
from scorectl.services._helpers import (
    failure,
    field_failure,
    merge_changes,
    not_found,
    page_payload,
    page_window,
    validation_failure,
)
from scorectl.services.base import BaseService
from scorectl.services.contracts import CompetitionRecord, ListResultData, dump_validated
from scorectl.services.result import ErrorCode, ServiceResult
from scorectl.services.stats import competition_stats_for
from scorectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_EDITABLE = frozenset(
    {
        "title",
        "description",
        "start_date",
        "end_date",
        "max_score",
        "passing_score",
        "max_contestants",
        "notes",
    }
)


class CompetitionService(BaseService):
    """Competition records."""

    @traced
    def create_competition(self, fields: dict[str, Any]) -> ServiceResult:
        """Create a competition; omitted score limits fall back to configured defaults."""
        op = "create_competition"
        defaults = self._settings.defaults
        data: dict[str, Any] = {
            "max_score": defaults.max_score,
            "passing_score": defaults.passing_score,
            "max_contestants": defaults.competition_max_contestants,
        }
        data.update({k: v for k, v in fields.items() if v is not None})

        with trace_span("validate"):
            vr = validate_competition(data)
            if not vr.valid:
                return validation_failure(op, vr)

        with self._store.transaction() as txn:
            competition_id = txn.insert_row(competitions, {k: vr.values[k] for k in _EDITABLE})

        logger.info("created competition %s", competition_id)
        return self._respond(op, competition_id, [])

    @traced
    def update_competition(self, competition_id: int, changes: dict[str, Any]) -> ServiceResult:
        """Apply *changes* and revalidate the whole record. No status blocks edits."""
        op = "update_competition"
        warnings: list[str] = []

        with self._store.transaction() as txn:
            current = txn.fetch_live(competitions, competition_id)
            if current is None:
                return not_found(op, "competition", competition_id)

            merged = merge_changes(current, changes, editable=_EDITABLE, warnings=warnings)
            vr = validate_competition(merged)
            if not vr.valid:
                return validation_failure(op, vr)
            txn.update_row(competitions, competition_id, {k: vr.values[k] for k in _EDITABLE})

        return self._respond(op, competition_id, warnings)

    @traced
    def delete_competition(self, competition_id: int) -> ServiceResult:
        """Soft-delete a competition that has no live scores."""
        op = "delete_competition"
        with self._store.transaction() as txn:
            if txn.fetch_live(competitions, competition_id) is None:
                return not_found(op, "competition", competition_id)

            recorded = txn.count_live(scores, scores.c.competition_id == competition_id)
            if recorded:
                return failure(
                    op,
                    ErrorCode.STATE_CONFLICT,
                    f"Cannot delete competition with {recorded} recorded scores",
                    scores_count=recorded,
                )
            txn.soft_delete(competitions, competition_id)

        logger.info("deleted competition %s", competition_id)
        return ServiceResult(ok=True, op=op, data={"id": competition_id, "deleted": True})

    @traced
    def get_competition(self, competition_id: int) -> ServiceResult:
        op = "get_competition"
        row = self._records.get_competition(competition_id)
        if row is None:
            return not_found(op, "competition", competition_id)
        return ServiceResult(ok=True, op=op, data=self._present(row))

    @traced
    def list_competitions(
        self,
        *,
        search: str | None = None,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        """Page through competitions, optionally filtered by derived status."""
        op = "list_competitions"
        if status is not None and status not in set(CompetitionStatus):
            return field_failure(op, "status", f"Unknown competition status: {status!r}")

        page, limit = page_window(page, limit, self._settings.listing.page_size)
        rows, total = self._records.list_competition_rows(
            today=self._store.today(),
            search=search,
            status=status,
            page=page,
            limit=limit,
        )
        items = [self._present(row) for row in rows]
        data = page_payload(items, total=total, page=page, limit=limit)
        return ServiceResult(ok=True, op=op, data=dump_validated(ListResultData, data))

    def _present(self, row: dict[str, Any]) -> dict[str, Any]:
        status = derive_competition_status(row["start_date"], row["end_date"], self._store.today())
        stats = competition_stats_for(self._records, row)
        return dump_validated(
            CompetitionRecord, {**row, "status": status, "statistics": stats.to_dict()}
        )

    def _respond(self, op: str, competition_id: int, warnings: list[str]) -> ServiceResult:
        row = self._records.get_competition(competition_id)
        if row is None:
            return not_found(op, "competition", competition_id)
        return ServiceResult(ok=True, op=op, data=self._present(row), warnings=warnings)
