"""ScoreService — record, amend and read competition scores.

Recording pipeline: LOAD → VALIDATE → STATE → MATCH → DUPLICATE →
CAPACITY → PERSIST → RESPOND. Everything after LOAD runs in the same
serialized transaction as the insert, so two writers can neither record
the same contestant twice nor jointly overrun a competition's limit.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from scorectl.domain.aggregates import is_passing
from scorectl.domain.capacity import has_capacity, supervisor_matches
from scorectl.domain.lifecycle import derive_competition_status, is_ongoing
from scorectl.domain.validation import ValidationResult, validate_score
from scorectl.infrastructure.database.schema import competitions, contestants, scores, supervisors
from scorectl.services._helpers import (
    failure,
    field_failure,
    not_found,
    page_payload,
    page_window,
    validation_failure,
)
from scorectl.services.base import BaseService
from scorectl.services.contracts import ListResultData, ScoreRecord, dump_validated
from scorectl.services.result import ErrorCode, ServiceResult
from scorectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_WINDOW_FIELD = "entry_date"
_SCORE_COLUMNS = (
    "competition_id",
    "contestant_id",
    "supervisor_id",
    "score_value",
    "entry_date",
    "notes",
)


def score_payload(row: dict[str, Any]) -> dict[str, Any]:
    """Shape a joined score row, deriving ``passed`` from the competition threshold."""
    passed = is_passing(float(row["score_value"]), float(row["passing_score"]))
    return dump_validated(ScoreRecord, {**row, "passed": passed})


def _split_window_errors(vr: ValidationResult) -> tuple[ValidationResult, ValidationResult]:
    """Separate entry-window violations from every other field error."""
    window = [e for e in vr.errors if e.field == _WINDOW_FIELD]
    other = [e for e in vr.errors if e.field != _WINDOW_FIELD]
    return (
        ValidationResult(valid=not other, errors=other, values=vr.values),
        ValidationResult(valid=not window, errors=window, values=vr.values),
    )


class ScoreService(BaseService):
    """Scores: one per contestant per competition, graded by the assigned supervisor."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @traced
    def record_score(
        self,
        competition_id: int,
        contestant_id: int,
        supervisor_id: int,
        score_value: Any,
        notes: str | None = None,
        entry_date: datetime | str | None = None,
    ) -> ServiceResult:
        """Record a new score for an ongoing competition.

        ``entry_date`` defaults to now and must fall inside the
        competition's scoring window.
        """
        op = "record_score"

        try:
            with self._store.transaction() as txn:
                # ── LOAD ──────────────────────────────────────────
                competition = txn.fetch_live(competitions, competition_id)
                if competition is None:
                    return not_found(op, "competition", competition_id)
                contestant = txn.fetch_live(contestants, contestant_id)
                if contestant is None:
                    return not_found(op, "contestant", contestant_id)
                if txn.fetch_live(supervisors, supervisor_id) is None:
                    return not_found(op, "supervisor", supervisor_id)

                # ── VALIDATE ──────────────────────────────────────
                with trace_span("validate"):
                    vr = validate_score(
                        {
                            "competition_id": competition_id,
                            "contestant_id": contestant_id,
                            "supervisor_id": supervisor_id,
                            "score_value": score_value,
                            "entry_date": entry_date if entry_date is not None else txn.now,
                            "notes": notes,
                        },
                        competition=competition,
                    )
                    fields_vr, window_vr = _split_window_errors(vr)
                    if not fields_vr.valid:
                        return validation_failure(op, fields_vr)

                # ── STATE ─────────────────────────────────────────
                today = txn.now.date()
                if not is_ongoing(competition["start_date"], competition["end_date"], today):
                    status = derive_competition_status(
                        competition["start_date"], competition["end_date"], today
                    )
                    return failure(
                        op,
                        ErrorCode.STATE_CONFLICT,
                        f"Scores can only be recorded while a competition is ongoing "
                        f"(status: {status})",
                        status=status,
                    )
                if not window_vr.valid:
                    return validation_failure(op, window_vr)

                # ── MATCH ─────────────────────────────────────────
                if not supervisor_matches(supervisor_id, contestant["supervisor_id"]):
                    return field_failure(
                        op,
                        "supervisor_id",
                        "Supervisor is not the contestant's assigned supervisor",
                    )

                # ── DUPLICATE ─────────────────────────────────────
                if txn.exists(
                    scores,
                    scores.c.contestant_id == contestant_id,
                    scores.c.competition_id == competition_id,
                ):
                    return failure(
                        op,
                        ErrorCode.DUPLICATE,
                        "A score already exists for this contestant in this competition",
                        contestant_id=contestant_id,
                        competition_id=competition_id,
                    )

                # ── CAPACITY ──────────────────────────────────────
                recorded = txn.count_live(scores, scores.c.competition_id == competition_id)
                if not has_capacity(recorded, int(competition["max_contestants"])):
                    return failure(
                        op,
                        ErrorCode.CAPACITY_EXCEEDED,
                        f"Competition is full ({recorded}/{competition['max_contestants']})",
                        current=recorded,
                        limit=competition["max_contestants"],
                    )

                # ── PERSIST ───────────────────────────────────────
                score_id = txn.insert_row(scores, {k: vr.values[k] for k in _SCORE_COLUMNS})
        except IntegrityError:
            logger.debug("score pair collision on insert", exc_info=True)
            return failure(
                op,
                ErrorCode.DUPLICATE,
                "A score already exists for this contestant in this competition",
                contestant_id=contestant_id,
                competition_id=competition_id,
            )

        logger.info(
            "recorded score %s: contestant %s in competition %s",
            score_id,
            contestant_id,
            competition_id,
        )
        return self._respond(op, score_id)

    @traced
    def update_score(
        self,
        score_id: int,
        score_value: Any,
        notes: str | None = None,
    ) -> ServiceResult:
        """Amend a score's value while its competition is ongoing.

        *notes* of None keeps the stored notes; an empty string clears them.
        The entry date is not re-checked against the competition window.
        """
        op = "update_score"

        with self._store.transaction() as txn:
            current = txn.fetch_live(scores, score_id)
            if current is None:
                return not_found(op, "score", score_id)
            competition = txn.fetch_live(competitions, current["competition_id"])
            if competition is None:
                return not_found(op, "competition", current["competition_id"])

            today = txn.now.date()
            status = derive_competition_status(
                competition["start_date"], competition["end_date"], today
            )
            if not is_ongoing(competition["start_date"], competition["end_date"], today):
                return failure(
                    op,
                    ErrorCode.STATE_CONFLICT,
                    f"Scores can only be changed while the competition is ongoing "
                    f"(status: {status})",
                    status=status,
                )

            merged = {
                **current,
                "score_value": score_value,
                "notes": current["notes"] if notes is None else notes,
            }
            vr = validate_score(merged, competition=competition, check_window=False)
            if not vr.valid:
                return validation_failure(op, vr)

            txn.update_row(
                scores,
                score_id,
                {"score_value": vr.values["score_value"], "notes": vr.values["notes"]},
            )

        return self._respond(op, score_id)

    @traced
    def set_competition_scores(
        self,
        competition_id: int,
        values: dict[int, Any],
    ) -> ServiceResult:
        """Replace the values of existing scores in one competition, all or nothing.

        *values* maps contestant id to the new score value. Every
        contestant must already have a live score in the competition.
        """
        op = "set_competition_scores"

        with self._store.transaction() as txn:
            competition = txn.fetch_live(competitions, competition_id)
            if competition is None:
                return not_found(op, "competition", competition_id)

            today = txn.now.date()
            if not is_ongoing(competition["start_date"], competition["end_date"], today):
                status = derive_competition_status(
                    competition["start_date"], competition["end_date"], today
                )
                return failure(
                    op,
                    ErrorCode.STATE_CONFLICT,
                    f"Scores can only be changed while the competition is ongoing "
                    f"(status: {status})",
                    status=status,
                )

            rows = {
                row["contestant_id"]: row
                for row in (
                    txn.conn.execute(
                        scores.select().where(
                            scores.c.competition_id == competition_id,
                            scores.c.deleted_at.is_(None),
                        )
                    )
                    .mappings()
                    .all()
                )
            }
            missing = sorted(cid for cid in values if cid not in rows)
            if missing:
                return failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"No score recorded for contestants: {', '.join(map(str, missing))}",
                    contestant_ids=missing,
                )

            errors: list[dict[str, str]] = []
            updates: dict[int, float] = {}
            for contestant_id, value in values.items():
                vr = validate_score(
                    {**rows[contestant_id], "score_value": value},
                    competition=competition,
                    check_window=False,
                )
                if vr.valid:
                    updates[rows[contestant_id]["id"]] = vr.values["score_value"]
                    continue
                for err in vr.errors:
                    errors.append(
                        {
                            "field": f"scores[{contestant_id}].{err.field}",
                            "message": f"Contestant {contestant_id}: {err.message}",
                        }
                    )
            if errors:
                return failure(
                    op,
                    ErrorCode.VALIDATION_FAILED,
                    "; ".join(e["message"] for e in errors),
                    errors=errors,
                )

            for row_id, new_value in updates.items():
                txn.update_row(scores, row_id, {"score_value": new_value})

        return ServiceResult(
            ok=True,
            op=op,
            data={"competition_id": competition_id, "updated_count": len(updates)},
        )

    @traced
    def delete_score(self, score_id: int) -> ServiceResult:
        op = "delete_score"
        with self._store.transaction() as txn:
            if txn.fetch_live(scores, score_id) is None:
                return not_found(op, "score", score_id)
            txn.soft_delete(scores, score_id)

        logger.info("deleted score %s", score_id)
        return ServiceResult(ok=True, op=op, data={"id": score_id, "deleted": True})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get_score(self, score_id: int) -> ServiceResult:
        op = "get_score"
        row = self._records.get_score(score_id)
        if row is None:
            return not_found(op, "score", score_id)
        return ServiceResult(ok=True, op=op, data=score_payload(row))

    @traced
    def list_scores(
        self,
        *,
        competition_id: int | None = None,
        supervisor_id: int | None = None,
        contestant_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        page, limit = page_window(page, limit, self._settings.listing.page_size)
        rows, total = self._records.list_score_rows(
            competition_id=competition_id,
            supervisor_id=supervisor_id,
            contestant_id=contestant_id,
            page=page,
            limit=limit,
        )
        items = [score_payload(row) for row in rows]
        data = page_payload(items, total=total, page=page, limit=limit)
        return ServiceResult(ok=True, op="list_scores", data=dump_validated(ListResultData, data))

    def _respond(self, op: str, score_id: int) -> ServiceResult:
        row = self._records.get_score(score_id)
        if row is None:
            return not_found(op, "score", score_id)
        return ServiceResult(ok=True, op=op, data=score_payload(row))
