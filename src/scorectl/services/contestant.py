"""ContestantService — registration, supervisor assignment and lookups.

Assigning a contestant to a supervisor (on create or on update) checks
the supervisor's live contestant count inside the same serialized
transaction as the write.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from scorectl.domain.capacity import has_capacity
from scorectl.domain.ids import validate_id
from scorectl.domain.types import RecordKind
from scorectl.domain.validation import validate_contestant
from scorectl.infrastructure.database.schema import contestants, scores, supervisors
from scorectl.services._helpers import (
    allocate_identifier,
    failure,
    merge_changes,
    not_found,
    page_payload,
    page_window,
    validation_failure,
)
from scorectl.services.base import BaseService
from scorectl.services.contracts import (
    ContestantRecord,
    ListResultData,
    SearchResultData,
    dump_validated,
)
from scorectl.services.result import ErrorCode, ServiceResult
from scorectl.services.score import score_payload
from scorectl.services.stats import StatsService
from scorectl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from scorectl.infrastructure.store import StoreTransaction

logger = logging.getLogger(__name__)

_EDITABLE = frozenset(
    {
        "name",
        "birth_date",
        "address",
        "education_level",
        "is_active",
        "supervisor_id",
        "notes",
    }
)
_IMMUTABLE = frozenset({"registration_number"})
_COLUMNS = _EDITABLE | _IMMUTABLE


def _check_assignment(
    op: str,
    txn: StoreTransaction,
    supervisor_id: int,
) -> ServiceResult | None:
    """Return a failure if *supervisor_id* is missing or already at its limit."""
    supervisor = txn.fetch_live(supervisors, supervisor_id)
    if supervisor is None:
        return not_found(op, "supervisor", supervisor_id)

    assigned = txn.count_live(contestants, contestants.c.supervisor_id == supervisor_id)
    if not has_capacity(assigned, int(supervisor["max_contestants"])):
        return failure(
            op,
            ErrorCode.CAPACITY_EXCEEDED,
            f"Supervisor {supervisor['name']} has reached the maximum number of contestants "
            f"({assigned}/{supervisor['max_contestants']})",
            supervisor_id=supervisor_id,
            current=assigned,
            limit=supervisor["max_contestants"],
        )
    return None


class ContestantService(BaseService):
    """Contestant records."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @traced
    def create_contestant(self, fields: dict[str, Any]) -> ServiceResult:
        """Register a contestant, generating ``registration_number`` when absent."""
        op = "create_contestant"
        warnings: list[str] = []
        data = {k: v for k, v in fields.items() if v is not None}

        # ── VALIDATE ──────────────────────────────────────────────
        with trace_span("validate"):
            vr = validate_contestant(data, today=self._store.today())
            if not vr.valid:
                return validation_failure(op, vr)
            values = {k: vr.values[k] for k in _COLUMNS}
            supplied = values["registration_number"]
            if supplied is not None and not validate_id(supplied, RecordKind.CONTESTANT):
                warnings.append(f"Registration number {supplied!r} does not follow YYYY-NNNN")

        try:
            with self._store.transaction() as txn:
                # ── CHECK ─────────────────────────────────────────
                if supplied is not None and txn.exists(
                    contestants, contestants.c.registration_number == supplied, live=False
                ):
                    return failure(
                        op,
                        ErrorCode.DUPLICATE,
                        f"Registration number already exists: {supplied}",
                        field="registration_number",
                    )
                if values["supervisor_id"] is not None:
                    problem = _check_assignment(op, txn, values["supervisor_id"])
                    if problem is not None:
                        return problem

                # ── GENERATE ──────────────────────────────────────
                if supplied is None:
                    values["registration_number"] = allocate_identifier(
                        txn, contestants, RecordKind.CONTESTANT
                    )

                # ── PERSIST ───────────────────────────────────────
                contestant_id = txn.insert_row(contestants, values)
        except IntegrityError:
            logger.debug("registration number collision on insert", exc_info=True)
            return failure(
                op,
                ErrorCode.DUPLICATE,
                f"Registration number already exists: {values['registration_number']}",
                field="registration_number",
            )

        logger.info("created contestant %s (%s)", contestant_id, values["registration_number"])
        return self._respond(op, contestant_id, warnings)

    @traced
    def update_contestant(self, contestant_id: int, changes: dict[str, Any]) -> ServiceResult:
        """Apply *changes* over the stored record; reassignment is capacity-checked."""
        op = "update_contestant"
        warnings: list[str] = []

        with self._store.transaction() as txn:
            current = txn.fetch_live(contestants, contestant_id)
            if current is None:
                return not_found(op, "contestant", contestant_id)

            merged = merge_changes(
                current,
                changes,
                editable=_EDITABLE,
                immutable=_IMMUTABLE,
                warnings=warnings,
            )
            # Age is only re-checked when the birth date itself moves.
            vr = validate_contestant(merged, today=txn.now.date(), check_age=False)
            if vr.valid and vr.values["birth_date"] != current["birth_date"]:
                vr = validate_contestant(merged, today=txn.now.date())
            if not vr.valid:
                return validation_failure(op, vr)
            values = {k: vr.values[k] for k in _EDITABLE}

            new_supervisor = values["supervisor_id"]
            if new_supervisor is not None and new_supervisor != current["supervisor_id"]:
                problem = _check_assignment(op, txn, new_supervisor)
                if problem is not None:
                    return problem

            txn.update_row(contestants, contestant_id, values)

        return self._respond(op, contestant_id, warnings)

    @traced
    def delete_contestant(self, contestant_id: int) -> ServiceResult:
        """Soft-delete a contestant together with their live scores."""
        op = "delete_contestant"
        with self._store.transaction() as txn:
            if txn.fetch_live(contestants, contestant_id) is None:
                return not_found(op, "contestant", contestant_id)

            removed = txn.conn.execute(
                update(scores)
                .where(scores.c.contestant_id == contestant_id, scores.c.deleted_at.is_(None))
                .values(deleted_at=txn.now, updated_at=txn.now)
            ).rowcount
            txn.soft_delete(contestants, contestant_id)

        logger.info("deleted contestant %s and %d scores", contestant_id, removed)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": contestant_id, "deleted": True, "scores_deleted": removed},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get_contestant(self, contestant_id: int) -> ServiceResult:
        op = "get_contestant"
        row = self._records.get_contestant(contestant_id)
        if row is None:
            return not_found(op, "contestant", contestant_id)
        return ServiceResult(ok=True, op=op, data=dump_validated(ContestantRecord, row))

    @traced
    def list_contestants(
        self,
        *,
        search: str | None = None,
        supervisor_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        page, limit = page_window(page, limit, self._settings.listing.page_size)
        rows, total = self._records.list_contestant_rows(
            search=search, supervisor_id=supervisor_id, page=page, limit=limit
        )
        items = [dump_validated(ContestantRecord, row) for row in rows]
        data = page_payload(items, total=total, page=page, limit=limit)
        return ServiceResult(
            ok=True, op="list_contestants", data=dump_validated(ListResultData, data)
        )

    @traced
    def search_contestants(self, term: str, supervisor_id: int | None = None) -> ServiceResult:
        """Quick name search, capped at the configured search limit."""
        rows = self._records.search_contestant_rows(
            term,
            supervisor_id=supervisor_id,
            limit=self._settings.listing.search_limit,
        )
        items = [dump_validated(ContestantRecord, row) for row in rows]
        data = {"query": term, "count": len(items), "items": items}
        return ServiceResult(
            ok=True, op="search_contestants", data=dump_validated(SearchResultData, data)
        )

    def get_average(self, contestant_id: int) -> ServiceResult:
        return StatsService(self._store).contestant_average(contestant_id)

    @traced
    def get_latest_score(self, contestant_id: int) -> ServiceResult:
        """Most recently recorded live score, or ``score: None``."""
        op = "get_latest_score"
        if self._records.get_contestant(contestant_id) is None:
            return not_found(op, "contestant", contestant_id)

        row = self._records.latest_contestant_score(contestant_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "contestant_id": contestant_id,
                "score": score_payload(row) if row is not None else None,
            },
        )

    def _respond(self, op: str, contestant_id: int, warnings: list[str]) -> ServiceResult:
        row = self._records.get_contestant(contestant_id)
        if row is None:
            return not_found(op, "contestant", contestant_id)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ContestantRecord, row),
            warnings=warnings,
        )
