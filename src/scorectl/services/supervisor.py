"""SupervisorService — create, update, delete and read supervisors.

Pipeline for writes: VALIDATE → CHECK → GENERATE → PERSIST → RESPOND.
Checks, identifier allocation and the write share one serialized
transaction.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from scorectl.domain.capacity import can_lower_limit
from scorectl.domain.ids import validate_id
from scorectl.domain.types import RecordKind
from scorectl.domain.validation import validate_supervisor
from scorectl.infrastructure.database.schema import contestants, supervisors
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
from scorectl.services.contracts import ListResultData, SupervisorRecord, dump_validated
from scorectl.services.result import ErrorCode, ServiceResult
from scorectl.services.stats import supervisor_stats_for
from scorectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_EDITABLE = frozenset(
    {
        "name",
        "hire_date",
        "department",
        "qualification",
        "is_active",
        "max_contestants",
        "notes",
    }
)
_IMMUTABLE = frozenset({"employee_id"})
_COLUMNS = _EDITABLE | _IMMUTABLE


class SupervisorService(BaseService):
    """Supervisor records and their contestant limits."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @traced
    def create_supervisor(self, fields: dict[str, Any]) -> ServiceResult:
        """Create a supervisor, generating ``employee_id`` when absent."""
        op = "create_supervisor"
        warnings: list[str] = []
        data = {"max_contestants": self._settings.defaults.supervisor_max_contestants}
        data.update({k: v for k, v in fields.items() if v is not None})

        # ── VALIDATE ──────────────────────────────────────────────
        with trace_span("validate"):
            vr = validate_supervisor(data, today=self._store.today())
            if not vr.valid:
                return validation_failure(op, vr)
            values = {k: vr.values[k] for k in _COLUMNS}
            supplied_id = values["employee_id"]
            if supplied_id is not None and not validate_id(supplied_id, RecordKind.SUPERVISOR):
                warnings.append(f"Employee id {supplied_id!r} does not follow SUP-YYYY-NNN")

        try:
            with self._store.transaction() as txn:
                # ── CHECK ─────────────────────────────────────────
                if supplied_id is not None and txn.exists(
                    supervisors, supervisors.c.employee_id == supplied_id, live=False
                ):
                    return failure(
                        op,
                        ErrorCode.DUPLICATE,
                        f"Employee id already exists: {supplied_id}",
                        field="employee_id",
                    )

                # ── GENERATE ──────────────────────────────────────
                if supplied_id is None:
                    values["employee_id"] = allocate_identifier(
                        txn, supervisors, RecordKind.SUPERVISOR
                    )

                # ── PERSIST ───────────────────────────────────────
                supervisor_id = txn.insert_row(supervisors, values)
        except IntegrityError:
            logger.debug("employee id collision on insert", exc_info=True)
            return failure(
                op,
                ErrorCode.DUPLICATE,
                f"Employee id already exists: {values['employee_id']}",
                field="employee_id",
            )

        logger.info("created supervisor %s (%s)", supervisor_id, values["employee_id"])
        return self._respond(op, supervisor_id, warnings)

    @traced
    def update_supervisor(self, supervisor_id: int, changes: dict[str, Any]) -> ServiceResult:
        """Apply *changes* over the stored record and validate the result as a whole.

        ``max_contestants`` may not drop below the current contestant count.
        """
        op = "update_supervisor"
        warnings: list[str] = []

        with self._store.transaction() as txn:
            current = txn.fetch_live(supervisors, supervisor_id)
            if current is None:
                return not_found(op, "supervisor", supervisor_id)

            merged = merge_changes(
                current,
                changes,
                editable=_EDITABLE,
                immutable=_IMMUTABLE,
                warnings=warnings,
            )
            vr = validate_supervisor(merged, today=txn.now.date())
            if not vr.valid:
                return validation_failure(op, vr)
            values = {k: vr.values[k] for k in _EDITABLE}

            if values["max_contestants"] != current["max_contestants"]:
                assigned = txn.count_live(
                    contestants, contestants.c.supervisor_id == supervisor_id
                )
                if not can_lower_limit(assigned, values["max_contestants"]):
                    return failure(
                        op,
                        ErrorCode.CAPACITY_EXCEEDED,
                        f"Supervisor has {assigned} contestants; "
                        f"max_contestants cannot be {values['max_contestants']}",
                        current=assigned,
                        requested_limit=values["max_contestants"],
                    )

            txn.update_row(supervisors, supervisor_id, values)

        return self._respond(op, supervisor_id, warnings)

    @traced
    def delete_supervisor(self, supervisor_id: int) -> ServiceResult:
        """Soft-delete a supervisor that has no assigned contestants."""
        op = "delete_supervisor"
        with self._store.transaction() as txn:
            if txn.fetch_live(supervisors, supervisor_id) is None:
                return not_found(op, "supervisor", supervisor_id)

            assigned = txn.count_live(contestants, contestants.c.supervisor_id == supervisor_id)
            if assigned:
                return failure(
                    op,
                    ErrorCode.STATE_CONFLICT,
                    f"Cannot delete supervisor with {assigned} assigned contestants",
                    contestants_count=assigned,
                )
            txn.soft_delete(supervisors, supervisor_id)

        logger.info("deleted supervisor %s", supervisor_id)
        return ServiceResult(ok=True, op=op, data={"id": supervisor_id, "deleted": True})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get_supervisor(self, supervisor_id: int) -> ServiceResult:
        op = "get_supervisor"
        row = self._records.get_supervisor(supervisor_id)
        if row is None:
            return not_found(op, "supervisor", supervisor_id)
        return ServiceResult(ok=True, op=op, data=self._present(row))

    @traced
    def list_supervisors(
        self,
        *,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        """Page through supervisors, each with its statistics."""
        page, limit = page_window(page, limit, self._settings.listing.page_size)
        rows, total = self._records.list_supervisor_rows(search=search, page=page, limit=limit)
        items = [self._present(row) for row in rows]
        data = page_payload(items, total=total, page=page, limit=limit)
        return ServiceResult(
            ok=True, op="list_supervisors", data=dump_validated(ListResultData, data)
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _present(self, row: dict[str, Any]) -> dict[str, Any]:
        stats = supervisor_stats_for(self._records, row)
        return dump_validated(SupervisorRecord, {**row, "statistics": stats.to_dict()})

    def _respond(self, op: str, supervisor_id: int, warnings: list[str]) -> ServiceResult:
        row = self._records.get_supervisor(supervisor_id)
        if row is None:
            return not_found(op, "supervisor", supervisor_id)
        return ServiceResult(ok=True, op=op, data=self._present(row), warnings=warnings)
