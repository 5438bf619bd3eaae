"""Shared service-layer helper functions."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from sqlalchemy import Table

from scorectl.domain.ids import ID_FIELDS, format_identifier
from scorectl.infrastructure.database.counters import next_sequential_value
from scorectl.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from scorectl.domain.validation import ValidationResult
    from scorectl.infrastructure.store import StoreTransaction


def failure(
    op: str,
    code: str,
    message: str,
    *,
    warnings: list[str] | None = None,
    **detail: Any,
) -> ServiceResult:
    """Build a failed :class:`ServiceResult`."""
    return ServiceResult(
        ok=False,
        op=op,
        warnings=warnings or [],
        error=ServiceError(code=code, message=message, detail=detail),
    )


def validation_failure(op: str, vr: ValidationResult) -> ServiceResult:
    """Report every violated constraint of *vr* as one VALIDATION_FAILED error."""
    return failure(
        op,
        ErrorCode.VALIDATION_FAILED,
        "; ".join(vr.messages),
        errors=[e.to_dict() for e in vr.errors],
    )


def field_failure(op: str, field: str, message: str) -> ServiceResult:
    """VALIDATION_FAILED for a single field (cross-record rules)."""
    return failure(
        op,
        ErrorCode.VALIDATION_FAILED,
        message,
        errors=[{"field": field, "message": message}],
    )


def not_found(op: str, kind: str, record_id: Any) -> ServiceResult:
    return failure(op, ErrorCode.NOT_FOUND, f"No {kind} found with id {record_id}", id=record_id)


def page_window(page: int | None, limit: int | None, default_limit: int) -> tuple[int, int]:
    """Clamp paging arguments to ``page >= 1`` and ``limit >= 1``."""
    return max(1, page or 1), max(1, limit or default_limit)


def page_payload(
    items: list[dict[str, Any]],
    *,
    total: int,
    page: int,
    limit: int,
) -> dict[str, Any]:
    """Standard list payload: count / total / page / pages / items."""
    return {
        "count": len(items),
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if total else 0,
        "items": items,
    }


def allocate_identifier(txn: StoreTransaction, table: Table, kind: str) -> str:
    """Claim the next generated identifier for *kind*, formatted with the current year.

    Values already taken (by explicitly supplied identifiers, or by
    soft-deleted rows) are skipped; the sequence never moves backwards.
    """
    column = table.c[ID_FIELDS[kind]]
    year = txn.now.year
    while True:
        candidate = format_identifier(kind, year, next_sequential_value(txn.conn, kind))
        if not txn.exists(table, column == candidate, live=False):
            return candidate


def merge_changes(
    current: dict[str, Any],
    changes: dict[str, Any],
    *,
    editable: frozenset[str],
    immutable: frozenset[str] = frozenset(),
    warnings: list[str],
) -> dict[str, Any]:
    """Overlay *changes* on *current*, dropping immutable and unknown keys with a warning."""
    merged = dict(current)
    for key, value in changes.items():
        if key in immutable:
            if value != current.get(key):
                warnings.append(f"Cannot change immutable field: {key}")
            continue
        if key not in editable:
            warnings.append(f"Ignoring unknown field: {key}")
            continue
        merged[key] = value
    return merged
