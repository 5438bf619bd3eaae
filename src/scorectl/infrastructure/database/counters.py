"""Monotonic per-kind sequence allocation.

Uses the ``id_counters`` table. A claimed value is never handed out
again, even if the transaction that used it is later undone by a soft
delete, so identifiers derived from it never repeat.

The caller owns the transaction: pass a ``Connection`` from a write
transaction so the counter increment commits or rolls back together
with the insert that consumes it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from scorectl.infrastructure.database.schema import SEQUENCE_KINDS, id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


def next_sequential_value(conn: Connection, kind: str) -> int:
    """Claim the next sequence value for *kind*.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        kind: One of :data:`SEQUENCE_KINDS`.

    Returns:
        The claimed value, starting at 1.

    Raises:
        ValueError: If *kind* has no sequence.
    """
    if kind not in SEQUENCE_KINDS:
        msg = f"Unknown sequence kind: {kind!r}. Expected one of {sorted(SEQUENCE_KINDS)}"
        raise ValueError(msg)

    row = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.kind == kind)
    ).first()
    if row is None:
        conn.execute(insert(id_counters).values(kind=kind, next_value=2))
        return 1

    current_value: int = row.next_value
    conn.execute(
        update(id_counters).where(id_counters.c.kind == kind).values(next_value=current_value + 1)
    )
    return current_value
