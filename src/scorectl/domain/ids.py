"""Identifier patterns and formatting for supervisors and contestants.

Two human-facing identifiers, both assigned once at creation:
- Employee id (supervisors): ``SUP-<year>-<seq>``, sequence padded to 3 digits.
- Registration number (contestants): ``<year>-<seq>``, padded to 4 digits.

The sequence number comes from the database allocator, never from a row
count. Padding is a minimum; sequences grow past 999 / 9999 naturally.

INVARIANT: Identifiers are permanent. Once assigned, they never change.
"""

from __future__ import annotations

import re

from scorectl.domain.types import RecordKind

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    RecordKind.SUPERVISOR: re.compile(r"^SUP-\d{4}-\d{3,}$"),
    RecordKind.CONTESTANT: re.compile(r"^\d{4}-\d{4,}$"),
}

# Column holding the generated identifier, per record kind.
ID_FIELDS: dict[str, str] = {
    RecordKind.SUPERVISOR: "employee_id",
    RecordKind.CONTESTANT: "registration_number",
}

SEQUENCE_KINDS = frozenset(ID_FIELDS)


def format_employee_id(year: int, seq: int) -> str:
    """Format a supervisor employee id.

    Examples:
        >>> format_employee_id(2026, 7)
        'SUP-2026-007'
    """
    return f"SUP-{year:04d}-{seq:03d}"


def format_registration_number(year: int, seq: int) -> str:
    """Format a contestant registration number.

    Examples:
        >>> format_registration_number(2026, 42)
        '2026-0042'
    """
    return f"{year:04d}-{seq:04d}"


def format_identifier(kind: str, year: int, seq: int) -> str:
    """Format the generated identifier for *kind*.

    Raises:
        ValueError: If *kind* has no generated identifier.
    """
    if kind == RecordKind.SUPERVISOR:
        return format_employee_id(year, seq)
    if kind == RecordKind.CONTESTANT:
        return format_registration_number(year, seq)
    msg = f"No generated identifier for record kind: {kind!r}"
    raise ValueError(msg)


def validate_id(identifier: str, kind: str) -> bool:
    """Check whether *identifier* matches the generated pattern for *kind*."""
    pattern = ID_PATTERNS.get(kind)
    if pattern is None:
        return False
    return pattern.match(identifier) is not None
