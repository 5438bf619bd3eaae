"""Capacity predicates for supervisors and competitions.

These only answer yes/no over counts the caller already loaded. The
service layer must load the counts and perform the write inside one
serialized transaction for the answer to still hold at insert time.
"""

from __future__ import annotations


def has_capacity(current: int, limit: int, requested: int = 1) -> bool:
    """Whether *requested* more members fit under *limit*."""
    return current + requested <= limit


def supervisor_matches(score_supervisor_id: int, assigned_supervisor_id: int | None) -> bool:
    """A score may only be recorded by the contestant's assigned supervisor."""
    return assigned_supervisor_id is not None and score_supervisor_id == assigned_supervisor_id


def can_lower_limit(current: int, new_limit: int) -> bool:
    """A limit may not drop below the number of members already held."""
    return new_limit >= current
