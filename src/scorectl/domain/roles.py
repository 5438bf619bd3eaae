"""Role ordering and permission checks."""

from __future__ import annotations

from scorectl.domain.types import Role

ROLE_RANK: dict[str, int] = {
    Role.VIEWER: 1,
    Role.EDITOR: 2,
    Role.ADMIN: 3,
}


def is_valid_role(role: str) -> bool:
    return role in ROLE_RANK


def has_permission(role: str, required: str) -> bool:
    """Return True when *role* is at least *required* in the role order.

    Unknown roles never have permission.
    """
    if role not in ROLE_RANK or required not in ROLE_RANK:
        return False
    return ROLE_RANK[role] >= ROLE_RANK[required]
