"""UserService — accounts, password hashing and role checks.

Passwords are hashed with werkzeug's salted one-way hash whenever they
are set or changed; plaintext is never stored or compared.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from scorectl.domain.roles import has_permission, is_valid_role
from scorectl.domain.types import Role
from scorectl.domain.validation import validate_user
from scorectl.infrastructure.database.schema import users
from scorectl.services._helpers import failure, field_failure, validation_failure
from scorectl.services.base import BaseService
from scorectl.services.contracts import UserRecord, dump_validated
from scorectl.services.result import ErrorCode, ServiceResult
from scorectl.services.telemetry import traced

logger = logging.getLogger(__name__)

_AUTH_MESSAGE = "Invalid username or password"


class UserService(BaseService):
    """User accounts for role-based permissions."""

    @traced
    def create_user(
        self,
        username: str,
        password: str,
        *,
        full_name: str,
        role: str = Role.VIEWER,
        is_active: bool = True,
    ) -> ServiceResult:
        op = "create_user"
        vr = validate_user(
            {
                "username": username,
                "password": password,
                "role": role,
                "full_name": full_name,
                "is_active": is_active,
            }
        )
        if not vr.valid:
            return validation_failure(op, vr)

        values = {
            "username": vr.values["username"],
            "password_hash": generate_password_hash(vr.values["password"]),
            "role": vr.values["role"],
            "full_name": vr.values["full_name"],
            "is_active": vr.values["is_active"],
        }
        try:
            with self._store.transaction() as txn:
                if txn.exists(users, users.c.username == values["username"], live=False):
                    return failure(
                        op,
                        ErrorCode.DUPLICATE,
                        f"Username already exists: {values['username']}",
                        field="username",
                    )
                txn.insert_row(users, values)
        except IntegrityError:
            return failure(
                op,
                ErrorCode.DUPLICATE,
                f"Username already exists: {values['username']}",
                field="username",
            )

        logger.info("created user %s (%s)", values["username"], values["role"])
        return self._respond(op, values["username"])

    @traced
    def authenticate(self, username: str, password: str) -> ServiceResult:
        """Verify credentials and stamp ``last_login``.

        Unknown users, inactive users and wrong passwords all produce the
        same AUTH_FAILED message.
        """
        op = "authenticate"
        with self._store.transaction() as txn:
            row = self._fetch(txn.conn, username)
            if (
                row is None
                or not row["is_active"]
                or not check_password_hash(row["password_hash"], password)
            ):
                logger.debug("authentication failed for %s", username)
                return failure(op, ErrorCode.AUTH_FAILED, _AUTH_MESSAGE)
            txn.update_row(users, row["id"], {"last_login": txn.now})

        return self._respond(op, username)

    @traced
    def change_password(
        self,
        username: str,
        new_password: str,
        *,
        current_password: str | None = None,
    ) -> ServiceResult:
        """Set a new password. When *current_password* is given it must match."""
        op = "change_password"
        if not new_password:
            return field_failure(op, "password", "Password is required")

        with self._store.transaction() as txn:
            row = self._fetch(txn.conn, username)
            if row is None:
                return failure(op, ErrorCode.NOT_FOUND, f"No user named {username!r}")
            if current_password is not None and not check_password_hash(
                row["password_hash"], current_password
            ):
                return failure(op, ErrorCode.AUTH_FAILED, "Current password is incorrect")
            password_hash = generate_password_hash(new_password)
            txn.update_row(users, row["id"], {"password_hash": password_hash})

        return self._respond(op, username)

    @traced
    def set_role(self, username: str, role: str) -> ServiceResult:
        op = "set_role"
        if not is_valid_role(role):
            return field_failure(op, "role", f"Unknown role: {role!r}")

        with self._store.transaction() as txn:
            row = self._fetch(txn.conn, username)
            if row is None:
                return failure(op, ErrorCode.NOT_FOUND, f"No user named {username!r}")
            txn.update_row(users, row["id"], {"role": role})

        return self._respond(op, username)

    @traced
    def deactivate(self, username: str) -> ServiceResult:
        op = "deactivate"
        with self._store.transaction() as txn:
            row = self._fetch(txn.conn, username)
            if row is None:
                return failure(op, ErrorCode.NOT_FOUND, f"No user named {username!r}")
            txn.update_row(users, row["id"], {"is_active": False})

        return self._respond(op, username)

    @traced
    def authorize(self, username: str | None, required: str) -> ServiceResult:
        """Check that *username* exists, is active and holds at least *required*."""
        op = "authorize"
        if not username:
            return failure(
                op,
                ErrorCode.AUTH_FAILED,
                "No acting user given (use --user or SCORECTL_USER)",
            )

        row = self._records.get_user_by_username(username)
        if row is None or not row["is_active"]:
            return failure(op, ErrorCode.AUTH_FAILED, f"Unknown or inactive user: {username!r}")
        if not has_permission(row["role"], required):
            return failure(
                op,
                ErrorCode.PERMISSION_DENIED,
                f"User {username!r} ({row['role']}) needs the {required} role",
                role=row["role"],
                required=required,
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"username": username, "role": row["role"], "required": required},
        )

    @traced
    def list_users(self) -> ServiceResult:
        items = [dump_validated(UserRecord, row) for row in self._records.list_user_rows()]
        return ServiceResult(ok=True, op="list_users", data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _fetch(conn: Any, username: str) -> dict[str, Any] | None:
        row = (
            conn.execute(
                select(users).where(users.c.username == username, users.c.deleted_at.is_(None))
            )
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    def _respond(self, op: str, username: str) -> ServiceResult:
        row = self._records.get_user_by_username(username)
        if row is None:
            return failure(op, ErrorCode.NOT_FOUND, f"No user named {username!r}")
        return ServiceResult(ok=True, op=op, data=dump_validated(UserRecord, row))
