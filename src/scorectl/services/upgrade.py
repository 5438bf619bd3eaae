"""UpgradeService — move a store's schema to the newest Alembic revision.

Every database is stamped at head when it is created, so an upgrade is a
forward walk from the recorded revision. The database file is copied to
``.scorectl/backups/`` before any revision runs.

Pipeline: PLAN → BACKUP → MIGRATE → VERIFY → REPORT
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, NamedTuple

from alembic import command
from alembic.util import CommandError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from scorectl.infrastructure.database.migrations import (
    build_config,
    current_revision,
    script_directory,
)
from scorectl.services._helpers import failure
from scorectl.services.base import BaseService
from scorectl.services.result import ErrorCode, ServiceResult
from scorectl.services.telemetry import traced

logger = logging.getLogger(__name__)

_OP = "upgrade"


class _Plan(NamedTuple):
    current: str | None
    head: str | None
    pending: list[dict[str, Any]]


class UpgradeService(BaseService):
    """Checks and applies pending schema migrations for one store."""

    def _plan(self) -> _Plan:
        script = script_directory()
        head = script.get_current_head()
        current = current_revision(self._store.engine)
        # Newest first, stopping short of the recorded revision.
        pending = [
            {"revision": rev.revision, "description": rev.doc or ""}
            for rev in script.iterate_revisions(head, current)
        ]
        return _Plan(current, head, pending)

    def _backup(self) -> Path:
        source = self._store.db_path
        target_dir = source.parent / "backups"
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{source.stem}-{self._store.now():%Y%m%dT%H%M%S}.db"
        # Closing pooled connections folds the WAL back into the main file.
        self._store.engine.dispose()
        shutil.copy2(source, target)
        logger.info("database backed up to %s", target)
        return target

    @traced
    def check_pending(self) -> ServiceResult:
        """Report the recorded revision and the revisions still to run."""
        plan = self._plan()
        return ServiceResult(
            ok=True,
            op=_OP,
            data={
                "pending_count": len(plan.pending),
                "pending": plan.pending,
                "current": plan.current,
                "head": plan.head,
            },
        )

    @traced
    def apply(self) -> ServiceResult:
        """Back up the database, then upgrade it to head."""
        plan = self._plan()
        if not plan.pending:
            return ServiceResult(
                ok=True,
                op=_OP,
                data={
                    "applied_count": 0,
                    "current": plan.current,
                    "message": "Database is already up to date",
                },
            )

        try:
            backup_path = self._backup()
        except OSError as exc:
            return failure(_OP, ErrorCode.MIGRATION_FAILED, f"Backup failed: {exc}")

        try:
            command.upgrade(build_config(f"sqlite:///{self._store.db_path}"), "head")
        except (CommandError, SQLAlchemyError) as exc:
            logger.error("upgrade to %s failed: %s", plan.head, exc)
            return failure(
                _OP,
                ErrorCode.MIGRATION_FAILED,
                f"Migration failed: {exc}. Backup at: {backup_path}",
                backup_path=str(backup_path),
            )

        warnings: list[str] = []
        with self._store.engine.connect() as conn:
            verdict = conn.execute(text("PRAGMA integrity_check")).scalar()
        if verdict != "ok":
            warnings.append(f"Post-migration integrity check reported: {verdict}")

        logger.info("upgraded %s -> %s", plan.current, plan.head)
        return ServiceResult(
            ok=True,
            op=_OP,
            data={
                "applied_count": len(plan.pending),
                "current": current_revision(self._store.engine),
                "backup_path": str(backup_path),
            },
            warnings=warnings,
        )
