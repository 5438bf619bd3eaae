"""InitService — create a new store directory.

Pipeline: CONFIG → DATABASE → REPORT

Writes a sparse ``scorectl.toml`` (only the store name) and opens the
store once, which creates the database stamped at the newest migration
revision.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from scorectl.config.discovery import CONFIG_FILENAME
from scorectl.config.settings import ScoreSettings
from scorectl.infrastructure.database.engine import database_path
from scorectl.infrastructure.database.migrations import current_revision
from scorectl.infrastructure.store import Store
from scorectl.services._helpers import failure
from scorectl.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class InitService:
    """Store initialization. Runs before any Store exists, so it is not a BaseService."""

    @staticmethod
    def init_store(root: Path, *, name: str | None = None) -> ServiceResult:
        """Initialize a store at *root*.

        Fails with STATE_CONFLICT when *root* already holds a database.
        An existing config file is kept as is.
        """
        op = "init_store"
        root = Path(root).resolve()
        db_path = database_path(root)
        if db_path.exists():
            return failure(
                op,
                ErrorCode.STATE_CONFLICT,
                f"A store already exists at {root}",
                db_path=str(db_path),
            )

        warnings: list[str] = []
        root.mkdir(parents=True, exist_ok=True)

        # ── CONFIG ────────────────────────────────────────────────
        config_path = root / CONFIG_FILENAME
        if config_path.exists():
            warnings.append(f"Keeping existing {CONFIG_FILENAME}")
        else:
            store_name = name or root.name
            # JSON string escaping is valid TOML basic-string syntax
            config_path.write_text(f"[store]\nname = {json.dumps(store_name)}\n", encoding="utf-8")

        # ── DATABASE ──────────────────────────────────────────────
        settings = ScoreSettings.from_cli(config_path=str(config_path), root=root)
        store = Store(settings)
        try:
            revision = current_revision(store.engine)
        finally:
            store.close()

        logger.info("initialized store at %s", root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(root),
                "name": settings.store.name,
                "config_path": str(config_path),
                "db_path": str(store.db_path),
                "revision": revision,
            },
            warnings=warnings,
        )
