"""Alembic migration infrastructure for scorectl.

Configuration is built in code; there is no alembic.ini. Revision
scripts live in ``versions/`` beside this module. A database is stamped
at head the moment it is created, so every store carries a revision.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

SCRIPT_LOCATION = Path(__file__).parent


def build_config(db_url: str) -> Config:
    """Alembic Config for running commands against *db_url*."""
    cfg = Config()
    cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def script_directory() -> ScriptDirectory:
    return ScriptDirectory(str(SCRIPT_LOCATION))


def current_revision(engine: Engine) -> str | None:
    """Revision recorded in the database, or None when it was never stamped."""
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def stamp_head(engine: Engine) -> str | None:
    """Record the newest revision in *engine*'s database and return it."""
    script = script_directory()
    with engine.begin() as conn:
        MigrationContext.configure(conn).stamp(script, "head")
    return script.get_current_head()
