"""Command: database schema migration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreCommand
from scorectl.domain.types import Role

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext


@click.command(
    cls=ScoreCommand,
    examples="""\
  scorectl upgrade
  scorectl upgrade --check
  scorectl --json upgrade --check""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show pending migrations without applying."
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Run pending database migrations."""
    from scorectl.services.upgrade import UpgradeService

    svc = UpgradeService(app.store)
    if check_only:
        app.emit(svc.check_pending())
        return
    app.require_role(Role.ADMIN)
    app.emit(svc.apply())
