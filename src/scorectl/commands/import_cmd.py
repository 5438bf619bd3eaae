"""Command group: spreadsheet import (named import_cmd to avoid the keyword)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup
from scorectl.domain.types import Role
from scorectl.services.transfer import TransferService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_IMPORT_EXAMPLES = """\
  scorectl import supervisors staff.xlsx
  scorectl import contestants registrations.xlsx
  scorectl --json import scores marks.xlsx"""

_INPUT = click.Path(dir_okay=False, path_type=Path)


@click.group("import", cls=ScoreGroup, examples=_IMPORT_EXAMPLES)
@click.pass_obj
def import_cmd(app: AppContext) -> None:
    """Import records from .xlsx workbooks.

    Columns are matched by header name. Rows that fail are reported
    and skipped; the rest are imported.
    """


@import_cmd.command(examples="  scorectl import contestants registrations.xlsx")
@click.argument("source", type=_INPUT)
@click.pass_obj
def contestants(app: AppContext, source: Path) -> None:
    """Columns: Name, Birth Date, Education Level, [Address, Supervisor, Registration Number]."""
    app.require_role(Role.ADMIN)
    app.emit(TransferService(app.store).import_contestants(source))


@import_cmd.command(examples="  scorectl import supervisors staff.xlsx")
@click.argument("source", type=_INPUT)
@click.pass_obj
def supervisors(app: AppContext, source: Path) -> None:
    """Columns: Name, Hire Date, Department, Qualification, [Max Contestants, Employee ID]."""
    app.require_role(Role.ADMIN)
    app.emit(TransferService(app.store).import_supervisors(source))


@import_cmd.command(examples="  scorectl import scores marks.xlsx")
@click.argument("source", type=_INPUT)
@click.pass_obj
def scores(app: AppContext, source: Path) -> None:
    """Columns: Competition, Contestant, Supervisor, Score, [Notes]."""
    app.require_role(Role.ADMIN)
    app.emit(TransferService(app.store).import_scores(source))
