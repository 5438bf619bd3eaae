"""Command group: spreadsheet export."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup
from scorectl.services.transfer import TransferService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_EXPORT_EXAMPLES = """\
  scorectl export contestants contestants.xlsx
  scorectl export supervisors supervisors.xlsx
  scorectl export scores scores.xlsx --competition-id 2
  scorectl export results 2 olympiad-results.xlsx"""

_OUTPUT = click.Path(dir_okay=False, path_type=Path)


@click.group(cls=ScoreGroup, examples=_EXPORT_EXAMPLES)
@click.pass_obj
def export(app: AppContext) -> None:
    """Export records to .xlsx workbooks."""


@export.command(
    examples="""\
  scorectl export contestants all.xlsx
  scorectl export contestants picked.xlsx --id 3 --id 7"""
)
@click.argument("output", type=_OUTPUT)
@click.option("--id", "ids", type=int, multiple=True, help="Only these contestants (repeatable).")
@click.pass_obj
def contestants(app: AppContext, output: Path, ids: tuple[int, ...]) -> None:
    """Export contestants."""
    app.emit(TransferService(app.store).export_contestants(output, list(ids) if ids else None))


@export.command(examples="  scorectl export supervisors supervisors.xlsx")
@click.argument("output", type=_OUTPUT)
@click.pass_obj
def supervisors(app: AppContext, output: Path) -> None:
    """Export supervisors with their statistics."""
    app.emit(TransferService(app.store).export_supervisors(output))


@export.command(
    examples="""\
  scorectl export scores all-scores.xlsx
  scorectl export scores group.xlsx --supervisor-id 3"""
)
@click.argument("output", type=_OUTPUT)
@click.option("--competition-id", type=int, default=None, help="Only this competition.")
@click.option("--supervisor-id", type=int, default=None, help="Only this supervisor.")
@click.pass_obj
def scores(
    app: AppContext,
    output: Path,
    competition_id: int | None,
    supervisor_id: int | None,
) -> None:
    """Export scores, highest first."""
    app.emit(
        TransferService(app.store).export_scores(
            output, competition_id=competition_id, supervisor_id=supervisor_id
        )
    )


@export.command(examples="  scorectl export results 2 olympiad-results.xlsx")
@click.argument("competition_id", type=int)
@click.argument("output", type=_OUTPUT)
@click.pass_obj
def results(app: AppContext, competition_id: int, output: Path) -> None:
    """Export one competition's ranked results."""
    app.emit(TransferService(app.store).export_competition_results(output, competition_id))
