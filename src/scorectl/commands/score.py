"""Command group: recording and amending scores."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup, paging_options
from scorectl.domain.types import Role
from scorectl.services.score import ScoreService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_SCORE_EXAMPLES = """\
  scorectl score record 85.5 --competition-id 2 --contestant-id 7 --supervisor-id 3
  scorectl score update 14 91
  scorectl score set 2 7=88 8=64.25
  scorectl score list --competition-id 2"""


def _parse_pairs(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> dict[int, str]:
    pairs: dict[int, str] = {}
    for raw in values:
        contestant_id, sep, value = raw.partition("=")
        if not sep or not contestant_id.strip().isdigit() or not value.strip():
            raise click.BadParameter(f"expected CONTESTANT_ID=SCORE, got {raw!r}")
        pairs[int(contestant_id)] = value.strip()
    return pairs


@click.group(cls=ScoreGroup, examples=_SCORE_EXAMPLES)
@click.pass_obj
def score(app: AppContext) -> None:
    """Record, amend and list scores."""


@score.command(
    examples="""\
  scorectl score record 85.5 --competition-id 2 --contestant-id 7 --supervisor-id 3
  scorectl score record 60 --competition-id 2 --contestant-id 8 --supervisor-id 3 \\
      --entry-date "2024-03-04 10:30" --notes retake"""
)
@click.argument("score_value")
@click.option("--competition-id", type=int, required=True, help="Competition.")
@click.option("--contestant-id", type=int, required=True, help="Contestant.")
@click.option("--supervisor-id", type=int, required=True, help="Grading supervisor.")
@click.option("--entry-date", default=None, help="Entry time (defaults to now).")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def record(
    app: AppContext,
    score_value: str,
    competition_id: int,
    contestant_id: int,
    supervisor_id: int,
    entry_date: str | None,
    notes: str | None,
) -> None:
    """Record a score for an ongoing competition."""
    app.require_role(Role.EDITOR)
    app.emit(
        ScoreService(app.store).record_score(
            competition_id,
            contestant_id,
            supervisor_id,
            score_value,
            notes=notes,
            entry_date=entry_date,
        )
    )


@score.command(
    examples="""\
  scorectl score update 14 91
  scorectl score update 14 91 --notes corrected
  scorectl score update 14 91 --clear-notes"""
)
@click.argument("score_id", type=int)
@click.argument("score_value")
@click.option("--notes", default=None, help="Replacement notes (kept when omitted).")
@click.option("--clear-notes", is_flag=True, help="Remove the stored notes.")
@click.pass_obj
def update(
    app: AppContext,
    score_id: int,
    score_value: str,
    notes: str | None,
    clear_notes: bool,
) -> None:
    """Amend a score while its competition is ongoing."""
    if clear_notes:
        if notes is not None:
            raise click.UsageError("--notes and --clear-notes are mutually exclusive")
        notes = ""
    app.require_role(Role.EDITOR)
    app.emit(ScoreService(app.store).update_score(score_id, score_value, notes=notes))


@score.command(
    "set",
    examples="""\
  scorectl score set 2 7=88 8=64.25 9=70""",
)
@click.argument("competition_id", type=int)
@click.argument("pairs", nargs=-1, required=True, callback=_parse_pairs)
@click.pass_obj
def set_cmd(app: AppContext, competition_id: int, pairs: dict[int, str]) -> None:
    """Replace several scores of one competition at once (all or nothing)."""
    app.require_role(Role.EDITOR)
    app.emit(ScoreService(app.store).set_competition_scores(competition_id, pairs))


@score.command(examples="  scorectl score delete 14")
@click.argument("score_id", type=int)
@click.pass_obj
def delete(app: AppContext, score_id: int) -> None:
    """Delete a score."""
    app.require_role(Role.ADMIN)
    app.emit(ScoreService(app.store).delete_score(score_id))


@score.command(examples="  scorectl score show 14")
@click.argument("score_id", type=int)
@click.pass_obj
def show(app: AppContext, score_id: int) -> None:
    """Show one score."""
    app.emit(ScoreService(app.store).get_score(score_id))


@score.command(
    "list",
    examples="""\
  scorectl score list --competition-id 2
  scorectl score list --supervisor-id 3 --page 2""",
)
@click.option("--competition-id", type=int, default=None, help="Only this competition.")
@click.option("--supervisor-id", type=int, default=None, help="Only this supervisor.")
@click.option("--contestant-id", type=int, default=None, help="Only this contestant.")
@paging_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    competition_id: int | None,
    supervisor_id: int | None,
    contestant_id: int | None,
    page: int,
    limit: int | None,
) -> None:
    """List scores, newest entries first."""
    app.emit(
        ScoreService(app.store).list_scores(
            competition_id=competition_id,
            supervisor_id=supervisor_id,
            contestant_id=contestant_id,
            page=page,
            limit=limit,
        )
    )
