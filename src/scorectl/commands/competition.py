"""Command group: competition records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup, given, paging_options
from scorectl.domain.types import CompetitionStatus, Role
from scorectl.services.competition import CompetitionService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_COMPETITION_EXAMPLES = """\
  scorectl competition add "Spring Olympiad" --start-date 2024-03-01 --end-date 2024-03-31
  scorectl competition list --status ongoing
  scorectl competition show 2"""


@click.group(cls=ScoreGroup, examples=_COMPETITION_EXAMPLES)
@click.pass_obj
def competition(app: AppContext) -> None:
    """Manage competitions."""


@competition.command(
    examples="""\
  scorectl competition add "Spring Olympiad" --start-date 2024-03-01 --end-date 2024-03-31
  scorectl competition add "Regional Final" --start-date 2024-05-10 --end-date 2024-05-12 \\
      --max-score 20 --passing-score 12 --max-contestants 40"""
)
@click.argument("title")
@click.option("--start-date", required=True, help="First day (YYYY-MM-DD).")
@click.option("--end-date", required=True, help="Last day, inclusive (YYYY-MM-DD).")
@click.option("--description", default=None, help="Description.")
@click.option("--max-score", type=float, default=None, help="Highest attainable score.")
@click.option("--passing-score", type=float, default=None, help="Score needed to pass.")
@click.option("--max-contestants", type=int, default=None, help="Entry limit.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def add(
    app: AppContext,
    title: str,
    start_date: str,
    end_date: str,
    description: str | None,
    max_score: float | None,
    passing_score: float | None,
    max_contestants: int | None,
    notes: str | None,
) -> None:
    """Create a new competition."""
    app.require_role(Role.EDITOR)
    fields = given(
        title=title,
        start_date=start_date,
        end_date=end_date,
        description=description,
        max_score=max_score,
        passing_score=passing_score,
        max_contestants=max_contestants,
        notes=notes,
    )
    app.emit(CompetitionService(app.store).create_competition(fields))


@competition.command(
    examples="""\
  scorectl competition update 2 --end-date 2024-04-07
  scorectl competition update 2 --passing-score 55"""
)
@click.argument("competition_id", type=int)
@click.option("--title", default=None, help="New title.")
@click.option("--start-date", default=None, help="First day (YYYY-MM-DD).")
@click.option("--end-date", default=None, help="Last day, inclusive (YYYY-MM-DD).")
@click.option("--description", default=None, help="Description.")
@click.option("--max-score", type=float, default=None, help="Highest attainable score.")
@click.option("--passing-score", type=float, default=None, help="Score needed to pass.")
@click.option("--max-contestants", type=int, default=None, help="Entry limit.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def update(
    app: AppContext,
    competition_id: int,
    title: str | None,
    start_date: str | None,
    end_date: str | None,
    description: str | None,
    max_score: float | None,
    passing_score: float | None,
    max_contestants: int | None,
    notes: str | None,
) -> None:
    """Update fields of an existing competition."""
    app.require_role(Role.EDITOR)
    changes = given(
        title=title,
        start_date=start_date,
        end_date=end_date,
        description=description,
        max_score=max_score,
        passing_score=passing_score,
        max_contestants=max_contestants,
        notes=notes,
    )
    app.emit(CompetitionService(app.store).update_competition(competition_id, changes))


@competition.command(examples="  scorectl competition delete 2")
@click.argument("competition_id", type=int)
@click.pass_obj
def delete(app: AppContext, competition_id: int) -> None:
    """Delete a competition with no recorded scores."""
    app.require_role(Role.ADMIN)
    app.emit(CompetitionService(app.store).delete_competition(competition_id))


@competition.command(examples="  scorectl competition show 2")
@click.argument("competition_id", type=int)
@click.pass_obj
def show(app: AppContext, competition_id: int) -> None:
    """Show one competition with status and statistics."""
    app.emit(CompetitionService(app.store).get_competition(competition_id))


@competition.command(
    "list",
    examples="""\
  scorectl competition list
  scorectl competition list --status upcoming --search olymp""",
)
@click.option("--search", default=None, help="Case-insensitive title filter.")
@click.option(
    "--status",
    type=click.Choice([s.value for s in CompetitionStatus], case_sensitive=False),
    default=None,
    help="Only competitions in this state today.",
)
@paging_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    search: str | None,
    status: str | None,
    page: int,
    limit: int | None,
) -> None:
    """List competitions, most recent first."""
    app.emit(
        CompetitionService(app.store).list_competitions(
            search=search,
            status=status.lower() if status else None,
            page=page,
            limit=limit,
        )
    )
