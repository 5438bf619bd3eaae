"""Command group: derived statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup
from scorectl.services.stats import StatsService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_STATS_EXAMPLES = """\
  scorectl stats competition 2
  scorectl stats supervisor 3
  scorectl stats contestant 7
  scorectl stats rank 14"""


@click.group(cls=ScoreGroup, examples=_STATS_EXAMPLES)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Averages, pass rates and rankings."""


@stats.command("competition", examples="  scorectl --json stats competition 2")
@click.argument("competition_id", type=int)
@click.pass_obj
def competition_cmd(app: AppContext, competition_id: int) -> None:
    """Entry count, pass/fail split, average and success rate."""
    app.emit(StatsService(app.store).competition_statistics(competition_id))


@stats.command("supervisor", examples="  scorectl stats supervisor 3")
@click.argument("supervisor_id", type=int)
@click.pass_obj
def supervisor_cmd(app: AppContext, supervisor_id: int) -> None:
    """Group size, scores graded, average and free slots."""
    app.emit(StatsService(app.store).supervisor_statistics(supervisor_id))


@stats.command("contestant", examples="  scorectl stats contestant 7")
@click.argument("contestant_id", type=int)
@click.pass_obj
def contestant_cmd(app: AppContext, contestant_id: int) -> None:
    """A contestant's average over all their scores."""
    app.emit(StatsService(app.store).contestant_average(contestant_id))


@stats.command("rank", examples="  scorectl stats rank 14")
@click.argument("score_id", type=int)
@click.pass_obj
def rank_cmd(app: AppContext, score_id: int) -> None:
    """Rank of a score within its competition."""
    app.emit(StatsService(app.store).score_rank(score_id))
