"""Command group: contestant registration and lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup, given, paging_options
from scorectl.domain.types import Role
from scorectl.services.contestant import ContestantService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_CONTESTANT_EXAMPLES = """\
  scorectl contestant add "Yasmine Kaci" --birth-date 2010-04-12 \\
      --education-level "Middle school" --supervisor-id 3
  scorectl contestant search yas
  scorectl contestant latest 7"""


@click.group(cls=ScoreGroup, examples=_CONTESTANT_EXAMPLES)
@click.pass_obj
def contestant(app: AppContext) -> None:
    """Register and look up contestants."""


@contestant.command(
    examples="""\
  scorectl contestant add "Yasmine Kaci" --birth-date 2010-04-12 \\
      --education-level "Middle school"
  scorectl contestant add "Karim Saadi" --birth-date 2008-11-30 \\
      --education-level "High school" --supervisor-id 3"""
)
@click.argument("name")
@click.option("--birth-date", required=True, help="Birth date (YYYY-MM-DD).")
@click.option("--education-level", required=True, help="Current education level.")
@click.option("--address", default=None, help="Postal address.")
@click.option("--supervisor-id", type=int, default=None, help="Assigned supervisor.")
@click.option(
    "--registration-number", default=None, help="Registration number (generated when omitted)."
)
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    birth_date: str,
    education_level: str,
    address: str | None,
    supervisor_id: int | None,
    registration_number: str | None,
    notes: str | None,
) -> None:
    """Register a new contestant."""
    app.require_role(Role.EDITOR)
    fields = given(
        name=name,
        birth_date=birth_date,
        education_level=education_level,
        address=address,
        supervisor_id=supervisor_id,
        registration_number=registration_number,
        notes=notes,
    )
    app.emit(ContestantService(app.store).create_contestant(fields))


@contestant.command(
    examples="""\
  scorectl contestant update 7 --supervisor-id 4
  scorectl contestant update 7 --education-level "High school" --inactive"""
)
@click.argument("contestant_id", type=int)
@click.option("--name", default=None, help="New name.")
@click.option("--birth-date", default=None, help="Birth date (YYYY-MM-DD).")
@click.option("--education-level", default=None, help="Current education level.")
@click.option("--address", default=None, help="Postal address.")
@click.option("--supervisor-id", type=int, default=None, help="Reassign to this supervisor.")
@click.option("--active/--inactive", "is_active", default=None, help="Active flag.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def update(
    app: AppContext,
    contestant_id: int,
    name: str | None,
    birth_date: str | None,
    education_level: str | None,
    address: str | None,
    supervisor_id: int | None,
    is_active: bool | None,
    notes: str | None,
) -> None:
    """Update fields of an existing contestant."""
    app.require_role(Role.EDITOR)
    changes = given(
        name=name,
        birth_date=birth_date,
        education_level=education_level,
        address=address,
        supervisor_id=supervisor_id,
        is_active=is_active,
        notes=notes,
    )
    app.emit(ContestantService(app.store).update_contestant(contestant_id, changes))


@contestant.command(examples="  scorectl contestant delete 7")
@click.argument("contestant_id", type=int)
@click.pass_obj
def delete(app: AppContext, contestant_id: int) -> None:
    """Delete a contestant and their scores."""
    app.require_role(Role.ADMIN)
    app.emit(ContestantService(app.store).delete_contestant(contestant_id))


@contestant.command(examples="  scorectl contestant show 7")
@click.argument("contestant_id", type=int)
@click.pass_obj
def show(app: AppContext, contestant_id: int) -> None:
    """Show one contestant."""
    app.emit(ContestantService(app.store).get_contestant(contestant_id))


@contestant.command(
    "list",
    examples="""\
  scorectl contestant list
  scorectl contestant list --supervisor-id 3 --limit 20""",
)
@click.option("--search", default=None, help="Case-insensitive name filter.")
@click.option("--supervisor-id", type=int, default=None, help="Only this supervisor's group.")
@paging_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    search: str | None,
    supervisor_id: int | None,
    page: int,
    limit: int | None,
) -> None:
    """List contestants, sorted by name."""
    app.emit(
        ContestantService(app.store).list_contestants(
            search=search, supervisor_id=supervisor_id, page=page, limit=limit
        )
    )


@contestant.command(
    examples="""\
  scorectl contestant search kac
  scorectl contestant search sa --supervisor-id 3"""
)
@click.argument("term")
@click.option("--supervisor-id", type=int, default=None, help="Only this supervisor's group.")
@click.pass_obj
def search(app: AppContext, term: str, supervisor_id: int | None) -> None:
    """Quick name search."""
    app.emit(ContestantService(app.store).search_contestants(term, supervisor_id=supervisor_id))


@contestant.command(examples="  scorectl contestant latest 7")
@click.argument("contestant_id", type=int)
@click.pass_obj
def latest(app: AppContext, contestant_id: int) -> None:
    """Show a contestant's most recent score."""
    app.emit(ContestantService(app.store).get_latest_score(contestant_id))
