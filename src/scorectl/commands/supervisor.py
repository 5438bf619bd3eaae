"""Command group: supervisor records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup, given, paging_options
from scorectl.domain.types import Role
from scorectl.services.supervisor import SupervisorService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_SUPERVISOR_EXAMPLES = """\
  scorectl supervisor add "Amina Haddad" --hire-date 2019-09-01 \\
      --department Mathematics --qualification "MSc Applied Mathematics"
  scorectl supervisor update 3 --max-contestants 12
  scorectl supervisor list --search amina
  scorectl --json supervisor show 3"""


@click.group(cls=ScoreGroup, examples=_SUPERVISOR_EXAMPLES)
@click.pass_obj
def supervisor(app: AppContext) -> None:
    """Manage supervisors and their contestant limits."""


@supervisor.command(
    examples="""\
  scorectl supervisor add "Amina Haddad" --hire-date 2019-09-01 \\
      --department Mathematics --qualification "MSc Applied Mathematics"
  scorectl supervisor add "Omar Benali" --hire-date 2021-01-10 --department Physics \\
      --qualification PhD --employee-id SUP-2021-004 --max-contestants 5"""
)
@click.argument("name")
@click.option("--hire-date", required=True, help="Hire date (YYYY-MM-DD).")
@click.option("--department", required=True, help="Department.")
@click.option("--qualification", required=True, help="Highest qualification.")
@click.option("--employee-id", default=None, help="Employee id (generated when omitted).")
@click.option("--max-contestants", type=int, default=None, help="Contestant limit.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    hire_date: str,
    department: str,
    qualification: str,
    employee_id: str | None,
    max_contestants: int | None,
    notes: str | None,
) -> None:
    """Create a new supervisor."""
    app.require_role(Role.ADMIN)
    fields = given(
        name=name,
        hire_date=hire_date,
        department=department,
        qualification=qualification,
        employee_id=employee_id,
        max_contestants=max_contestants,
        notes=notes,
    )
    app.emit(SupervisorService(app.store).create_supervisor(fields))


@supervisor.command(
    examples="""\
  scorectl supervisor update 3 --department Physics
  scorectl supervisor update 3 --max-contestants 4 --inactive"""
)
@click.argument("supervisor_id", type=int)
@click.option("--name", default=None, help="New name.")
@click.option("--hire-date", default=None, help="Hire date (YYYY-MM-DD).")
@click.option("--department", default=None, help="Department.")
@click.option("--qualification", default=None, help="Highest qualification.")
@click.option("--max-contestants", type=int, default=None, help="Contestant limit.")
@click.option("--active/--inactive", "is_active", default=None, help="Active flag.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def update(
    app: AppContext,
    supervisor_id: int,
    name: str | None,
    hire_date: str | None,
    department: str | None,
    qualification: str | None,
    max_contestants: int | None,
    is_active: bool | None,
    notes: str | None,
) -> None:
    """Update fields of an existing supervisor."""
    app.require_role(Role.ADMIN)
    changes = given(
        name=name,
        hire_date=hire_date,
        department=department,
        qualification=qualification,
        max_contestants=max_contestants,
        is_active=is_active,
        notes=notes,
    )
    app.emit(SupervisorService(app.store).update_supervisor(supervisor_id, changes))


@supervisor.command(examples="  scorectl supervisor delete 3")
@click.argument("supervisor_id", type=int)
@click.pass_obj
def delete(app: AppContext, supervisor_id: int) -> None:
    """Delete a supervisor with no assigned contestants."""
    app.require_role(Role.ADMIN)
    app.emit(SupervisorService(app.store).delete_supervisor(supervisor_id))


@supervisor.command(examples="  scorectl supervisor show 3")
@click.argument("supervisor_id", type=int)
@click.pass_obj
def show(app: AppContext, supervisor_id: int) -> None:
    """Show one supervisor with statistics."""
    app.emit(SupervisorService(app.store).get_supervisor(supervisor_id))


@supervisor.command(
    "list",
    examples="""\
  scorectl supervisor list
  scorectl supervisor list --search ben --page 2 --limit 5""",
)
@click.option("--search", default=None, help="Case-insensitive name filter.")
@paging_options
@click.pass_obj
def list_cmd(app: AppContext, search: str | None, page: int, limit: int | None) -> None:
    """List supervisors, sorted by name."""
    app.emit(SupervisorService(app.store).list_supervisors(search=search, page=page, limit=limit))
