"""Command group: user accounts and roles."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreGroup
from scorectl.domain.types import Role
from scorectl.services.user import UserService

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_USER_EXAMPLES = """\
  scorectl user add admin --full-name "Store Admin" --role admin
  scorectl user login admin
  scorectl --user admin user role nadia editor
  scorectl user list"""

_ROLE_CHOICE = click.Choice([r.value for r in Role], case_sensitive=False)


@click.group(cls=ScoreGroup, examples=_USER_EXAMPLES)
@click.pass_obj
def user(app: AppContext) -> None:
    """Manage user accounts."""


@user.command(
    examples="""\
  scorectl user add admin --full-name "Store Admin" --role admin
  scorectl user add nadia --full-name "Nadia Ferhat" --password s3cret"""
)
@click.argument("username")
@click.option("--full-name", required=True, help="Display name.")
@click.option("--role", type=_ROLE_CHOICE, default=Role.VIEWER.value, help="Account role.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted when omitted).",
)
@click.pass_obj
def add(app: AppContext, username: str, full_name: str, role: str, password: str) -> None:
    """Create a user account.

    The first account of a store can always be created; after that an
    admin is required.
    """
    svc = UserService(app.store)
    if svc.list_users().data["count"]:
        app.require_role(Role.ADMIN)
    app.emit(svc.create_user(username, password, full_name=full_name, role=role.lower()))


@user.command(examples="  scorectl user login nadia")
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True, help="Password.")
@click.pass_obj
def login(app: AppContext, username: str, password: str) -> None:
    """Check credentials and record the login time."""
    app.emit(UserService(app.store).authenticate(username, password))


@user.command(examples="  scorectl user passwd nadia")
@click.argument("username")
@click.option("--current-password", prompt=True, hide_input=True, help="Current password.")
@click.option(
    "--new-password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="New password.",
)
@click.pass_obj
def passwd(app: AppContext, username: str, current_password: str, new_password: str) -> None:
    """Change a user's password."""
    app.emit(
        UserService(app.store).change_password(
            username, new_password, current_password=current_password
        )
    )


@user.command(examples="  scorectl --user admin user role nadia editor")
@click.argument("username")
@click.argument("role", type=_ROLE_CHOICE)
@click.pass_obj
def role(app: AppContext, username: str, role: str) -> None:
    """Change a user's role."""
    app.require_role(Role.ADMIN)
    app.emit(UserService(app.store).set_role(username, role.lower()))


@user.command(examples="  scorectl --user admin user deactivate nadia")
@click.argument("username")
@click.pass_obj
def deactivate(app: AppContext, username: str) -> None:
    """Disable an account."""
    app.require_role(Role.ADMIN)
    app.emit(UserService(app.store).deactivate(username))


@user.command("list", examples="  scorectl user list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List user accounts."""
    app.emit(UserService(app.store).list_users())
