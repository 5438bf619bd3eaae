"""Subcommand modules for scorectl.

Provides register_commands() which uses deferred imports to keep
``scorectl --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    Uses deferred imports so modules are only loaded when actually invoked.
    """
    # --- Groups ---
    from scorectl.commands.competition import competition
    from scorectl.commands.contestant import contestant
    from scorectl.commands.export import export
    from scorectl.commands.import_cmd import import_cmd
    from scorectl.commands.score import score
    from scorectl.commands.stats import stats
    from scorectl.commands.supervisor import supervisor
    from scorectl.commands.user import user

    cli.add_command(supervisor)
    cli.add_command(contestant)
    cli.add_command(competition)
    cli.add_command(score)
    cli.add_command(stats)
    cli.add_command(user)
    cli.add_command(export)
    cli.add_command(import_cmd)

    # --- Standalone commands ---
    from scorectl.commands.init_cmd import init_cmd
    from scorectl.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(upgrade)
