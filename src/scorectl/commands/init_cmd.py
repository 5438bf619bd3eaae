"""Command: store initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from scorectl.commands._base import ScoreCommand

if TYPE_CHECKING:
    from scorectl.commands._context import AppContext

_INIT_EXAMPLES = """\
  scorectl init
  scorectl init /srv/olympiad --name "Spring Olympiad 2024"
  scorectl --json init ./records"""


@click.command("init", cls=ScoreCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Store name (defaults to the directory name).")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None) -> None:
    """Initialize a new scorectl store."""
    from scorectl.services.init import InitService

    app.emit(InitService.init_store(Path(path), name=name))
