"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from scorectl.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    # -- supervisor --
    (["supervisor", "--help"], ["add", "update", "delete", "show", "list"]),
    (["supervisor", "add", "--help"], ["NAME", "--hire-date", "--max-contestants"]),
    (["supervisor", "update", "--help"], ["SUPERVISOR_ID", "--inactive"]),
    (["supervisor", "list", "--help"], ["--search", "--page", "--limit"]),
    # -- contestant --
    (["contestant", "--help"], ["add", "search", "latest"]),
    (["contestant", "add", "--help"], ["--birth-date", "--education-level", "--supervisor-id"]),
    (["contestant", "list", "--help"], ["--supervisor-id", "--page"]),
    (["contestant", "search", "--help"], ["TERM"]),
    # -- competition --
    (["competition", "--help"], ["add", "update", "delete", "show", "list"]),
    (["competition", "add", "--help"], ["--start-date", "--end-date", "--passing-score"]),
    (["competition", "list", "--help"], ["--status", "upcoming", "ongoing", "ended"]),
    # -- score --
    (["score", "--help"], ["record", "update", "set", "delete", "list"]),
    (["score", "record", "--help"], ["SCORE_VALUE", "--competition-id", "--entry-date"]),
    (["score", "set", "--help"], ["COMPETITION_ID", "PAIRS"]),
    (["score", "list", "--help"], ["--competition-id", "--supervisor-id", "--contestant-id"]),
    # -- stats --
    (["stats", "--help"], ["competition", "supervisor", "contestant", "rank"]),
    (["stats", "rank", "--help"], ["SCORE_ID"]),
    # -- user --
    (["user", "--help"], ["add", "login", "passwd", "role", "deactivate", "list"]),
    (["user", "add", "--help"], ["--full-name", "--role", "--password"]),
    (["user", "role", "--help"], ["Change a user's role", "--examples"]),
    # -- transfer --
    (["export", "--help"], ["contestants", "supervisors", "scores", "results"]),
    (["export", "contestants", "--help"], ["OUTPUT", "--id"]),
    (["export", "results", "--help"], ["COMPETITION_ID", "OUTPUT"]),
    (["import", "--help"], ["contestants", "supervisors", "scores"]),
    (["import", "scores", "--help"], ["SOURCE"]),
    # -- standalone commands --
    (["init", "--help"], ["PATH", "--name"]),
    (["upgrade", "--help"], ["--check"]),
]


def _help_id(args_keywords: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = args_keywords
    return "_".join(a for a in args if a != "--help")


@pytest.mark.parametrize(
    "args,expected_keywords",
    HELP_COMMANDS,
    ids=[_help_id(item) for item in HELP_COMMANDS],
)
def test_command_help(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in help output for {args}"
