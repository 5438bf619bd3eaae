"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from scorectl.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["supervisor", "--examples"], ["scorectl supervisor add", "--search amina"]),
    (["supervisor", "add", "--examples"], ["--employee-id SUP-2021-004"]),
    (["supervisor", "update", "--examples"], ["--inactive"]),
    (["contestant", "--examples"], ["scorectl contestant"]),
    (["contestant", "latest", "--examples"], ["scorectl contestant latest 7"]),
    (["competition", "--examples"], ["scorectl competition"]),
    (["competition", "list", "--examples"], ["--status upcoming"]),
    (["score", "--examples"], ["scorectl score record", "scorectl score set"]),
    (["score", "record", "--examples"], ["--entry-date"]),
    (["score", "set", "--examples"], ["7=88"]),
    (["stats", "--examples"], ["scorectl stats rank 14"]),
    (["user", "--examples"], ["scorectl user"]),
    (["user", "role", "--examples"], ["--user admin"]),
    (["export", "--examples"], ["scorectl export results"]),
    (["export", "contestants", "--examples"], ["--id 3 --id 7"]),
    (["import", "--examples"], ["scorectl import supervisors"]),
    (["init", "--examples"], ["scorectl init"]),
    (["upgrade", "--examples"], ["scorectl upgrade --check"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


class TestExamplesInHelp:
    """``--examples`` shows up in the help of every command that has examples."""

    @pytest.mark.parametrize(
        "args",
        [
            ["supervisor", "--help"],
            ["contestant", "add", "--help"],
            ["score", "set", "--help"],
            ["export", "--help"],
            ["init", "--help"],
            ["upgrade", "--help"],
        ],
    )
    def test_examples_option_listed(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "--examples" in result.output
