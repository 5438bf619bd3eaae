"""Tests for the init and upgrade commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from scorectl.cli import cli
from tests.conftest import invoke_json


@pytest.mark.usefixtures("_isolated_store")
class TestInitCommand:
    def test_init_here(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = invoke_json(cli_runner, "init", ".", "--name", "Spring Olympiad")
        assert data["data"]["name"] == "Spring Olympiad"
        assert Path(data["data"]["db_path"]).exists()
        config = (tmp_path / "scorectl.toml").read_text(encoding="utf-8")
        assert 'name = "Spring Olympiad"' in config

    def test_init_subdirectory_defaults_name(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = invoke_json(cli_runner, "init", "records")
        assert data["data"]["root"] == str((tmp_path / "records").resolve())
        assert data["data"]["name"] == "records"

    def test_init_twice_conflicts(self, cli_runner: CliRunner) -> None:
        invoke_json(cli_runner, "init", "records")
        result = cli_runner.invoke(cli, ["--json", "init", "records"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "STATE_CONFLICT"

    def test_initialized_store_is_current(self, cli_runner: CliRunner) -> None:
        invoke_json(cli_runner, "init")
        data = invoke_json(cli_runner, "upgrade", "--check")
        assert data["data"]["pending_count"] == 0


@pytest.mark.usefixtures("_isolated_store")
class TestUpgradeCommand:
    def test_check_on_implicit_store(self, cli_runner: CliRunner) -> None:
        data = invoke_json(cli_runner, "upgrade", "--check")
        assert data["op"] == "upgrade"
        assert data["data"]["current"] == data["data"]["head"]
        assert data["data"]["pending_count"] == 0

    def test_apply_when_current(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = invoke_json(cli_runner, "upgrade")
        assert data["data"]["applied_count"] == 0
        assert "backup_path" not in data["data"]
        assert not (tmp_path / ".scorectl" / "backups").exists()

    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upgrade", "--check"])
        assert result.exit_code == 0
        assert "001_baseline" in result.stdout
