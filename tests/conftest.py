"""Shared pytest fixtures and test helpers for scorectl tests."""

from __future__ import annotations

import json
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from scorectl.cli import cli
from scorectl.config.settings import ScoreSettings
from scorectl.infrastructure.database.engine import init_database
from scorectl.infrastructure.store import Store
from scorectl.services.telemetry import enable_telemetry

# Every store fixture sees this as "now": a Monday in the middle of the
# default competition window used by make_competition().
NOW = datetime(2024, 1, 15, 12, 0)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer SCORECTL_* variables out of the tests."""
    for var in ("SCORECTL_CONFIG", "SCORECTL_USER", "SCORECTL_ROOT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    """A ``-v`` invocation must not leave span collection on for later tests."""
    yield
    enable_telemetry(False)


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


def build_store(root: Path, *, now: datetime = NOW, **settings: Any) -> Store:
    """Store on *root* with a fixed clock."""
    return Store(ScoreSettings.from_cli(root=root, **settings), clock=lambda: now)


@pytest.fixture
def store(tmp_path: Path) -> Generator[Store]:
    """Fully initialized store on a temp directory, frozen at :data:`NOW`."""
    s = build_store(tmp_path)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_store")`` on command test
    classes. Tests that need the path can also request ``tmp_path`` directly
    (pytest deduplicates, it's the same directory).
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def make_supervisor(store: Store, name: str = "Amina Haddad", **kwargs: Any) -> dict[str, Any]:
    """Create a supervisor via SupervisorService, asserting success."""
    from scorectl.services.supervisor import SupervisorService

    fields = {
        "name": name,
        "hire_date": "2019-09-01",
        "department": "Mathematics",
        "qualification": "MSc Applied Mathematics",
        **kwargs,
    }
    result = SupervisorService(store).create_supervisor(fields)
    assert result.ok, result.error
    return result.data


def make_contestant(store: Store, name: str = "Yasmine Kaci", **kwargs: Any) -> dict[str, Any]:
    """Create a contestant via ContestantService, asserting success."""
    from scorectl.services.contestant import ContestantService

    fields = {
        "name": name,
        "birth_date": "2010-04-12",
        "education_level": "Middle school",
        **kwargs,
    }
    result = ContestantService(store).create_contestant(fields)
    assert result.ok, result.error
    return result.data


def make_competition(
    store: Store, title: str = "Winter Olympiad", **kwargs: Any
) -> dict[str, Any]:
    """Create a competition (ongoing at :data:`NOW` by default), asserting success."""
    from scorectl.services.competition import CompetitionService

    fields = {
        "title": title,
        "start_date": "2024-01-10",
        "end_date": "2024-01-20",
        **kwargs,
    }
    result = CompetitionService(store).create_competition(fields)
    assert result.ok, result.error
    return result.data


def record(
    store: Store,
    competition: dict[str, Any],
    contestant: dict[str, Any],
    value: float,
    **kwargs: Any,
) -> dict[str, Any]:
    """Record a score by the contestant's own supervisor, asserting success."""
    from scorectl.services.score import ScoreService

    result = ScoreService(store).record_score(
        competition["id"],
        contestant["id"],
        contestant["supervisor_id"],
        value,
        **kwargs,
    )
    assert result.ok, result.error
    return result.data


def invoke_json(runner: CliRunner, *args: str) -> dict[str, Any]:
    """Run ``scorectl --json <args>`` and return the parsed success payload."""
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)
