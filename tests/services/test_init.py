"""Tests for InitService — store initialization."""

from __future__ import annotations

import tomllib
from pathlib import Path

from sqlalchemy import create_engine, text

from scorectl.services.init import InitService


class TestInitStore:
    def test_creates_config_and_database(self, tmp_path: Path) -> None:
        root = tmp_path / "club"
        result = InitService.init_store(root, name="Spring League")
        assert result.ok
        assert result.op == "init_store"
        assert result.data["name"] == "Spring League"
        config = tomllib.loads((root / "scorectl.toml").read_text(encoding="utf-8"))
        assert config == {"store": {"name": "Spring League"}}
        assert (root / ".scorectl" / "scorectl.db").is_file()

    def test_default_name_is_directory(self, tmp_path: Path) -> None:
        result = InitService.init_store(tmp_path / "olympiad")
        assert result.data["name"] == "olympiad"

    def test_database_is_stamped(self, tmp_path: Path) -> None:
        result = InitService.init_store(tmp_path)
        engine = create_engine(f"sqlite:///{result.data['db_path']}")
        try:
            with engine.connect() as conn:
                version = conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
        finally:
            engine.dispose()
        assert version == "001_baseline"
        assert result.data["revision"] == version

    def test_quotes_in_name(self, tmp_path: Path) -> None:
        InitService.init_store(tmp_path, name='The "A" Team')
        config = tomllib.loads((tmp_path / "scorectl.toml").read_text(encoding="utf-8"))
        assert config["store"]["name"] == 'The "A" Team'

    def test_keeps_existing_config(self, tmp_path: Path) -> None:
        (tmp_path / "scorectl.toml").write_text('[store]\nname = "kept"\n', encoding="utf-8")
        result = InitService.init_store(tmp_path, name="ignored")
        assert result.ok
        assert result.data["name"] == "kept"
        assert "Keeping existing scorectl.toml" in result.warnings

    def test_existing_store_conflicts(self, tmp_path: Path) -> None:
        assert InitService.init_store(tmp_path).ok
        result = InitService.init_store(tmp_path)
        assert result.error is not None
        assert result.error.code == "STATE_CONFLICT"
