"""Tests for store discovery and config reading."""

from pathlib import Path

import click
import pytest

from scorectl.config.discovery import (
    CONFIG_FILENAME,
    STATE_DIRNAME,
    find_config,
    find_store,
    read_config,
)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[store]\nname = "test"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[store]\nname = "test"\n')
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[store]\nname = "env"\n')
        monkeypatch.setenv("SCORECTL_CONFIG", str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("SCORECTL_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestFindStore:
    def test_state_dir_marks_root(self, tmp_path: Path) -> None:
        (tmp_path / STATE_DIRNAME).mkdir()
        child = tmp_path / "exports"
        child.mkdir()
        location = find_store(child)
        assert location is not None
        assert location.root == tmp_path
        assert location.config_path is None

    def test_nearest_marker_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        inner = tmp_path / "inner"
        (inner / STATE_DIRNAME).mkdir(parents=True)
        location = find_store(inner)
        assert location is not None
        assert location.root == inner

    def test_config_preferred_in_same_dir(self, tmp_path: Path) -> None:
        (tmp_path / STATE_DIRNAME).mkdir()
        (tmp_path / CONFIG_FILENAME).write_text("")
        location = find_store(tmp_path)
        assert location is not None
        assert location.config_path == tmp_path / CONFIG_FILENAME


class TestReadConfig:
    def test_sections(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[listing]\npage_size = 25\n[auth]\nenforce = true\n")
        assert read_config(path) == {"listing": {"page_size": 25}, "auth": {"enforce": True}}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[store\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            read_config(path)
