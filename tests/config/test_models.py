"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from scorectl.config.models import DefaultsConfig, ExportConfig, ScoreConfig


class TestDefaults:
    def test_code_defaults(self) -> None:
        config = ScoreConfig()
        assert config.store.db_filename == "scorectl.db"
        assert config.defaults.supervisor_max_contestants == 10
        assert config.defaults.competition_max_contestants == 100
        assert config.defaults.max_score == 100.0
        assert config.defaults.passing_score == 50.0
        assert config.listing.page_size == 10
        assert config.auth.enforce is False

    def test_export_formats(self) -> None:
        assert ExportConfig().date_format == "%Y-%m-%d"
        assert ExportConfig().datetime_format == "%Y-%m-%d %H:%M"


class TestBounds:
    @pytest.mark.parametrize("value", [0, 51])
    def test_supervisor_capacity_bounds(self, value: int) -> None:
        with pytest.raises(ValidationError):
            DefaultsConfig(supervisor_max_contestants=value)

    def test_score_bounds(self) -> None:
        with pytest.raises(ValidationError):
            DefaultsConfig(max_score=120)

    def test_frozen(self) -> None:
        config = ScoreConfig()
        with pytest.raises(ValidationError):
            config.store = config.store  # type: ignore[misc]
