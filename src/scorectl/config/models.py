"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, scorectl.toml only contains
overrides. A fresh store needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- scorectl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    name: str = "scorectl"
    db_filename: str = "scorectl.db"


class DefaultsConfig(BaseModel):
    """[defaults] section — values applied when a create omits them."""

    model_config = {"frozen": True}

    supervisor_max_contestants: int = Field(default=10, ge=1, le=50)
    competition_max_contestants: int = Field(default=100, ge=1)
    max_score: float = Field(default=100.0, ge=0, le=100)
    passing_score: float = Field(default=50.0, ge=0, le=100)


class ListingConfig(BaseModel):
    """[listing] section."""

    model_config = {"frozen": True}

    page_size: int = Field(default=10, ge=1)
    search_limit: int = Field(default=10, ge=1)


class AuthConfig(BaseModel):
    """[auth] section."""

    model_config = {"frozen": True}

    enforce: bool = False


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    date_format: str = "%Y-%m-%d"
    datetime_format: str = "%Y-%m-%d %H:%M"


class ScoreConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
