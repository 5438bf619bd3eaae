"""Store discovery.

The store root is the nearest directory, walking up from the working
directory, that holds ``scorectl.toml`` or the ``.scorectl/`` state
directory (a store created without a config file still has the latter).
``SCORECTL_CONFIG`` and ``--config`` pin the config file explicitly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, NamedTuple

import click

CONFIG_FILENAME = "scorectl.toml"
CONFIG_ENV_VAR = "SCORECTL_CONFIG"
STATE_DIRNAME = ".scorectl"


class StoreLocation(NamedTuple):
    root: Path
    config_path: Path | None


def find_store(start: Path | None = None) -> StoreLocation | None:
    """Return the nearest store around *start* (default: cwd), or None.

    A config file wins over a bare state directory in the same folder.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        config = directory / CONFIG_FILENAME
        if config.is_file():
            return StoreLocation(directory, config)
        if (directory / STATE_DIRNAME).is_dir():
            return StoreLocation(directory, None)
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start*.

    ``SCORECTL_CONFIG`` is checked first; when it names a missing file
    there is no config at all rather than a fallback to walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    location = find_store(start)
    return location.config_path if location else None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML. Syntax errors surface as a CLI error."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
