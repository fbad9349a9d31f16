"""Locate the edcert.toml that applies to a run.

Precedence: ``-c/--config``, then ``EDCERT_CONFIG``, then the first
``edcert.toml`` found walking up from the working directory.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

CONFIG_FILENAME = "edcert.toml"
CONFIG_ENV_VAR = "EDCERT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest edcert.toml at or above *start* (default: cwd)."""
    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: str | None = None, *, search_from: Path | None = None) -> Path | None:
    """Pick the config file for this invocation.

    A file named by ``--config`` or ``EDCERT_CONFIG`` must exist; only the
    walk-up search may come back empty.

    Raises:
        click.ClickException: The named config file does not exist.
    """
    for origin, named in (("--config", explicit), (CONFIG_ENV_VAR, os.environ.get(CONFIG_ENV_VAR))):
        if not named:
            continue
        path = Path(named).expanduser()
        if not path.is_file():
            msg = f"Config file from {origin} not found: {path}"
            raise click.ClickException(msg)
        return path
    return find_config(search_from)
