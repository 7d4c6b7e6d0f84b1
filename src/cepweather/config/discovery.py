"""Locate cepweather.toml.

Lookup order: the ``CEPWEATHER_CONFIG`` env var, then a walk up from the
starting directory to the filesystem root (the way git finds ``.git/``).
An explicit ``--config`` flag bypasses discovery entirely.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "cepweather.toml"
CONFIG_ENV_VAR = "CEPWEATHER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest cepweather.toml at or above *start* (default: cwd).

    A set but dangling ``CEPWEATHER_CONFIG`` yields None rather than
    falling back to the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        return pinned if pinned.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
