"""Locate the ``harbor.toml`` in effect for an invocation.

Lookup order: the ``--config`` flag, then ``HARBORCTL_CONFIG``, then a
walk up from the harbor home (or CWD) the way git finds ``.git/``.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "harbor.toml"
CONFIG_ENV_VAR = "HARBORCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Nearest ``harbor.toml`` at or above *start*, or the env override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(config_path: str | None, harbor_home: Path | None) -> Path | None:
    """Config file for a CLI invocation.

    An explicit *config_path* that does not exist means "no config";
    discovery is not attempted in that case.
    """
    if config_path:
        path = Path(config_path)
        return path if path.is_file() else None
    return find_config(harbor_home)
