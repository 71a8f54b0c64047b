"""
Project root and `.env` handling.

The provider catalog path in settings is usually relative (`data/providers.json`);
it is resolved against the project root, which is `PROXIMITY_PROJECT_ROOT` when set
or else the nearest directory above the CWD holding `pyproject.toml` or `.env`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = ("pyproject.toml", ".env")


@lru_cache
def get_project_root() -> Path:
    override = os.getenv("PROXIMITY_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).is_file() for marker in _ROOT_MARKERS):
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `PROXIMITY_ENV_FILE` (or `<root>/.env`) once; set variables are never overridden."""
    explicit = os.getenv("PROXIMITY_ENV_FILE")
    env_path = Path(explicit).expanduser() if explicit else get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
