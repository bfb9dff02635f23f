"""
Project root and `.env` helpers.

Settings usually name the catalog by a relative path (`data/insurance-data.csv`).
It resolves against the project root rather than the working directory, so the
API, the CLI and the tests read the same file wherever they are started from.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = (".env", "pyproject.toml", ".git")


def _is_project_root(path: Path) -> bool:
    return any((path / marker).exists() for marker in _ROOT_MARKERS)


@lru_cache
def get_project_root() -> Path:
    """Nearest marked directory above the cwd, then above this package; else the cwd."""
    for start in (Path.cwd().resolve(), Path(__file__).resolve().parent):
        for candidate in (start, *start.parents):
            if _is_project_root(candidate):
                return candidate
    return Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<project root>/.env` once. Variables already set in the process win."""
    env_path = get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()
