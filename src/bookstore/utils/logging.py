"""
Project metadata helpers used to stamp `service` and `version` onto log records.

The installed distribution metadata is preferred; a source checkout that was
never installed falls back to the nearest pyproject.toml.
"""

from pathlib import Path
from importlib import metadata as importlib_metadata
from functools import lru_cache
from typing import Any
import tomllib

DISTRIBUTION_NAME = "bookstore-api"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


@lru_cache()
def _load_pyproject(start: Path) -> dict:
    pyproject = find_pyproject(start)
    if pyproject is None:
        return {}
    try:
        with pyproject.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def get_pyproject_value(key: str, default: Any = None) -> Any:
    """
    Return the value for a dot-separated `key` (e.g. "project.version") from the
    nearest pyproject.toml above this module, or `default`.
    """
    cur: Any = _load_pyproject(Path(__file__).resolve().parent)
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_name(default: str | None = None) -> str | None:
    return get_pyproject_value("project.name", default=default or DISTRIBUTION_NAME)


def get_project_version(default: str = "unknown") -> str:
    """
    Version of the running service.

    Installed metadata first (containers run an installed wheel), then
    project.version from pyproject.toml, then `default`.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        pass
    value = get_pyproject_value("project.version")
    return value if value is not None else default


__all__ = [
    "find_pyproject",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]
