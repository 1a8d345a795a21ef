"""
Project metadata used to label log records (service name and version).

Installed distributions answer through `importlib.metadata`; a source
checkout falls back to the nearest `pyproject.toml`.
"""

from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

DISTRIBUTION_NAME = "publication-assistant"


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


def load_pyproject_data(pyproject_path: Path) -> dict:
    try:
        import tomllib as toml_loader  # Python 3.11+
    except ImportError:
        import tomli as toml_loader

    with pyproject_path.open("rb") as f:
        return toml_loader.load(f)


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Return a dot-separated `key` ("project.version") from the nearest
    pyproject.toml above `start` (defaults to this module's folder), or
    `default` when the file or key is missing or unreadable.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent

    pyproject = find_pyproject(start_path, max_up=max_up)
    if pyproject is None or not key:
        return default

    try:
        data = load_pyproject_data(pyproject)
    except (OSError, ValueError):
        return default

    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def get_project_name(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str | None = None,
) -> str | None:
    try:
        return importlib_metadata.metadata(DISTRIBUTION_NAME)["Name"]
    except importlib_metadata.PackageNotFoundError:
        pass

    return get_pyproject_value("project.name", start=start, max_up=max_up, default=default)


def get_project_version(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str = "unknown",
) -> str:
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        pass

    version = get_pyproject_value("project.version", start=start, max_up=max_up)
    return version if version is not None else default


__all__ = [
    "find_pyproject",
    "load_pyproject_data",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]
