import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

DISTRIBUTION_NAME = "school-records"

# --------------------
# Find pyproject.toml
# --------------------


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


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Return the value for `key` (dot-separated, e.g. "project.version") from the
    nearest pyproject.toml, or `default` when the file or key is missing.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent
    pyproject = find_pyproject(start=start_path, max_up=max_up)
    if not pyproject:
        return default

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur: Any = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_version(default: str = "unknown", prefer_installed: bool = True) -> str:
    """
    Version string stamped on JSON log lines.

    - installed distribution metadata first (containers, `pip install .`);
    - then project.version from a pyproject.toml above this package (source checkout);
    - `default` otherwise.
    """
    if prefer_installed:
        try:
            return importlib_metadata.version(DISTRIBUTION_NAME)
        except importlib_metadata.PackageNotFoundError:
            pass

    val = get_pyproject_value("project.version", max_up=6)
    return val if val is not None else default


__all__ = [
    "DISTRIBUTION_NAME",
    "find_pyproject",
    "get_pyproject_value",
    "get_project_version",
]
