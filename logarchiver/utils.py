from pathlib import Path
from typing import Union

from .errors import MissingArgumentError, PathNotFoundError


def ensure_path(path_str: Union[str, Path]) -> Path:
    """Return a resolved Path object and ensure it exists."""
    if path_str is None or str(path_str).strip() == "":
        raise MissingArgumentError("A path is required")
    p = Path(path_str).expanduser().resolve()
    if not p.exists():
        raise PathNotFoundError(f"Path does not exist: {p}")
    return p


def ensure_directory(path: Path) -> Path:
    if not path.exists() or not path.is_dir():
        raise PathNotFoundError(f"Directory not found: {path}")
    return path


def unique_path(dest: Path) -> Path:
    """
    If dest exists, append ' (1)', ' (2)', ... before the suffix.
    Returns a Path that does not exist.
    """
    if not dest.exists():
        return dest

    stem = dest.stem
    suffix = dest.suffix
    parent = dest.parent
    i = 1
    while True:
        candidate = parent / f"{stem} ({i}){suffix}"
        if not candidate.exists():
            return candidate
        i += 1
