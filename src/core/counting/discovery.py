"""Target directory validation and regular-file enumeration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List

from common.errors import PathError


def resolve_directory(target: str | os.PathLike[str]) -> Path:
    """Return ``target`` as a Path, raising PathError unless it is a directory."""

    path = Path(target)
    if not path.exists():
        raise PathError(path, "Path does not exist")
    if not path.is_dir():
        raise PathError(path, "Not a directory")
    return path


def list_regular_files(directory: Path) -> List[Path]:
    """Regular files directly inside ``directory``, sorted by name.

    Entries that are not regular files themselves (symlinks included) are skipped
    without being opened.
    """

    files: List[Path] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file(follow_symlinks=False):
                files.append(Path(entry.path))
    files.sort(key=lambda item: item.name)
    return files
