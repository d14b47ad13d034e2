"""Enumerate the source files of a repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .config import GENERATED_MARKERS


def is_generated(path: Path, file_type: str, markers: Iterable[str] = GENERATED_MARKERS) -> bool:
    return any(path.name.endswith(f"{marker}{file_type}") for marker in markers)


def get_files_from_dir(
    root: Path,
    file_type: str,
    generated_markers: Optional[Iterable[str]] = None,
) -> List[Path]:
    """Return every file under *root* whose name ends with *file_type*.

    Generated artifacts (``foo_pb2.py`` for ``.py``) are skipped.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Couldn't list files of {root}: not a directory")

    markers = list(GENERATED_MARKERS if generated_markers is None else generated_markers)
    files: List[Path] = []
    for path in sorted(root.rglob(f"*{file_type}")):
        if not path.is_file():
            continue
        if is_generated(path, file_type, markers):
            continue
        files.append(path)
    return files
