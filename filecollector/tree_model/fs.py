"""Default filesystem-backed directory enumerator."""

from __future__ import annotations

import os

from .types import DirEntry


def scan_directory(path: str) -> list[DirEntry]:
    """List immediate children of ``path`` without following symlinks.

    Raises ``OSError`` when the directory cannot be read; callers decide how
    to recover.
    """
    entries: list[DirEntry] = []
    with os.scandir(path) as iterator:
        for child in iterator:
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            entries.append(DirEntry(name=child.name, is_dir=is_dir, full_path=child.path))
    return entries


__all__ = ["scan_directory"]
