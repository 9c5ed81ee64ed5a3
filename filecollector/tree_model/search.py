"""Substring search over the flat file index."""

from __future__ import annotations

from collections.abc import Iterable

from .types import FlatFile


def search_flat_files(flat_files: Iterable[FlatFile], query: str, limit: int | None = None) -> list[FlatFile]:
    """Return files whose path contains ``query`` case-insensitively.

    A blank query yields no results. Input order is preserved.
    """
    needle = query.strip().casefold()
    if not needle:
        return []
    results: list[FlatFile] = []
    for item in flat_files:
        if needle in item.path.casefold():
            results.append(item)
            if limit is not None and len(results) >= limit:
                break
    return results


__all__ = ["search_flat_files"]
