"""Filtered tree construction from enumerated directory entries.

Descent is strictly top-down: a directory is enumerated only after its own
ignore decision is known, so excluded subtrees are never read. Directories
left without visible children are dropped rather than emitted empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ..ignore import IgnoreRule, is_ignored
from .fs import scan_directory
from .types import DirEntry, DirectoryNode, FileNode, ScanResult, TreeNode
from .walk import flatten_files, tree_sort_key

logger = logging.getLogger(__name__)

EnumerateDirectory = Callable[[str], Iterable[DirEntry]]


@dataclass(frozen=True)
class VisibleEntry:
    """Entry that survived ignore filtering plus its scan-relative path."""

    entry: DirEntry
    relative_path: str


@dataclass(frozen=True)
class DirectoryListing:
    """Filtered children of one directory split into folders and files."""

    directories: tuple[VisibleEntry, ...] = ()
    files: tuple[VisibleEntry, ...] = ()


def join_relative(relative_dir: str, name: str) -> str:
    """Join a scan-relative directory and a child name with ``/``."""
    return f"{relative_dir}/{name}" if relative_dir else name


def relative_path(root_path: str, full_path: str) -> str:
    """Return ``full_path`` relative to ``root_path`` with forward slashes."""
    normalized_root = root_path.replace("\\", "/").rstrip("/")
    normalized = full_path.replace("\\", "/")
    if normalized == normalized_root:
        return ""
    if normalized.startswith(f"{normalized_root}/"):
        normalized = normalized[len(normalized_root) :]
    return normalized.lstrip("/")


def filter_directory(
    directory: str,
    relative_dir: str,
    enumerate_directory: EnumerateDirectory,
    rules: Sequence[IgnoreRule],
) -> DirectoryListing:
    """Enumerate ``directory`` and drop ignored children.

    Directories are tested with a trailing slash. An unreadable directory is
    logged and treated as empty.
    """
    try:
        entries = list(enumerate_directory(directory))
    except OSError as exc:
        logger.warning("Cannot read directory %s: %s", directory, exc)
        return DirectoryListing()

    directories: list[VisibleEntry] = []
    files: list[VisibleEntry] = []
    for entry in entries:
        if not entry.name:
            continue
        child_relative = join_relative(relative_dir, entry.name)
        path_to_check = f"{child_relative}/" if entry.is_dir else child_relative
        if rules and is_ignored(rules, path_to_check):
            continue
        visible = VisibleEntry(entry=entry, relative_path=child_relative)
        if entry.is_dir:
            directories.append(visible)
        else:
            files.append(visible)
    return DirectoryListing(directories=tuple(directories), files=tuple(files))


def assemble_children(
    listing: DirectoryListing,
    build_subdirectory: Callable[[VisibleEntry], Sequence[TreeNode]],
) -> list[TreeNode]:
    """Turn a filtered listing into sorted nodes, dropping empty folders."""
    nodes: list[TreeNode] = []
    for visible in listing.directories:
        children = build_subdirectory(visible)
        if not children:
            continue
        nodes.append(
            DirectoryNode(
                label=visible.entry.name,
                path=visible.entry.full_path,
                children=tuple(children),
            )
        )
    for visible in listing.files:
        nodes.append(FileNode(label=visible.entry.name, path=visible.entry.full_path))
    nodes.sort(key=tree_sort_key)
    return nodes


def build_tree(
    root_path: str,
    enumerate_directory: EnumerateDirectory = scan_directory,
    rules: Sequence[IgnoreRule] = (),
) -> ScanResult:
    """Build the filtered tree and flat file index for ``root_path``.

    Returns a brand-new ``ScanResult`` every call; nothing is shared with
    earlier scans.
    """
    root = str(root_path)

    def build_children(directory: str, relative_dir: str) -> list[TreeNode]:
        listing = filter_directory(directory, relative_dir, enumerate_directory, rules)
        return assemble_children(
            listing,
            lambda visible: build_children(visible.entry.full_path, visible.relative_path),
        )

    tree = tuple(build_children(root, ""))
    flat_files = flatten_files(tree)
    logger.info("Scanned %s: %d files visible", root, len(flat_files))
    return ScanResult(root_path=root, tree=tree, flat_files=flat_files)


__all__ = [
    "EnumerateDirectory",
    "VisibleEntry",
    "DirectoryListing",
    "join_relative",
    "relative_path",
    "filter_directory",
    "assemble_children",
    "build_tree",
]
