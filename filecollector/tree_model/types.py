"""Domain datatypes for filtered project file trees."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirEntry:
    """One raw directory-listing entry produced by an enumerator."""

    name: str
    is_dir: bool
    full_path: str


@dataclass(frozen=True)
class FileNode:
    """Leaf node; ``path`` is the absolute path and stable selection identity."""

    label: str
    path: str


@dataclass(frozen=True)
class DirectoryNode:
    """Directory node with sorted, non-empty children."""

    label: str
    path: str
    children: tuple["TreeNode", ...] = ()


TreeNode = DirectoryNode | FileNode


@dataclass(frozen=True)
class FlatFile:
    """Flat file-index row for one leaf of the tree."""

    label: str
    path: str


@dataclass(frozen=True)
class ScanResult:
    """Tree plus flat file index produced by one scan of ``root_path``."""

    root_path: str
    tree: tuple[TreeNode, ...]
    flat_files: tuple[FlatFile, ...]


__all__ = [
    "DirEntry",
    "FileNode",
    "DirectoryNode",
    "TreeNode",
    "FlatFile",
    "ScanResult",
]
