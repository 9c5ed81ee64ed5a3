"""Domain model for filtered project file trees.

This package contains non-UI tree primitives:
- file/directory node datatypes with nested children
- ignore-aware tree construction (sequential and thread-pool)
- traversal, text rendering and flat-index search helpers
"""

from __future__ import annotations

from .build import (
    DirectoryListing,
    EnumerateDirectory,
    VisibleEntry,
    build_tree,
    filter_directory,
    join_relative,
    relative_path,
)
from .fs import scan_directory
from .parallel import DEFAULT_MAX_WORKERS, ParallelTreeBuilder
from .rendering import render_tree_lines, render_tree_text
from .search import search_flat_files
from .types import DirEntry, DirectoryNode, FileNode, FlatFile, ScanResult, TreeNode
from .walk import (
    collect_file_paths,
    contains_node,
    find_node,
    flatten_files,
    iter_file_nodes,
    iter_nodes,
    sorted_flat_files,
    tree_sort_key,
)

__all__ = [
    "DirEntry",
    "FileNode",
    "DirectoryNode",
    "TreeNode",
    "FlatFile",
    "ScanResult",
    "EnumerateDirectory",
    "VisibleEntry",
    "DirectoryListing",
    "scan_directory",
    "build_tree",
    "filter_directory",
    "join_relative",
    "relative_path",
    "DEFAULT_MAX_WORKERS",
    "ParallelTreeBuilder",
    "render_tree_lines",
    "render_tree_text",
    "search_flat_files",
    "collect_file_paths",
    "contains_node",
    "find_node",
    "flatten_files",
    "iter_file_nodes",
    "iter_nodes",
    "sorted_flat_files",
    "tree_sort_key",
]
