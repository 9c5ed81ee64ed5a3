"""Traversal helpers over built trees."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .types import DirectoryNode, FileNode, FlatFile, TreeNode


def tree_sort_key(node: TreeNode) -> tuple[bool, str, str]:
    """Sort directories before files and then by case-folded label."""
    return (not isinstance(node, DirectoryNode), node.label.casefold(), node.label)


def iter_nodes(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield nodes in pre-order."""
    for node in nodes:
        yield node
        if isinstance(node, DirectoryNode):
            yield from iter_nodes(node.children)


def iter_file_nodes(nodes: Iterable[TreeNode]) -> Iterator[FileNode]:
    """Yield leaf nodes in pre-order."""
    for node in iter_nodes(nodes):
        if isinstance(node, FileNode):
            yield node


def collect_file_paths(node: TreeNode) -> list[str]:
    """Return leaf paths under ``node``; a leaf returns its own path."""
    if isinstance(node, FileNode):
        return [node.path]
    return [leaf.path for leaf in iter_file_nodes(node.children)]


def flatten_files(nodes: Iterable[TreeNode]) -> tuple[FlatFile, ...]:
    """Build the flat file index in tree order."""
    return tuple(FlatFile(label=leaf.label, path=leaf.path) for leaf in iter_file_nodes(nodes))


def sorted_flat_files(flat_files: Iterable[FlatFile]) -> list[FlatFile]:
    """Return flat files ordered by label, then path."""
    return sorted(flat_files, key=lambda item: (item.label.casefold(), item.label, item.path))


def find_node(nodes: Iterable[TreeNode], path: str) -> TreeNode | None:
    """Return the node whose path equals ``path``, or ``None``."""
    for node in iter_nodes(nodes):
        if node.path == path:
            return node
    return None


def contains_node(nodes: Iterable[TreeNode], node: TreeNode) -> bool:
    """Return whether a structurally equal ``node`` exists in ``nodes``."""
    return find_node(nodes, node.path) == node


__all__ = [
    "tree_sort_key",
    "iter_nodes",
    "iter_file_nodes",
    "collect_file_paths",
    "flatten_files",
    "sorted_flat_files",
    "find_node",
    "contains_node",
]
