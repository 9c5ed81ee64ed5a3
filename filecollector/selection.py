"""Tri-state multi-select over built trees.

The selection is a frozen set of absolute leaf paths. Every operation here is
a pure function of ``(tree, selection)`` and returns a replacement set; node
object identity is never cached because trees are rebuilt on every rescan.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from .tree_model import FileNode, FlatFile, TreeNode, collect_file_paths, contains_node

CHECKED = "checked"
UNCHECKED = "unchecked"
INDETERMINATE = "indeterminate"

CHECK_STATES = (CHECKED, UNCHECKED, INDETERMINATE)


@dataclass(frozen=True)
class SelectionChange:
    """Replacement selection plus what a removal did to it.

    ``active_cleared`` is set when the caller's active (previewed) path was
    among the removed paths, so dependent UI state can be reset.
    """

    selection: frozenset[str]
    removed: frozenset[str] = frozenset()
    active_cleared: bool = False


def _state_for_counts(total: int, selected: int) -> str:
    if total == 0 or selected == 0:
        return UNCHECKED
    if selected == total:
        return CHECKED
    return INDETERMINATE


def compute_check_state(tree: Sequence[TreeNode], selection: Iterable[str]) -> dict[str, str]:
    """Map every node path in ``tree`` to its check state.

    A leaf is checked iff selected. A directory is unchecked when none of its
    descendant files are selected (or it has none), checked when all are, and
    indeterminate otherwise.
    """
    selected_paths = selection if isinstance(selection, (set, frozenset)) else frozenset(selection)
    states: dict[str, str] = {}

    def visit(node: TreeNode) -> tuple[int, int]:
        if isinstance(node, FileNode):
            checked = node.path in selected_paths
            states[node.path] = CHECKED if checked else UNCHECKED
            return 1, int(checked)
        total = 0
        selected = 0
        for child in node.children:
            child_total, child_selected = visit(child)
            total += child_total
            selected += child_selected
        states[node.path] = _state_for_counts(total, selected)
        return total, selected

    for node in tree:
        visit(node)
    return states


def toggle_node(
    node: TreeNode,
    selection: Iterable[str],
    tree: Sequence[TreeNode] | None = None,
) -> frozenset[str]:
    """Toggle every leaf under ``node``.

    When all leaves are already selected they are all removed; otherwise all
    are added, so a partially checked folder always becomes fully checked.
    Toggling a folder without leaves returns the selection unchanged.

    Raises ``ValueError`` when ``tree`` is given and does not contain ``node``.
    """
    if tree is not None and not contains_node(tree, node):
        raise ValueError(f"node is not part of the given tree: {node.path}")

    current = frozenset(selection)
    paths = collect_file_paths(node)
    if not paths:
        return current
    if all(path in current for path in paths):
        return current.difference(paths)
    return current.union(paths)


def add_paths(selection: Iterable[str], paths: Iterable[str]) -> SelectionChange:
    """Return the selection with ``paths`` added."""
    return SelectionChange(selection=frozenset(selection).union(paths))


def remove_paths(
    selection: Iterable[str],
    paths: Iterable[str],
    active_path: str | None = None,
) -> SelectionChange:
    """Return the selection with ``paths`` removed."""
    current = frozenset(selection)
    removed = current.intersection(paths)
    return SelectionChange(
        selection=current.difference(removed),
        removed=removed,
        active_cleared=active_path is not None and active_path in removed,
    )


def remove_paths_by_predicate(
    selection: Iterable[str],
    predicate: Callable[[str], bool],
    active_path: str | None = None,
) -> SelectionChange:
    """Return the selection without the paths for which ``predicate`` holds."""
    current = frozenset(selection)
    return remove_paths(current, [path for path in current if predicate(path)], active_path=active_path)


def restore_selection(saved_paths: Iterable[str], flat_files: Iterable[FlatFile]) -> frozenset[str]:
    """Bulk-load a saved selection, keeping only paths still in the index."""
    existing = {item.path for item in flat_files}
    return frozenset(path for path in saved_paths if path in existing)


def selected_in_tree_order(tree: Sequence[TreeNode], selection: Iterable[str]) -> list[str]:
    """Return selected leaf paths ordered as they appear in ``tree``."""
    selected_paths = frozenset(selection)
    ordered: list[str] = []
    for node in tree:
        ordered.extend(path for path in collect_file_paths(node) if path in selected_paths)
    return ordered


def check_markers(states: Mapping[str, str]) -> Callable[[TreeNode], str]:
    """Return a ``[x]``/``[-]``/``[ ]`` decorator for tree text rendering."""
    markers = {CHECKED: "[x]", INDETERMINATE: "[-]", UNCHECKED: "[ ]"}

    def decorate(node: TreeNode) -> str:
        return markers[states.get(node.path, UNCHECKED)]

    return decorate


__all__ = [
    "CHECKED",
    "UNCHECKED",
    "INDETERMINATE",
    "CHECK_STATES",
    "SelectionChange",
    "compute_check_state",
    "toggle_node",
    "add_paths",
    "remove_paths",
    "remove_paths_by_predicate",
    "restore_selection",
    "selected_in_tree_order",
    "check_markers",
]
