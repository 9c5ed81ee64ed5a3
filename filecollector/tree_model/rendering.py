"""Plain-text tree rendering used for payload "project file tree" blocks."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .types import DirectoryNode, TreeNode
from .walk import find_node

BRANCH = "├─ "
LAST_BRANCH = "└─ "
PIPE = "│   "
SPACE = "    "


def render_tree_lines(
    nodes: Sequence[TreeNode],
    prefix: str = "",
    decorate: Callable[[TreeNode], str] | None = None,
) -> list[str]:
    """Render ``nodes`` as connector-prefixed lines.

    ``decorate`` may return a short marker placed before each label.
    """
    lines: list[str] = []
    for index, node in enumerate(nodes):
        is_last = index == len(nodes) - 1
        connector = LAST_BRANCH if is_last else BRANCH
        marker = decorate(node) if decorate is not None else ""
        label = f"{marker} {node.label}" if marker else node.label
        lines.append(f"{prefix}{connector}{label}")
        if isinstance(node, DirectoryNode):
            lines.extend(render_tree_lines(node.children, prefix + (SPACE if is_last else PIPE), decorate))
    return lines


def render_tree_text(
    nodes: Sequence[TreeNode],
    tree_root: str | None = None,
    decorate: Callable[[TreeNode], str] | None = None,
) -> str:
    """Render the whole tree, or only the subtree at ``tree_root`` when found."""
    root_node = find_node(nodes, tree_root) if tree_root else None
    selected = [root_node] if root_node is not None else list(nodes)
    return "".join(f"{line}\n" for line in render_tree_lines(selected, decorate=decorate))


__all__ = ["render_tree_lines", "render_tree_text"]
