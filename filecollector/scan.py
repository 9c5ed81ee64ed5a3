"""Scan orchestration: rule caching, scan generations and selection state.

``ScanController`` owns the compiled-rule cache, the latest scan result and
the current selection. Each scan gets a monotonically increasing generation
number; a result whose generation is no longer current is discarded, which
is how a superseded scan is cancelled. Selection updates always replace the
whole set.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Sequence

from .ignore import IgnoreDecision, IgnoreItem, IgnoreRule, RuleSetCache
from .ignore import explain as explain_rules
from .selection import (
    SelectionChange,
    add_paths,
    compute_check_state,
    remove_paths,
    remove_paths_by_predicate,
    restore_selection,
    toggle_node,
)
from .tree_model import (
    EnumerateDirectory,
    ParallelTreeBuilder,
    ScanResult,
    TreeNode,
    build_tree,
    find_node,
    scan_directory,
)

logger = logging.getLogger(__name__)


class ScanController:
    """Coordinates scans of one project root and the selection over them."""

    def __init__(
        self,
        enumerate_directory: EnumerateDirectory = scan_directory,
        rule_cache: RuleSetCache | None = None,
        max_workers: int = 0,
    ) -> None:
        self.enumerate_directory = enumerate_directory
        self.rule_cache = rule_cache if rule_cache is not None else RuleSetCache()
        self.max_workers = max_workers
        self._lock = threading.Lock()
        self._generation = 0
        self.result: ScanResult | None = None
        self.rules: tuple[IgnoreRule, ...] = ()
        self.selection: frozenset[str] = frozenset()
        self.active_path: str | None = None

    # generations
    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def start_scan(self) -> int:
        """Open a new scan generation, superseding any in-flight scan."""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def build(
        self,
        root_path: str,
        items: Sequence[IgnoreItem],
        generation: int | None = None,
    ) -> tuple[ScanResult | None, tuple[IgnoreRule, ...]]:
        """Compile (or reuse) rules and build a tree for ``root_path``.

        The parallel builder is used when ``max_workers`` is positive; it stops
        between tree levels once ``generation`` has been superseded.
        """
        rules = self.rule_cache.get_rules(items)
        if self.max_workers > 0:
            builder = ParallelTreeBuilder(rules, self.enumerate_directory, self.max_workers)

            def superseded() -> bool:
                return generation is not None and not self.is_current(generation)

            return builder.build(root_path, should_cancel=superseded), rules
        return build_tree(root_path, self.enumerate_directory, rules), rules

    def accept(
        self,
        generation: int,
        result: ScanResult | None,
        rules: tuple[IgnoreRule, ...] = (),
    ) -> bool:
        """Install ``result`` if ``generation`` is still current.

        Installing a result resets the selection and the active path.
        """
        with self._lock:
            if generation != self._generation or result is None:
                logger.debug("Dropping result of stale scan generation %d", generation)
                return False
            self.result = result
            self.rules = tuple(rules)
            self.selection = frozenset()
            self.active_path = None
        return True

    def scan(self, root_path: str, items: Sequence[IgnoreItem]) -> ScanResult | None:
        """Run one complete scan; return ``None`` if it was superseded."""
        generation = self.start_scan()
        result, rules = self.build(root_path, items, generation)
        if not self.accept(generation, result, rules):
            return None
        return result

    # tree access
    @property
    def tree(self) -> tuple[TreeNode, ...]:
        return self.result.tree if self.result is not None else ()

    def find(self, path: str) -> TreeNode | None:
        return find_node(self.tree, path)

    def explain(self, relative_path: str) -> IgnoreDecision:
        """Explain the ignore decision for ``relative_path`` under current rules."""
        return explain_rules(self.rules, relative_path)

    # selection
    def check_states(self) -> dict[str, str]:
        return compute_check_state(self.tree, self.selection)

    def toggle(self, path: str) -> frozenset[str]:
        """Toggle the node at ``path``; raise ``ValueError`` if it is not in the tree."""
        node = self.find(path)
        if node is None:
            raise ValueError(f"path is not part of the current tree: {path}")
        self.selection = toggle_node(node, self.selection)
        return self.selection

    def restore(self, saved_paths: Iterable[str]) -> frozenset[str]:
        """Replace the selection with the saved paths still present."""
        flat_files = self.result.flat_files if self.result is not None else ()
        self.selection = restore_selection(saved_paths, flat_files)
        return self.selection

    def set_active(self, path: str | None) -> None:
        self.active_path = path

    def _apply(self, change: SelectionChange) -> SelectionChange:
        self.selection = change.selection
        if change.active_cleared:
            self.active_path = None
        return change

    def add(self, paths: Iterable[str]) -> SelectionChange:
        return self._apply(add_paths(self.selection, paths))

    def remove(self, paths: Iterable[str]) -> SelectionChange:
        return self._apply(remove_paths(self.selection, paths, active_path=self.active_path))

    def remove_where(self, predicate: Callable[[str], bool]) -> SelectionChange:
        return self._apply(remove_paths_by_predicate(self.selection, predicate, active_path=self.active_path))

    def clear_selection(self) -> SelectionChange:
        return self.remove_where(lambda _path: True)


__all__ = ["ScanController"]
