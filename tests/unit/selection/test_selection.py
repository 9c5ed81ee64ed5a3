"""Tests for tri-state check states and selection updates."""

from __future__ import annotations

import itertools
import unittest

from filecollector.selection import (
    CHECKED,
    INDETERMINATE,
    UNCHECKED,
    add_paths,
    check_markers,
    compute_check_state,
    remove_paths,
    remove_paths_by_predicate,
    restore_selection,
    selected_in_tree_order,
    toggle_node,
)
from filecollector.tree_model import DirectoryNode, FileNode, FlatFile

A = FileNode(label="a.py", path="/r/src/a.py")
B = FileNode(label="b.py", path="/r/src/b.py")
C = FileNode(label="c.md", path="/r/c.md")
SRC = DirectoryNode(label="src", path="/r/src", children=(A, B))
TREE = (SRC, C)


class ComputeCheckStateTests(unittest.TestCase):
    def test_nothing_selected(self) -> None:
        states = compute_check_state(TREE, frozenset())

        self.assertEqual(set(states.values()), {UNCHECKED})
        self.assertEqual(set(states), {SRC.path, A.path, B.path, C.path})

    def test_partial_directory_is_indeterminate(self) -> None:
        states = compute_check_state(TREE, {A.path})

        self.assertEqual(states[A.path], CHECKED)
        self.assertEqual(states[B.path], UNCHECKED)
        self.assertEqual(states[SRC.path], INDETERMINATE)

    def test_fully_selected_directory_is_checked(self) -> None:
        states = compute_check_state(TREE, [A.path, B.path])

        self.assertEqual(states[SRC.path], CHECKED)
        self.assertEqual(states[C.path], UNCHECKED)

    def test_directory_without_leaves_is_unchecked(self) -> None:
        empty = DirectoryNode(label="empty", path="/r/empty")

        self.assertEqual(compute_check_state((empty,), {"/r/empty"}), {"/r/empty": UNCHECKED})

    def test_every_subset_of_leaves_maps_to_matching_folder_state(self) -> None:
        leaves = [A.path, B.path, C.path]
        folder_leaves = {A.path, B.path}

        for size in range(len(leaves) + 1):
            for subset in itertools.combinations(leaves, size):
                selected = frozenset(subset)
                with self.subTest(selected=sorted(selected)):
                    states = compute_check_state(TREE, selected)

                    for leaf in leaves:
                        self.assertEqual(states[leaf], CHECKED if leaf in selected else UNCHECKED)
                    chosen = folder_leaves & selected
                    if chosen == folder_leaves:
                        self.assertEqual(states[SRC.path], CHECKED)
                    elif not chosen:
                        self.assertEqual(states[SRC.path], UNCHECKED)
                    else:
                        self.assertEqual(states[SRC.path], INDETERMINATE)

    def test_unknown_selected_paths_do_not_affect_states(self) -> None:
        states = compute_check_state(TREE, {"/elsewhere/x.py"})

        self.assertEqual(set(states.values()), {UNCHECKED})


class ToggleNodeTests(unittest.TestCase):
    def test_toggle_leaf(self) -> None:
        selected = toggle_node(A, frozenset())

        self.assertEqual(selected, frozenset({A.path}))
        self.assertEqual(toggle_node(A, selected), frozenset())

    def test_toggle_unchecked_folder_selects_all_leaves(self) -> None:
        self.assertEqual(toggle_node(SRC, {C.path}), frozenset({A.path, B.path, C.path}))

    def test_toggle_checked_folder_clears_its_leaves_only(self) -> None:
        self.assertEqual(toggle_node(SRC, {A.path, B.path, C.path}), frozenset({C.path}))

    def test_toggle_partial_folder_checks_it_fully(self) -> None:
        selected = toggle_node(SRC, {A.path})

        self.assertEqual(selected, frozenset({A.path, B.path}))
        self.assertEqual(compute_check_state(TREE, selected)[SRC.path], CHECKED)

    def test_double_toggle_restores_all_or_none_states(self) -> None:
        for start in (frozenset(), frozenset({A.path, B.path})):
            with self.subTest(start=sorted(start)):
                self.assertEqual(toggle_node(SRC, toggle_node(SRC, start)), start)

    def test_toggle_leafless_folder_is_a_no_op(self) -> None:
        empty = DirectoryNode(label="empty", path="/r/empty")

        self.assertEqual(toggle_node(empty, {C.path}), frozenset({C.path}))

    def test_toggle_node_outside_tree_raises(self) -> None:
        stranger = FileNode(label="x.py", path="/other/x.py")

        with self.assertRaises(ValueError):
            toggle_node(stranger, frozenset(), tree=TREE)

    def test_toggle_does_not_mutate_input(self) -> None:
        original = {A.path}

        toggle_node(SRC, original)

        self.assertEqual(original, {A.path})


class SelectionUpdateTests(unittest.TestCase):
    def test_add_paths_is_a_union(self) -> None:
        change = add_paths({A.path}, [B.path, A.path])

        self.assertEqual(change.selection, frozenset({A.path, B.path}))
        self.assertFalse(change.active_cleared)

    def test_remove_paths_reports_removed_and_active(self) -> None:
        change = remove_paths({A.path, B.path}, [B.path, C.path], active_path=B.path)

        self.assertEqual(change.selection, frozenset({A.path}))
        self.assertEqual(change.removed, frozenset({B.path}))
        self.assertTrue(change.active_cleared)

    def test_remove_paths_keeps_unrelated_active_path(self) -> None:
        change = remove_paths({A.path, B.path}, [B.path], active_path=A.path)

        self.assertFalse(change.active_cleared)

    def test_remove_by_predicate(self) -> None:
        change = remove_paths_by_predicate(
            {A.path, B.path, C.path},
            lambda path: path.endswith(".py"),
            active_path=C.path,
        )

        self.assertEqual(change.selection, frozenset({C.path}))
        self.assertEqual(change.removed, frozenset({A.path, B.path}))
        self.assertFalse(change.active_cleared)

    def test_restore_keeps_only_paths_still_indexed(self) -> None:
        flat = (FlatFile(label="a.py", path=A.path), FlatFile(label="c.md", path=C.path))

        restored = restore_selection([A.path, "/r/deleted.txt", C.path], flat)

        self.assertEqual(restored, frozenset({A.path, C.path}))

    def test_selected_in_tree_order(self) -> None:
        self.assertEqual(selected_in_tree_order(TREE, {C.path, B.path}), [B.path, C.path])

    def test_check_markers(self) -> None:
        decorate = check_markers(compute_check_state(TREE, {A.path}))

        self.assertEqual(decorate(A), "[x]")
        self.assertEqual(decorate(SRC), "[-]")
        self.assertEqual(decorate(C), "[ ]")


if __name__ == "__main__":
    unittest.main()
