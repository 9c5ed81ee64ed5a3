"""End-to-end tests for ``filecollector.cli.main`` over real temp projects.

Config stores are redirected to a temp directory so saved patterns,
selections and contexts never touch the user's config.
"""

from __future__ import annotations

import io
import logging
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from filecollector import cli, config


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        base = Path(tmp.name).resolve()
        self.root = base / "proj"
        self.config_dir = base / "cfg"
        for name, filename in (
            ("IGNORE_ITEMS_PATH", "gitignores.json"),
            ("SESSION_PATH", "session.json"),
            ("CONTEXTS_PATH", "contexts.json"),
        ):
            patcher = mock.patch(f"filecollector.config.{name}", self.config_dir / filename)
            patcher.start()
            self.addCleanup(patcher.stop)

        package_logger = logging.getLogger("filecollector")
        saved = (list(package_logger.handlers), package_logger.level, package_logger.propagate)

        def restore_logging() -> None:
            package_logger.handlers = saved[0]
            package_logger.setLevel(saved[1])
            package_logger.propagate = saved[2]

        self.addCleanup(restore_logging)

        (self.root / "src" / "lib").mkdir(parents=True)
        (self.root / "src" / "lib" / "a.py").write_text("", encoding="utf-8")
        (self.root / "src" / "main.py").write_text("", encoding="utf-8")
        (self.root / "README.md").write_text("", encoding="utf-8")
        (self.root / "debug.log").write_text("", encoding="utf-8")
        (self.root / "build").mkdir()
        (self.root / "build" / "keep.txt").write_text("", encoding="utf-8")

    def run_cli(self, *argv: str) -> str:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            cli.main(argv=list(argv))
        return stdout.getvalue()


class CliScanTests(CliTestCase):
    def test_prints_filtered_tree(self) -> None:
        output = self.run_cli(str(self.root), "-i", "*.log", "-i", "build/", "-i", "!build/keep.txt")

        self.assertEqual(
            output,
            f"{self.root}\n├─ src\n│   ├─ lib\n│   │   └─ a.py\n│   └─ main.py\n└─ README.md\n",
        )

    def test_files_lists_flat_index(self) -> None:
        output = self.run_cli(str(self.root), "--files", "-i", "*.log", "-i", "build/")

        self.assertEqual(
            output.splitlines(),
            [str(self.root / "src" / "lib" / "a.py"), str(self.root / "src" / "main.py"), str(self.root / "README.md")],
        )

    def test_search_prints_matching_files(self) -> None:
        output = self.run_cli(str(self.root), "--search", "MAIN")

        self.assertEqual(output.splitlines(), [str(self.root / "src" / "main.py")])

    def test_defaults_to_current_working_directory(self) -> None:
        previous_cwd = Path.cwd()
        try:
            os.chdir(self.root)
            with mock.patch.object(sys, "argv", ["filecollector", "--files"]), redirect_stdout(io.StringIO()) as out:
                cli.main()
        finally:
            os.chdir(previous_cwd)

        self.assertIn(str(self.root / "debug.log"), out.getvalue().splitlines())

    def test_default_path_argument_is_used_without_positional_path(self) -> None:
        output = self.run_cli_with_default("--files")

        self.assertIn(str(self.root / "README.md"), output.splitlines())

    def run_cli_with_default(self, *argv: str) -> str:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            cli.main(default_path=self.root, argv=list(argv))
        return stdout.getvalue()

    def test_missing_directory_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self.run_cli(str(self.root / "nope"))

    def test_saved_patterns_apply_before_inline_ones(self) -> None:
        config.add_ignore_pattern("*.md")

        output = self.run_cli(str(self.root), "--files", "-i", "!README.md")
        skipped = self.run_cli(str(self.root), "--files", "--no-saved-patterns")

        self.assertIn(str(self.root / "README.md"), output.splitlines())
        self.assertIn(str(self.root / "README.md"), skipped.splitlines())
        self.assertNotIn(str(self.root / "README.md"), self.run_cli(str(self.root), "--files").splitlines())

    def test_gitignore_file_patterns_are_applied(self) -> None:
        ignore_file = self.root / ".gitignore"
        ignore_file.write_text("*.log\n.gitignore\n", encoding="utf-8")

        output = self.run_cli(str(self.root), "--files", "--gitignore", str(ignore_file))

        self.assertNotIn(str(self.root / "debug.log"), output.splitlines())
        self.assertNotIn(str(ignore_file), output.splitlines())

    def test_scan_records_last_active_path(self) -> None:
        self.run_cli(str(self.root), "--files")

        self.assertEqual(config.load_last_active_path(), str(self.root))
        self.assertEqual(self.run_cli("--last", "--files"), self.run_cli(str(self.root), "--files"))


class CliCheckTests(CliTestCase):
    def test_check_reports_excluded_ancestor(self) -> None:
        output = self.run_cli(str(self.root), "-i", "build/", "-i", "!build/keep.txt", "--check", "build/keep.txt")

        self.assertEqual(
            output,
            "build/keep.txt: ignored (last match: '!build/keep.txt') (excluded ancestor: build/)\n",
        )

    def test_check_marks_directories_with_trailing_slash(self) -> None:
        output = self.run_cli(str(self.root), "--no-saved-patterns", "--check", "src")

        self.assertEqual(output, "src/: included\n")


class CliSelectionTests(CliTestCase):
    def test_select_marks_tree_and_counts(self) -> None:
        output = self.run_cli(str(self.root), "-i", "*.log", "-i", "build/", "--select", "src")

        lines = output.splitlines()
        self.assertIn("├─ [x] src", lines)
        self.assertIn("└─ [ ] README.md", lines)
        self.assertEqual(lines[-1], "2 files selected")

    def test_unknown_tree_root_exits_without_printing(self) -> None:
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit) as raised:
            cli.main(argv=[str(self.root), "-i", "build/", "--tree-root", "build"])

        self.assertIn("not part of the current tree", str(raised.exception.code))
        self.assertEqual(stdout.getvalue(), "")

    def test_select_unknown_path_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self.run_cli(str(self.root), "-i", "*.log", "--select", "debug.log")

    def test_saved_selection_is_restored(self) -> None:
        self.run_cli(str(self.root), "--select", "README.md", "--save-selection")

        output = self.run_cli(str(self.root), "--restore-selection", "--tree-root", "src")

        self.assertEqual(config.load_selections_for_path(str(self.root)), [str(self.root / "README.md")])
        self.assertIn("1 files selected", output)
        self.assertTrue(output.splitlines()[1].startswith("└─ [ ] src"))

    def test_contexts_can_be_saved_listed_and_loaded(self) -> None:
        self.run_cli(str(self.root), "--select", "src/main.py", "--save-context", "entry")

        listing = self.run_cli(str(self.root), "--list-contexts")
        loaded = self.run_cli(str(self.root), "--load-context", "entry", "--files")
        tree = self.run_cli(str(self.root), "--load-context", "entry")

        context_id, name, count = listing.strip().split("\t")
        self.assertEqual((name, count), ("entry", "1 files"))
        self.assertIn(str(self.root / "src" / "main.py"), loaded.splitlines())
        self.assertIn("1 files selected", tree)

        self.assertEqual(self.run_cli("--delete-context", context_id), f"Deleted context {context_id}\n")
        with self.assertRaises(SystemExit):
            self.run_cli(str(self.root), "--load-context", "entry")


class CliPatternStoreTests(CliTestCase):
    def test_add_list_replace_and_remove_patterns(self) -> None:
        self.assertEqual(self.run_cli("--add-pattern", "*.log"), "Added: *.log\n")
        self.assertEqual(self.run_cli("--add-pattern", "*.log"), "Already present: *.log\n")
        self.run_cli("--add-pattern", "tmp/")

        self.assertEqual(self.run_cli("--list-patterns"), "0\t*.log\n1\ttmp/\n")
        self.assertEqual(self.run_cli("--replace-pattern", "1", "cache/"), "Replaced 1: cache/\n")
        self.assertEqual(self.run_cli("--remove-pattern", "0"), "Removed: *.log\n")
        self.assertEqual(self.run_cli("--list-patterns"), "0\tcache/\n")

        with self.assertRaises(SystemExit):
            self.run_cli("--remove-pattern", "4")

    def test_import_gitignore(self) -> None:
        ignore_file = self.root / ".gitignore"
        ignore_file.write_text("# comment\n*.log\nbuild/\n", encoding="utf-8")

        self.assertEqual(self.run_cli("--import-gitignore", str(ignore_file)), "Imported 2 new patterns\n")
        self.assertEqual([item.pattern for item in config.load_ignore_items()], ["*.log", "build/"])


if __name__ == "__main__":
    unittest.main()
