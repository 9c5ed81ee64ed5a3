"""Command-line front door for filecollector.

Scans a project directory with the saved ignore patterns plus any given on
the command line, then prints the filtered tree, the flat file list, search
hits, or the ignore decision for one path.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .ignore import IgnoreItem, explain, ignore_items_from_patterns
from .log import configure_logging
from .scan import ScanController
from .selection import check_markers, selected_in_tree_order
from .tree_model import relative_path, render_tree_text, search_flat_files

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show a project's files filtered by gitignore-style patterns."
    )
    parser.add_argument("path", nargs="?", default=None, help="Project directory. Defaults to current directory.")
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Extra ignore pattern, applied after saved ones (repeatable).",
    )
    parser.add_argument(
        "--gitignore",
        action="append",
        default=[],
        metavar="FILE",
        help="Read extra patterns from a .gitignore-style file (repeatable).",
    )
    parser.add_argument("--last", action="store_true", help="Scan the most recently scanned project.")
    parser.add_argument("--no-saved-patterns", action="store_true", help="Ignore the persisted pattern list.")
    parser.add_argument("--add-pattern", metavar="PATTERN", help="Persist PATTERN in the saved list and exit.")
    parser.add_argument("--import-gitignore", metavar="FILE", help="Append FILE's patterns to the saved list and exit.")
    parser.add_argument("--list-patterns", action="store_true", help="Print the saved pattern list and exit.")
    parser.add_argument(
        "--remove-pattern",
        type=_non_negative_int,
        metavar="INDEX",
        help="Remove the saved pattern at INDEX (see --list-patterns) and exit.",
    )
    parser.add_argument(
        "--replace-pattern",
        nargs=2,
        metavar=("INDEX", "PATTERN"),
        help="Replace the saved pattern at INDEX with PATTERN and exit.",
    )
    parser.add_argument("--list-contexts", action="store_true", help="Print saved contexts for the project and exit.")
    parser.add_argument("--save-context", metavar="NAME", help="Save the resulting selection as context NAME.")
    parser.add_argument("--load-context", metavar="NAME", help="Start from the selection saved as context NAME.")
    parser.add_argument("--delete-context", metavar="ID", help="Delete the saved context with ID and exit.")
    parser.add_argument("--files", action="store_true", help="Print the flat file list instead of the tree.")
    parser.add_argument("--search", metavar="QUERY", help="Print files whose path contains QUERY.")
    parser.add_argument("--check", metavar="PATH", help="Explain the ignore decision for PATH and exit.")
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="PATH",
        help="Toggle PATH (file or folder, relative to the project) in the selection (repeatable).",
    )
    parser.add_argument("--restore-selection", action="store_true", help="Start from the saved selection.")
    parser.add_argument("--save-selection", action="store_true", help="Persist the resulting selection.")
    parser.add_argument("--tree-root", metavar="PATH", help="Only print the subtree at PATH.")
    parser.add_argument(
        "--workers",
        type=_non_negative_int,
        default=0,
        help="Directory-listing worker threads (0 scans sequentially).",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING).")
    return parser


def _gather_items(args: argparse.Namespace) -> list[IgnoreItem]:
    """Saved patterns first, then files, then inline patterns; order matters."""
    items: list[IgnoreItem] = [] if args.no_saved_patterns else config.load_ignore_items()
    for raw_file in args.gitignore:
        try:
            text = Path(raw_file).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SystemExit(f"Cannot read ignore file {raw_file}: {exc}") from exc
        items.extend(config.parse_gitignore_text(text))
    items.extend(ignore_items_from_patterns(args.ignore))
    return items


def _resolve_in_root(root: Path, raw: str) -> str:
    candidate = Path(raw)
    if not candidate.is_absolute():
        candidate = root / candidate
    return str(candidate)


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one scan.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.list_patterns:
        for index, item in enumerate(config.load_ignore_items()):
            sys.stdout.write(f"{index}\t{item.pattern}\n")
        return
    if args.remove_pattern is not None:
        removed = config.remove_ignore_pattern(args.remove_pattern)
        if removed is None:
            raise SystemExit(f"No saved pattern at index {args.remove_pattern}")
        sys.stdout.write(f"Removed: {removed.pattern}\n")
        return
    if args.replace_pattern is not None:
        raw_index, pattern = args.replace_pattern
        try:
            index = _non_negative_int(raw_index)
        except argparse.ArgumentTypeError as exc:
            raise SystemExit(f"Invalid index {raw_index!r}: {exc}") from exc
        if not config.update_ignore_pattern(index, pattern):
            raise SystemExit(f"Cannot replace saved pattern at index {index}")
        sys.stdout.write(f"Replaced {index}: {pattern.strip()}\n")
        return
    if args.delete_context is not None:
        if not config.delete_context(args.delete_context):
            raise SystemExit(f"No saved context with id {args.delete_context}")
        sys.stdout.write(f"Deleted context {args.delete_context}\n")
        return
    if args.add_pattern is not None:
        added = config.add_ignore_pattern(args.add_pattern)
        sys.stdout.write(("Added" if added else "Already present") + f": {args.add_pattern.strip()}\n")
        return
    if args.import_gitignore is not None:
        try:
            count = config.import_gitignore_file(Path(args.import_gitignore))
        except OSError as exc:
            raise SystemExit(f"Cannot read ignore file {args.import_gitignore}: {exc}") from exc
        sys.stdout.write(f"Imported {count} new patterns\n")
        return

    if args.last and args.path is None:
        last_path = config.load_last_active_path()
        if last_path is None:
            raise SystemExit("No previously scanned project")
        default_path = Path(last_path)
    if default_path is None:
        default_path = Path.cwd()
    root = Path(args.path or default_path).resolve()
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")

    if args.list_contexts:
        for context in config.contexts_for_root(str(root)):
            sys.stdout.write(f"{context.id}\t{context.name}\t{len(context.paths)} files\n")
        return

    items = _gather_items(args)
    controller = ScanController(max_workers=args.workers)

    if args.check is not None:
        rules = controller.rule_cache.get_rules(items)
        target = Path(_resolve_in_root(root, args.check))
        rel = relative_path(str(root), str(target))
        if target.is_dir() and rel:
            rel = f"{rel}/"
        decision = explain(rules, rel)
        verdict = "ignored" if decision.ignored else "included"
        detail = ""
        if decision.rule is not None:
            detail = f" (last match: {decision.rule.original_pattern.strip()!r})"
        if decision.excluded_ancestor is not None:
            detail += f" (excluded ancestor: {decision.excluded_ancestor})"
        sys.stdout.write(f"{rel}: {verdict}{detail}\n")
        return

    result = controller.scan(str(root), items)
    if result is None:
        raise SystemExit("Scan was superseded before completing.")
    config.save_last_active_path(result.root_path)

    if args.restore_selection:
        controller.restore(config.load_selections_for_path(result.root_path))
    if args.load_context is not None:
        context = next(
            (item for item in config.contexts_for_root(result.root_path) if item.name == args.load_context.strip()),
            None,
        )
        if context is None:
            raise SystemExit(f"No saved context named {args.load_context}")
        controller.restore(context.paths)
    for raw in args.select:
        try:
            controller.toggle(_resolve_in_root(root, raw))
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
    if args.save_selection:
        config.save_selections_for_path(result.root_path, controller.selection)
    if args.save_context is not None:
        saved = config.save_context(args.save_context, result.root_path, controller.selection)
        if saved is None:
            raise SystemExit("Context name must not be blank")
        logger.info("Saved context %s (%s)", saved.name, saved.id)

    if args.search is not None:
        for item in search_flat_files(result.flat_files, args.search):
            sys.stdout.write(f"{item.path}\n")
        return
    if args.files:
        for item in result.flat_files:
            sys.stdout.write(f"{item.path}\n")
        return

    decorate = check_markers(controller.check_states()) if controller.selection else None
    tree_root = _resolve_in_root(root, args.tree_root) if args.tree_root else None
    if tree_root is not None and controller.find(tree_root) is None:
        raise SystemExit(f"path is not part of the current tree: {tree_root}")
    sys.stdout.write(f"{result.root_path}\n")
    sys.stdout.write(render_tree_text(result.tree, tree_root=tree_root, decorate=decorate))
    if controller.selection:
        selected = selected_in_tree_order(result.tree, controller.selection)
        sys.stdout.write(f"\n{len(selected)} files selected\n")


if __name__ == "__main__":
    main()
