"""Thread-pool tree builder.

Per-directory enumerate-and-filter jobs run on a ``ThreadPoolExecutor`` one
tree level at a time. Each job is a stateless request/response over the
complete compiled rule set; the next level is submitted only after every
directory of the current level has settled, and the tree is assembled on the
calling thread afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from ..ignore import IgnoreRule
from .build import DirectoryListing, EnumerateDirectory, assemble_children, filter_directory
from .fs import scan_directory
from .types import ScanResult, TreeNode
from .walk import flatten_files

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class ParallelTreeBuilder:
    """Build filtered trees with directory listings fetched concurrently."""

    def __init__(
        self,
        rules: Sequence[IgnoreRule] = (),
        enumerate_directory: EnumerateDirectory = scan_directory,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.rules = tuple(rules)
        self.enumerate_directory = enumerate_directory
        self.max_workers = max(1, max_workers)

    def _collect_listings(
        self,
        root: str,
        should_cancel: Callable[[], bool] | None,
    ) -> dict[str, DirectoryListing] | None:
        """Fetch listings breadth-first; return ``None`` when cancelled."""
        listings: dict[str, DirectoryListing] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="filecollector-scan") as executor:
            frontier: list[tuple[str, str]] = [(root, "")]
            while frontier:
                if should_cancel is not None and should_cancel():
                    return None
                jobs: list[tuple[str, Future[DirectoryListing]]] = [
                    (
                        directory,
                        executor.submit(
                            filter_directory,
                            directory,
                            relative_dir,
                            self.enumerate_directory,
                            self.rules,
                        ),
                    )
                    for directory, relative_dir in frontier
                ]
                next_frontier: list[tuple[str, str]] = []
                for directory, future in jobs:
                    listing = future.result()
                    listings[directory] = listing
                    next_frontier.extend(
                        (visible.entry.full_path, visible.relative_path) for visible in listing.directories
                    )
                frontier = next_frontier
        return listings

    def build(
        self,
        root_path: str,
        should_cancel: Callable[[], bool] | None = None,
    ) -> ScanResult | None:
        """Build a ``ScanResult`` for ``root_path``.

        Returns ``None`` when ``should_cancel`` reports cancellation between
        levels.
        """
        root = str(root_path)
        listings = self._collect_listings(root, should_cancel)
        if listings is None:
            logger.info("Scan of %s cancelled", root)
            return None

        def build_children(directory: str) -> list[TreeNode]:
            listing = listings.get(directory, DirectoryListing())
            return assemble_children(listing, lambda visible: build_children(visible.entry.full_path))

        tree = tuple(build_children(root))
        flat_files = flatten_files(tree)
        logger.info("Scanned %s with %d workers: %d files visible", root, self.max_workers, len(flat_files))
        return ScanResult(root_path=root, tree=tree, flat_files=flat_files)


__all__ = ["DEFAULT_MAX_WORKERS", "ParallelTreeBuilder"]
