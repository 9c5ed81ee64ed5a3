"""Explicit compiled-rule cache keyed by pattern-list content hash.

The cache is an object owned by whoever orchestrates scans; there is no
process-wide cache. Editing the ignore list produces a new key, and callers
may drop stale entries with ``invalidate``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from collections.abc import Iterable, Sequence

from .compiler import IgnoreItem, IgnoreRule, compile_rules

logger = logging.getLogger(__name__)

RULE_SET_CACHE_MAX = 32


def rule_set_key(items: Iterable[IgnoreItem]) -> str:
    """Return a stable content hash for an ordered ignore-item list."""
    payload = json.dumps([item.pattern for item in items], ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class RuleSetCache:
    """Bounded LRU of compiled rule tuples."""

    def __init__(self, max_size: int = RULE_SET_CACHE_MAX) -> None:
        self.max_size = max(1, max_size)
        self._entries: OrderedDict[str, tuple[IgnoreRule, ...]] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get_rules(self, items: Sequence[IgnoreItem]) -> tuple[IgnoreRule, ...]:
        """Return compiled rules for ``items``, compiling on first use."""
        key = rule_set_key(items)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self._hits += 1
                return cached
            self._misses += 1

        rules = compile_rules(items)
        logger.debug("Compiled %d ignore rules from %d items (key %s)", len(rules), len(items), key[:12])

        with self._lock:
            self._entries[key] = rules
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
        return rules

    def invalidate(self, items: Sequence[IgnoreItem]) -> bool:
        """Drop the entry for ``items``; return whether one was cached."""
        with self._lock:
            return self._entries.pop(rule_set_key(items), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict[str, int]:
        """Return size and hit/miss counters."""
        with self._lock:
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
            }


__all__ = [
    "RULE_SET_CACHE_MAX",
    "RuleSetCache",
    "rule_set_key",
]
