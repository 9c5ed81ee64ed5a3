"""Gitignore-style ignore engine.

This package contains the two pieces that decide what a scan hides:
- a pattern compiler turning raw pattern text into anchored regex rules
- an evaluator applying last-match-wins with ancestor-directory dominance
- an explicit rule-set cache keyed by pattern-list content
"""

from __future__ import annotations

from .cache import RuleSetCache, rule_set_key
from .compiler import (
    IgnoreItem,
    IgnoreRule,
    compile_pattern,
    compile_rules,
    ignore_items_from_patterns,
    pattern_to_regex,
)
from .evaluator import IgnoreDecision, excluded_ancestor, explain, is_ignored, last_match

__all__ = [
    "IgnoreItem",
    "IgnoreRule",
    "IgnoreDecision",
    "RuleSetCache",
    "rule_set_key",
    "compile_pattern",
    "compile_rules",
    "ignore_items_from_patterns",
    "pattern_to_regex",
    "is_ignored",
    "explain",
    "last_match",
    "excluded_ancestor",
]
