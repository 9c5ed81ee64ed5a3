"""Last-match-wins ignore evaluation with ancestor-directory dominance.

A negated rule can only re-include a path when none of its ancestor
directories is itself excluded: excluding ``dir/`` cannot be undone for
``dir/file.txt`` without also re-including ``dir/``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .compiler import IgnoreRule


@dataclass(frozen=True)
class IgnoreDecision:
    """Outcome of evaluating one path plus the rules that decided it."""

    path: str
    ignored: bool
    rule: IgnoreRule | None = None
    excluded_ancestor: str | None = None


def last_match(rules: Sequence[IgnoreRule], relative_path: str) -> IgnoreRule | None:
    """Return the last rule in file order whose matcher accepts the path."""
    matched: IgnoreRule | None = None
    for rule in rules:
        if rule.matches(relative_path):
            matched = rule
    return matched


def excluded_ancestor(rules: Sequence[IgnoreRule], relative_path: str) -> str | None:
    """Return the nearest ancestor directory excluded by a non-negated rule.

    Walks from the immediate parent up to the top-level directory, testing
    each ancestor with a trailing slash. Returns ``None`` when no ancestor's
    last matching rule is a plain (non-negated) exclusion.
    """
    parent = relative_path[:-1] if relative_path.endswith("/") else relative_path
    while "/" in parent:
        parent = parent[: parent.rindex("/")]
        if not parent:
            break
        candidate = f"{parent}/"
        rule = last_match(rules, candidate)
        if rule is not None and not rule.is_negated:
            return candidate
    return None


def explain(rules: Sequence[IgnoreRule], relative_path: str) -> IgnoreDecision:
    """Evaluate ``relative_path`` and report the deciding rule/ancestor."""
    rule = last_match(rules, relative_path)
    if rule is not None and not rule.is_negated:
        return IgnoreDecision(relative_path, True, rule=rule)

    ancestor = excluded_ancestor(rules, relative_path)
    return IgnoreDecision(
        relative_path,
        ancestor is not None,
        rule=rule,
        excluded_ancestor=ancestor,
    )


def is_ignored(rules: Sequence[IgnoreRule], relative_path: str) -> bool:
    """Return whether ``relative_path`` is excluded by ``rules``.

    ``relative_path`` uses forward slashes and no leading slash; directories
    should be passed with a trailing ``/``.
    """
    rule = last_match(rules, relative_path)
    if rule is not None and not rule.is_negated:
        return True
    return excluded_ancestor(rules, relative_path) is not None


__all__ = [
    "IgnoreDecision",
    "last_match",
    "excluded_ancestor",
    "explain",
    "is_ignored",
]
