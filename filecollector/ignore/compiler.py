"""Gitignore-style pattern compilation.

Turns one raw pattern string into an immutable ``IgnoreRule`` carrying a
compiled regular expression over normalized relative paths (forward slashes,
no leading slash). Directory paths are expected with a trailing ``/``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_GLOBSTAR = "\x00"
_MID_GLOBSTAR_RE = "(?:/|/.+/)"
_TRAILING_GLOBSTAR_RE = "(?:/.*)?"
_LEADING_GLOBSTAR_RE = "(?:.*/)?"
_SEGMENT_END_RE = "(?:$|/)"


@dataclass(frozen=True)
class IgnoreItem:
    """One persisted raw ignore pattern."""

    pattern: str


@dataclass(frozen=True)
class IgnoreRule:
    """Compiled ignore rule.

    ``pattern`` is the cleaned text (negation bang and escape removed) kept for
    diagnostics and re-display; ``original_pattern`` is the raw item text.
    """

    original_pattern: str
    pattern: str
    is_negated: bool
    regex: re.Pattern[str]
    anchored: bool = False
    directory_only: bool = False

    def matches(self, relative_path: str) -> bool:
        """Return whether this rule's matcher accepts ``relative_path``."""
        return self.regex.search(relative_path) is not None


def _translate_segment(segment: str) -> str:
    """Escape literal text in one path segment and expand ``*``/``?``."""
    out: list[str] = []
    for ch in segment:
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(ch))
    return "".join(out)


def _collapse_globstars(segments: list[str]) -> list[str]:
    """Merge runs of adjacent ``**`` segments into one."""
    collapsed: list[str] = []
    for segment in segments:
        if segment == "**" and collapsed and collapsed[-1] == "**":
            continue
        collapsed.append(segment)
    return collapsed


def pattern_to_regex(pattern: str) -> tuple[str, bool, bool]:
    """Translate a cleaned gitignore pattern into a regex source string.

    Returns ``(regex_source, anchored, directory_only)``.

    A pattern is anchored when it starts with ``/`` or contains an internal
    slash (a leading ``**/`` does not count). Unanchored patterns may match at
    the start of the path or after any ``/``. Directory-only patterns end with
    ``/`` and match the directory path itself plus everything beneath it.
    """
    explicitly_rooted = pattern.startswith("/")
    if explicitly_rooted:
        pattern = pattern[1:]

    directory_only = pattern.endswith("/")
    body = pattern[:-1] if directory_only else pattern

    leading_globstar = body.startswith("**/")
    if leading_globstar:
        body = body[3:]
    anchored = explicitly_rooted or (not leading_globstar and "/" in body)

    segments = _collapse_globstars(body.split("/"))
    translated = "/".join(_GLOBSTAR if segment == "**" else _translate_segment(segment) for segment in segments)

    open_ended = False
    if translated == _GLOBSTAR:
        translated = ".*"
        open_ended = True
    else:
        translated = translated.replace(f"/{_GLOBSTAR}/", _MID_GLOBSTAR_RE)
        if translated.endswith(f"/{_GLOBSTAR}"):
            # Directory-only patterns still need their trailing ``/`` suffix.
            translated = translated[: -len(_GLOBSTAR) - 1] + _TRAILING_GLOBSTAR_RE
            if not directory_only:
                translated += "$"
            open_ended = True
        if translated.startswith(f"{_GLOBSTAR}/"):
            translated = _LEADING_GLOBSTAR_RE + translated[len(_GLOBSTAR) + 1 :]
        # ``**`` glued to other text inside a segment acts like ``*``.
        translated = translated.replace(_GLOBSTAR, "[^/]*")

    if leading_globstar:
        prefix = "^" + _LEADING_GLOBSTAR_RE
    elif anchored:
        prefix = "^"
    else:
        prefix = "(?:^|/)"

    if directory_only:
        suffix = "/"
    elif open_ended:
        suffix = ""
    else:
        suffix = _SEGMENT_END_RE

    return prefix + translated + suffix, anchored, directory_only


def compile_pattern(item: IgnoreItem) -> IgnoreRule | None:
    """Compile one ignore item into a rule.

    Returns ``None`` for blank lines, ``#`` comments, and patterns that reduce
    to nothing once negation and slashes are removed. Raises ``re.error`` when
    the generated expression cannot be compiled.
    """
    pattern = item.pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    is_negated = pattern.startswith("!")
    if is_negated:
        pattern = pattern[1:]
    if pattern.startswith("\\!"):
        pattern = pattern[1:]

    if not pattern.strip("/"):
        logger.debug("Dropping ignore pattern without path text: %r", item.pattern)
        return None

    source, anchored, directory_only = pattern_to_regex(pattern)
    return IgnoreRule(
        original_pattern=item.pattern,
        pattern=pattern,
        is_negated=is_negated,
        regex=re.compile(source),
        anchored=anchored,
        directory_only=directory_only,
    )


def compile_rules(items: Iterable[IgnoreItem]) -> tuple[IgnoreRule, ...]:
    """Compile items in order, skipping comments and malformed patterns."""
    rules: list[IgnoreRule] = []
    for item in items:
        try:
            rule = compile_pattern(item)
        except re.error as exc:
            logger.warning("Skipping invalid ignore pattern %r: %s", item.pattern, exc)
            continue
        if rule is not None:
            rules.append(rule)
    return tuple(rules)


def ignore_items_from_patterns(patterns: Sequence[str]) -> list[IgnoreItem]:
    """Wrap raw pattern strings as ``IgnoreItem`` values, keeping order."""
    return [IgnoreItem(pattern=str(pattern)) for pattern in patterns]


__all__ = [
    "IgnoreItem",
    "IgnoreRule",
    "pattern_to_regex",
    "compile_pattern",
    "compile_rules",
    "ignore_items_from_patterns",
]
