"""Persistent JSON stores for ignore patterns, sessions and saved contexts.

All reads are defensive: missing, unreadable or malformed files fall back to
empty defaults. Write failures are logged and otherwise ignored so a broken
config directory never aborts a scan.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .ignore import IgnoreItem

logger = logging.getLogger(__name__)

APP_NAME = "filecollector"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
IGNORE_ITEMS_PATH = CONFIG_DIR / "gitignores.json"
SESSION_PATH = CONFIG_DIR / "session.json"
CONTEXTS_PATH = CONFIG_DIR / "contexts.json"


def _read_json(path: Path) -> object | None:
    """Return decoded JSON from ``path`` or ``None`` when unavailable."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return None


def _write_json(path: Path, data: object) -> None:
    """Persist ``data`` as pretty-printed JSON, logging on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Cannot write %s: %s", path, exc)


# ignore items


def coerce_ignore_items(data: object) -> list[IgnoreItem]:
    """Convert decoded JSON into ignore items.

    Accepts a list of ``{"pattern": str}`` objects; anything else decodes to
    an empty list and malformed elements are dropped.
    """
    if not isinstance(data, list):
        return []
    items: list[IgnoreItem] = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        pattern = raw.get("pattern")
        if isinstance(pattern, str):
            items.append(IgnoreItem(pattern=pattern))
    return items


def normalize_ignore_items(items: Iterable[IgnoreItem]) -> list[IgnoreItem]:
    """Trim patterns, drop blanks and keep the first of any duplicates."""
    seen: set[str] = set()
    normalized: list[IgnoreItem] = []
    for item in items:
        pattern = item.pattern.strip()
        if not pattern or pattern in seen:
            continue
        seen.add(pattern)
        normalized.append(IgnoreItem(pattern=pattern))
    return normalized


def load_ignore_items() -> list[IgnoreItem]:
    """Load the persisted ignore list; absence or errors yield ``[]``."""
    return coerce_ignore_items(_read_json(IGNORE_ITEMS_PATH))


def save_ignore_items(items: Iterable[IgnoreItem]) -> list[IgnoreItem]:
    """Normalize and persist ``items``; return what was written."""
    normalized = normalize_ignore_items(items)
    _write_json(IGNORE_ITEMS_PATH, [{"pattern": item.pattern} for item in normalized])
    return normalized


def add_ignore_pattern(pattern: str) -> bool:
    """Append ``pattern``; return ``False`` when blank or already present."""
    stripped = pattern.strip()
    if not stripped:
        return False
    items = load_ignore_items()
    if any(item.pattern.strip() == stripped for item in items):
        return False
    save_ignore_items([*items, IgnoreItem(pattern=stripped)])
    return True


def remove_ignore_pattern(index: int) -> IgnoreItem | None:
    """Remove the item at ``index`` and return it, or ``None`` if out of range."""
    items = load_ignore_items()
    if index < 0 or index >= len(items):
        return None
    removed = items.pop(index)
    save_ignore_items(items)
    return removed


def update_ignore_pattern(index: int, pattern: str) -> bool:
    """Replace the item at ``index``; blank replacements are rejected."""
    stripped = pattern.strip()
    items = load_ignore_items()
    if not stripped or index < 0 or index >= len(items):
        return False
    items[index] = IgnoreItem(pattern=stripped)
    save_ignore_items(items)
    return True


def parse_gitignore_text(text: str) -> list[IgnoreItem]:
    """Extract non-blank, non-comment lines from ``.gitignore`` text."""
    items: list[IgnoreItem] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            items.append(IgnoreItem(pattern=stripped))
    return items


def import_gitignore_file(path: Path) -> int:
    """Append patterns from a ``.gitignore`` file; return how many were new.

    Raises ``OSError`` when ``path`` cannot be read.
    """
    imported = parse_gitignore_text(path.read_text(encoding="utf-8", errors="replace"))
    if not imported:
        return 0
    current = load_ignore_items()
    saved = save_ignore_items([*current, *imported])
    return len(saved) - len(normalize_ignore_items(current))


# session


def _load_session() -> dict[str, object]:
    data = _read_json(SESSION_PATH)
    session: dict[str, object] = {"lastActivePath": None, "selectionsByPath": {}}
    if isinstance(data, dict):
        session.update(data)
    if not isinstance(session.get("selectionsByPath"), dict):
        session["selectionsByPath"] = {}
    return session


def load_last_active_path() -> str | None:
    """Return the last scanned root, or ``None`` when unset/invalid."""
    value = _load_session().get("lastActivePath")
    return value if isinstance(value, str) and value else None


def save_last_active_path(path: str | None) -> None:
    session = _load_session()
    session["lastActivePath"] = path
    _write_json(SESSION_PATH, session)


def load_selections_for_path(root_path: str) -> list[str]:
    """Return the saved selection for ``root_path`` (string paths only)."""
    if not root_path:
        return []
    selections = _load_session()["selectionsByPath"]
    value = selections.get(root_path) if isinstance(selections, dict) else None
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def save_selections_for_path(root_path: str, selected_paths: Iterable[str]) -> None:
    """Persist the selection for ``root_path`` in sorted order."""
    if not root_path:
        return
    session = _load_session()
    stored = session["selectionsByPath"]
    selections = dict(stored) if isinstance(stored, dict) else {}
    selections[root_path] = sorted(selected_paths)
    session["selectionsByPath"] = selections
    _write_json(SESSION_PATH, session)


# saved contexts


@dataclass(frozen=True)
class SavedContext:
    """Named selection set stored for one scan root."""

    id: str
    name: str
    root_path: str
    paths: tuple[str, ...]


def _coerce_context(raw: object) -> SavedContext | None:
    if not isinstance(raw, dict):
        return None
    context_id = raw.get("id")
    name = raw.get("name")
    root_path = raw.get("rootPath")
    paths = raw.get("paths")
    if not all(isinstance(value, str) and value for value in (context_id, name, root_path)):
        return None
    if not isinstance(paths, list):
        return None
    return SavedContext(
        id=context_id,
        name=name,
        root_path=root_path,
        paths=tuple(path for path in paths if isinstance(path, str)),
    )


def load_contexts() -> list[SavedContext]:
    """Load all saved contexts, dropping malformed records."""
    data = _read_json(CONTEXTS_PATH)
    if not isinstance(data, list):
        return []
    contexts: list[SavedContext] = []
    for raw in data:
        context = _coerce_context(raw)
        if context is not None:
            contexts.append(context)
    return contexts


def _save_contexts(contexts: Iterable[SavedContext]) -> None:
    _write_json(
        CONTEXTS_PATH,
        [
            {
                "id": context.id,
                "name": context.name,
                "rootPath": context.root_path,
                "paths": list(context.paths),
            }
            for context in contexts
        ],
    )


def contexts_for_root(root_path: str) -> list[SavedContext]:
    return [context for context in load_contexts() if context.root_path == root_path]


def save_context(name: str, root_path: str, paths: Iterable[str]) -> SavedContext | None:
    """Save a named selection, replacing one with the same name and root."""
    stripped = name.strip()
    if not stripped or not root_path:
        return None
    contexts = load_contexts()
    existing = next(
        (context for context in contexts if context.name == stripped and context.root_path == root_path),
        None,
    )
    context = SavedContext(
        id=existing.id if existing is not None else uuid.uuid4().hex,
        name=stripped,
        root_path=root_path,
        paths=tuple(sorted(paths)),
    )
    updated = [item for item in contexts if existing is None or item.id != existing.id]
    updated.append(context)
    _save_contexts(updated)
    return context


def delete_context(context_id: str) -> bool:
    """Delete the context with ``context_id``; return whether it existed."""
    contexts = load_contexts()
    remaining = [context for context in contexts if context.id != context_id]
    if len(remaining) == len(contexts):
        return False
    _save_contexts(remaining)
    return True


__all__ = [
    "APP_NAME",
    "CONFIG_DIR",
    "IGNORE_ITEMS_PATH",
    "SESSION_PATH",
    "CONTEXTS_PATH",
    "coerce_ignore_items",
    "normalize_ignore_items",
    "load_ignore_items",
    "save_ignore_items",
    "add_ignore_pattern",
    "remove_ignore_pattern",
    "update_ignore_pattern",
    "parse_gitignore_text",
    "import_gitignore_file",
    "load_last_active_path",
    "save_last_active_path",
    "load_selections_for_path",
    "save_selections_for_path",
    "SavedContext",
    "load_contexts",
    "contexts_for_root",
    "save_context",
    "delete_context",
]
