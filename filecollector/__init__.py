"""Public package surface for filecollector.

Exports ``main`` for programmatic CLI invocation.
The ignore engine lives in ``filecollector.ignore``, tree construction in
``filecollector.tree_model`` and tri-state selection in
``filecollector.selection``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
