"""Public package surface for gtagshopper.

Exports ``main`` for programmatic CLI invocation.
Navigation logic lives in ``session``; the fallback heuristics in
``scope`` and ``ranking``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
