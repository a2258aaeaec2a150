"""Navigation primitives: visited positions and bounded jump history.

This module intentionally has no UI concerns.
``HistoryStack`` evicts oldest-first under capacity pressure and pops
newest-first; ``JumpHistory`` wraps it for one interactive session.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HISTORY_SIZE = 50

PANE_PRIMARY = "primary"
PANE_SECONDARY = "secondary"
PANE_HINTS = frozenset({PANE_PRIMARY, PANE_SECONDARY})


@dataclass(frozen=True)
class NavigationPosition:
    """One place the user has been: document, zero-based line/column, pane."""

    document: Path | str
    line: int = 0
    column: int = 0
    pane_hint: str | None = None

    def normalized(self) -> NavigationPosition:
        """Return a resolved, non-negative variant safe for persistence/history."""
        document = self.document
        if isinstance(document, Path):
            try:
                document = document.resolve()
            except Exception:
                pass
        pane_hint = self.pane_hint if self.pane_hint in PANE_HINTS else None
        return NavigationPosition(
            document=document,
            line=max(0, self.line),
            column=max(0, self.column),
            pane_hint=pane_hint,
        )


class HistoryStack:
    """Bounded LIFO store of positions with FIFO eviction of the oldest entry.

    Entries live in ``_items[_front:]``. Eviction advances ``_front`` instead
    of shifting the list; the dead prefix is compacted once it outgrows the
    live part, which keeps ``push`` O(1) amortized.
    """

    def __init__(self) -> None:
        self._items: list[NavigationPosition] = []
        self._front = 0

    def __len__(self) -> int:
        return len(self._items) - self._front

    def push(self, position: NavigationPosition, max_size: int = DEFAULT_HISTORY_SIZE) -> None:
        max_size = max(1, int(max_size))
        while len(self) >= max_size:
            self._front += 1
        self._items.append(position)
        if self._front and self._front >= len(self._items) - self._front:
            del self._items[: self._front]
            self._front = 0

    def pop(self) -> NavigationPosition | None:
        """Remove and return the newest live entry, or ``None`` when empty."""
        if len(self) <= 0:
            self.clear()
            return None
        position = self._items.pop()
        if len(self) == 0:
            self.clear()
        return position

    def clear(self) -> None:
        self._items = []
        self._front = 0

    def entries(self) -> list[NavigationPosition]:
        """Live entries, oldest first."""
        return self._items[self._front :]


class JumpHistory:
    """Session-owned jump history guarded for one writer at a time.

    Every recorded position is kept, repeats included, in push order.
    """

    def __init__(self, max_entries: int = DEFAULT_HISTORY_SIZE) -> None:
        self.max_entries = max(1, int(max_entries))
        self._stack = HistoryStack()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._stack)

    def record_visited(self, position: NavigationPosition) -> None:
        position = position.normalized()
        with self._lock:
            self._stack.push(position, self.max_entries)

    def go_back(self) -> NavigationPosition | None:
        with self._lock:
            return self._stack.pop()

    def resize(self, max_entries: int) -> None:
        """Apply a new capacity, evicting the oldest entries when shrinking."""
        with self._lock:
            self.max_entries = max(1, int(max_entries))
            entries = self._stack.entries()
            self._stack.clear()
            for position in entries[-self.max_entries :]:
                self._stack.push(position, self.max_entries)

    def clear(self) -> None:
        with self._lock:
            self._stack.clear()

    def snapshot(self) -> list[NavigationPosition]:
        """Copy of live entries, oldest first."""
        with self._lock:
            return list(self._stack.entries())
