"""Enclosing-function lookup for scope-narrowed fallback search.

A line-oriented heuristic, not a parser: it finds the nearest line above the
cursor that looks like ``name(params)`` and balances braces from there.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_FUNCTION_HEAD_RE = re.compile(r"\b[A-Za-z_][\w$]*\s*\([^;]*\)")
_CONTROL_FLOW_RE = re.compile(r"^\s*(?:\}\s*)?(?:else\s+)?(?:if|while|for|switch)\b")


@dataclass(frozen=True)
class ScopeRange:
    """Inclusive zero-based line span of one function body."""

    start: int
    end: int

    def __contains__(self, line_index: object) -> bool:
        return isinstance(line_index, int) and self.start <= line_index <= self.end


def is_function_head(line: str) -> bool:
    """Return whether ``line`` loosely reads as a function signature."""
    if _CONTROL_FLOW_RE.match(line):
        return False
    if line.rstrip().endswith(";"):
        return False
    return _FUNCTION_HEAD_RE.search(line) is not None


def find_scope_end(lines: list[str], start: int) -> int:
    """Return the line where braces opened at/after ``start`` balance out.

    Falls back to the last document line when no balancing brace exists.
    """
    depth = 0
    opened = False
    for line_index in range(start, len(lines)):
        for ch in lines[line_index]:
            if ch == "{":
                depth += 1
                opened = True
            elif ch == "}":
                depth -= 1
                if opened and depth == 0:
                    return line_index
    return len(lines) - 1


def find_enclosing_scope(lines: list[str], cursor_line: int) -> ScopeRange | None:
    """Locate the function enclosing ``cursor_line``.

    Scans upward from the cursor (inclusive). ``None`` means no candidate
    head exists and callers should search the whole document.
    """
    if not lines:
        return None
    cursor = min(max(0, int(cursor_line)), len(lines) - 1)
    for line_index in range(cursor, -1, -1):
        if is_function_head(lines[line_index]):
            return ScopeRange(start=line_index, end=find_scope_end(lines, line_index))
    return None
