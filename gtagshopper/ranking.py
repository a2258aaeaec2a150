"""Priority-ranked local symbol search.

Used when ``global`` fails or finds nothing. Every line mentioning the symbol
gets one syntactic role; only the best-ranked role survives. The keyword lists
deliberately mix languages: this is a best-effort fallback, not a parser.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from .scope import ScopeRange, find_enclosing_scope

logger = logging.getLogger(__name__)

PRIORITY_PARAMETER = 1
PRIORITY_DECLARATION = 2
PRIORITY_CALL = 3
PRIORITY_ASSIGNMENT = 5
PRIORITY_OUTPUT = 50
PRIORITY_USAGE = 100

TYPE_KEYWORDS = (
    "int",
    "char",
    "short",
    "long",
    "float",
    "double",
    "bool",
    "boolean",
    "byte",
    "void",
    "auto",
    "unsigned",
    "signed",
    "const",
    "static",
    "struct",
    "enum",
    "size_t",
    "string",
    "String",
    "var",
    "let",
    "local",
    "my",
    "our",
)
OUTPUT_KEYWORDS = (
    "printf",
    "print",
    "puts",
    "echo",
    "cout",
    "console.log",
    "System.out",
    "return",
)

_COMMENT_LINE_RE = re.compile(
    r"^\s*(?://|/\*|\*(?:\s|/|$)|--(?:\s|$)|;"
    r"|#(?!\s*(?:define|undef|if|ifdef|ifndef|elif|else|endif|include|pragma)\b))"
)
_TYPE_ALTERNATION = "|".join(re.escape(keyword) for keyword in TYPE_KEYWORDS)


@dataclass(frozen=True)
class SymbolMatch:
    """One ranked occurrence of the searched symbol."""

    line_index: int
    snippet: str
    priority: int
    label: str


@dataclass(frozen=True)
class _SymbolPatterns:
    word: re.Pattern[str]
    parameter: re.Pattern[str]
    declaration: re.Pattern[str]
    assignment: re.Pattern[str]
    call: re.Pattern[str]


@lru_cache(maxsize=128)
def _patterns_for(symbol: str) -> _SymbolPatterns:
    """Compile the per-symbol classifier once per distinct symbol."""
    sym = re.escape(symbol)
    word = rf"(?<![\w$]){sym}(?![\w$])"
    return _SymbolPatterns(
        word=re.compile(word),
        parameter=re.compile(rf"[A-Za-z_][\w$]*(?:\s+[*&]+|[*&]+\s*|\s+){word}\s*[,)]"),
        declaration=re.compile(
            rf"\b(?:{_TYPE_ALTERNATION})\b[\s*&]+{word}"
            rf"|\bfor(?:each)?\s*\([^)]*?{word}"
            rf"|\bfor\s+{word}"
        ),
        assignment=re.compile(rf"{word}\s*=(?!=)"),
        call=re.compile(rf"{word}\s*\("),
    )


def is_comment_line(line: str) -> bool:
    """Return whether ``line`` opens with a full-line comment marker."""
    return _COMMENT_LINE_RE.match(line) is not None


def classify_line(line: str, symbol: str) -> tuple[int, str]:
    """Return ``(priority, label)`` for a line known to mention ``symbol``.

    Checks run in fixed order and the first hit wins.
    """
    patterns = _patterns_for(symbol)
    if patterns.parameter.search(line):
        return PRIORITY_PARAMETER, "parameter"
    if patterns.declaration.search(line):
        return PRIORITY_DECLARATION, "declaration"
    if patterns.assignment.search(line):
        return PRIORITY_ASSIGNMENT, "assignment"
    if patterns.call.search(line):
        return PRIORITY_CALL, "call or definition"
    if any(keyword in line for keyword in OUTPUT_KEYWORDS):
        return PRIORITY_OUTPUT, "output use"
    return PRIORITY_USAGE, "usage"


def _clamped_range(lines: list[str], scope: ScopeRange | None) -> range:
    if scope is None:
        return range(len(lines))
    start = max(0, scope.start)
    end = min(len(lines) - 1, scope.end)
    return range(start, end + 1)


def collect_symbol_matches(
    lines: list[str],
    symbol: str,
    scope: ScopeRange | None = None,
) -> list[SymbolMatch]:
    """Classify every in-range line that mentions ``symbol`` as a whole word."""
    if not symbol or not lines:
        return []
    patterns = _patterns_for(symbol)
    matches: list[SymbolMatch] = []
    for line_index in _clamped_range(lines, scope):
        line = lines[line_index]
        if is_comment_line(line) or patterns.word.search(line) is None:
            continue
        priority, label = classify_line(line, symbol)
        matches.append(
            SymbolMatch(
                line_index=line_index,
                snippet=line.strip(),
                priority=priority,
                label=label,
            )
        )
    return matches


def rank_symbol_matches(
    lines: list[str],
    symbol: str,
    scope: ScopeRange | None = None,
) -> list[SymbolMatch]:
    """Return every match sharing the best (lowest) priority, in line order."""
    matches = collect_symbol_matches(lines, symbol, scope)
    if not matches:
        return []
    matches.sort(key=lambda match: (match.priority, match.line_index))
    best = matches[0].priority
    return [match for match in matches if match.priority == best]


def search_symbol_locally(lines: list[str], symbol: str, cursor_line: int) -> list[SymbolMatch]:
    """Scope-narrowed ranked search, widening to the whole document if needed."""
    scope = find_enclosing_scope(lines, cursor_line)
    if scope is not None:
        ranked = rank_symbol_matches(lines, symbol, scope)
        if ranked:
            logger.debug(
                "local search for %r found %d match(es) in lines %d-%d",
                symbol,
                len(ranked),
                scope.start,
                scope.end,
            )
            return ranked
        logger.debug("no match for %r in enclosing scope; widening to document", symbol)
    return rank_symbol_matches(lines, symbol)
