"""Uniform navigation candidates built from ``global`` rows or local matches."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .gtags import TagLine
from .ranking import SymbolMatch

OPEN_ALL_FILE = "__all__"
OPEN_ALL_LABEL = "Open All Definitions"
UNREADABLE_LINE = "[Failed to read line]"

LineReader = Callable[[Path, int], str | None]


@dataclass(frozen=True)
class CandidateItem:
    """A presentable jump target; ``line`` is zero-based."""

    label: str
    description: str
    file: str
    line: int

    @property
    def is_open_all(self) -> bool:
        return self.file == OPEN_ALL_FILE


def open_all_candidate() -> CandidateItem:
    return CandidateItem(label=OPEN_ALL_LABEL, description="", file=OPEN_ALL_FILE, line=-1)


def resolve_file(file: str, root: Path) -> Path:
    """Absolute path for a candidate file, relative paths anchored at ``root``."""
    path = Path(file)
    return path if path.is_absolute() else root / path


def display_path(file: str, root: Path) -> str:
    path = Path(file)
    if not path.is_absolute():
        return file
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return file


def candidates_from_tags(
    tags: Sequence[TagLine],
    root: Path,
    read_line: LineReader,
) -> list[CandidateItem]:
    """Definition candidates labelled ``relpath:line`` with the source line text."""
    items: list[CandidateItem] = []
    for tag in tags:
        line_index = tag.line_index
        text = read_line(resolve_file(tag.file, root), line_index)
        items.append(
            CandidateItem(
                label=f"{display_path(tag.file, root)}:{line_index + 1}",
                description=UNREADABLE_LINE if text is None else text.strip(),
                file=tag.file,
                line=line_index,
            )
        )
    return items


def reference_candidates(tags: Sequence[TagLine]) -> list[CandidateItem]:
    """Reference candidates labelled ``file:line code``."""
    return [
        CandidateItem(
            label=f"{tag.file}:{tag.line_number} {tag.code}".rstrip(),
            description="",
            file=tag.file,
            line=tag.line_index,
        )
        for tag in tags
    ]


def candidates_from_matches(matches: Sequence[SymbolMatch], file: str) -> list[CandidateItem]:
    """Fallback candidates for ranked matches inside one document."""
    name = Path(file).name if file else file
    return [
        CandidateItem(
            label=f"{name}:{match.line_index + 1}",
            description=f"{match.label}: {match.snippet}",
            file=file,
            line=match.line_index,
        )
        for match in matches
    ]


def first_line_per_file(items: Sequence[CandidateItem]) -> list[CandidateItem]:
    """Keep the smallest line per file, preserving first-seen file order."""
    best: dict[str, CandidateItem] = {}
    for item in items:
        if item.is_open_all:
            continue
        current = best.get(item.file)
        if current is None or item.line < current.line:
            best[item.file] = item
    return list(best.values())
