"""Navigation session: definition/reference lookup, jumps, and back-navigation.

``global`` answers first. When it fails or yields nothing usable, a local
ranked search over the current document takes over. Every failure degrades
to a host message; nothing here raises to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from .candidates import (
    CandidateItem,
    candidates_from_matches,
    candidates_from_tags,
    first_line_per_file,
    open_all_candidate,
    reference_candidates,
    resolve_file,
)
from .config import ACTION_TAKE_FIRST, ConfigCache
from .gtags import (
    GlobalRun,
    definition_args,
    file_symbol_args,
    format_tag_listing,
    grep_args,
    parse_tag_output,
    reference_args,
    run_global,
)
from .highlight import read_text, split_lines
from .host import EditorHost
from .navigation import PANE_PRIMARY, PANE_SECONDARY, JumpHistory, NavigationPosition
from .ranking import search_symbol_locally

logger = logging.getLogger(__name__)

GlobalRunner = Callable[..., GlobalRun]

SOURCE_GLOBAL = "global"
SOURCE_LOCAL = "local"


class DocumentCache:
    """Path-to-lines cache for snippet reads.

    Hosts call ``invalidate`` when the set of open/visible documents changes.
    """

    def __init__(self) -> None:
        self._lines: dict[Path, list[str] | None] = {}

    def lines_for(self, path: Path) -> list[str] | None:
        if path in self._lines:
            return self._lines[path]
        try:
            lines: list[str] | None = split_lines(read_text(path))
        except OSError:
            lines = None
        self._lines[path] = lines
        return lines

    def read_line(self, path: Path, line_index: int) -> str | None:
        lines = self.lines_for(path)
        if lines is None or not 0 <= line_index < len(lines):
            return None
        return lines[line_index]

    def invalidate(self, path: Path | None = None) -> None:
        if path is None:
            self._lines.clear()
        else:
            self._lines.pop(path, None)


class NavigatorSession:
    """Session-scoped navigation state bound to one project root and host."""

    def __init__(
        self,
        root: Path,
        host: EditorHost,
        *,
        config: ConfigCache | None = None,
        history: JumpHistory | None = None,
        runner: GlobalRunner = run_global,
    ) -> None:
        self.root = root
        self.host = host
        self.config = config if config is not None else ConfigCache()
        self.history = history if history is not None else JumpHistory(self.config.history_size)
        self.documents = DocumentCache()
        self._runner = runner

    def on_config_changed(self) -> None:
        self.config.invalidate()
        self.history.resize(self.config.history_size)

    def on_documents_changed(self) -> None:
        self.documents.invalidate()

    def _run_global(self, args: list[str]) -> GlobalRun:
        return self._runner(args, self.root, command=self.config.global_command)

    def record_visited(self, position: NavigationPosition) -> None:
        self.history.record_visited(position)

    def go_back(self) -> NavigationPosition | None:
        """Reopen the most recent recorded position, if any."""
        position = self.history.go_back()
        if position is None:
            self.host.show_info("No jump history available.")
            return None
        error = self.host.open_at(
            position.document,
            position.line,
            position.column,
            position.pane_hint or PANE_PRIMARY,
        )
        if error is not None:
            self.host.show_error(error)
        return position

    def _external_definitions(self, symbol: str) -> list[CandidateItem]:
        run = self._run_global(definition_args(symbol))
        if not run.ok:
            logger.debug("global lookup for %r failed: %s", symbol, run.error)
            return []
        return candidates_from_tags(parse_tag_output(run.stdout), self.root, self.documents.read_line)

    def _local_definitions(
        self,
        symbol: str,
        document: Path | str,
        lines: Sequence[str] | None,
        cursor_line: int,
    ) -> list[CandidateItem]:
        if lines is None:
            lines = self.documents.lines_for(Path(document)) if isinstance(document, Path) else None
        if not lines:
            return []
        matches = search_symbol_locally(list(lines), symbol, cursor_line)
        return candidates_from_matches(matches, str(document))

    def definition_candidates(
        self,
        symbol: str,
        document: Path | str,
        lines: Sequence[str] | None = None,
        cursor_line: int = 0,
    ) -> tuple[list[CandidateItem], str | None]:
        """Return ``(candidates, source)``; the first non-empty source wins."""
        items = self._external_definitions(symbol)
        if items:
            return items, SOURCE_GLOBAL
        logger.debug("falling back to local search for %r", symbol)
        items = self._local_definitions(symbol, document, lines, cursor_line)
        if items:
            return items, SOURCE_LOCAL
        return [], None

    def find_definition(
        self,
        symbol: str,
        document: Path | str,
        lines: Sequence[str] | None = None,
        cursor_line: int = 0,
        cursor_column: int = 0,
        pane_hint: str | None = None,
    ) -> list[CandidateItem]:
        """Look up ``symbol`` and jump to its definition.

        One candidate is opened directly; several are offered as choices (or
        the first is taken, per config). Returns the candidates found.
        """
        if not symbol:
            self.host.show_error("No symbol selected")
            return []

        started = time.perf_counter()
        items, source = self.definition_candidates(symbol, document, lines, cursor_line)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if not items:
            self.host.show_info(f"No definition found for: {symbol}")
            return []

        origin = NavigationPosition(document, cursor_line, cursor_column, pane_hint)
        self._jump_to_one_of(
            items,
            placeholder=f"Select definition of {symbol}",
            origin=origin,
            allow_open_all=source == SOURCE_GLOBAL,
        )
        if self.config.show_elapsed_time:
            self.host.show_info(f"Search took {elapsed_ms} ms")
        return items

    def find_references(
        self,
        symbol: str,
        origin: NavigationPosition | None = None,
    ) -> list[CandidateItem]:
        """List ``global -rx`` references and jump to the chosen one."""
        if not symbol:
            self.host.show_error("No symbol selected")
            return []
        run = self._run_global(reference_args(symbol))
        if not run.ok:
            self.host.show_error(f"global error: {run.error}")
            return []
        items = reference_candidates(parse_tag_output(run.stdout))
        if not items:
            self.host.show_info(f"No references found for: {symbol}")
            return []
        picked = self.host.present_choices(items, f"Select reference of {symbol}")
        if picked is not None:
            self._open_candidate(picked, origin)
        return items

    def _jump_to_one_of(
        self,
        items: list[CandidateItem],
        *,
        placeholder: str,
        origin: NavigationPosition,
        allow_open_all: bool,
    ) -> None:
        if len(items) == 1 or self.config.multiple_results_action == ACTION_TAKE_FIRST:
            self._open_candidate(items[0], origin)
            return

        choices = [*items, open_all_candidate()] if allow_open_all else items
        picked = self.host.present_choices(choices, placeholder)
        if picked is None:
            return
        if not picked.is_open_all:
            self._open_candidate(picked, origin)
            return
        for index, item in enumerate(first_line_per_file(items)):
            self._open_candidate(item, origin if index == 0 else None)

    def _open_candidate(self, item: CandidateItem, origin: NavigationPosition | None) -> bool:
        if origin is not None:
            self.record_visited(origin)
        if origin is not None and item.file == str(origin.document):
            target: Path | str = origin.document
        else:
            target = resolve_file(item.file, self.root)
        error = self.host.open_at(target, item.line, 0, PANE_SECONDARY)
        if error is not None:
            self.host.show_error(error)
            return False
        return True

    def list_file_symbols(self, path: Path | str) -> list[str]:
        """Return ``file:line symbol code`` rows for tags defined in ``path``."""
        run = self._run_global(file_symbol_args(path))
        if not run.ok:
            self.host.show_error(f"global error: {run.error}")
            return []
        rows = format_tag_listing(parse_tag_output(run.stdout))
        self.host.show_info("\n".join(["--list symbol--", *rows]))
        return rows

    def grep_project(self, pattern: str) -> list[str]:
        """Return ``file:line symbol code`` rows of ``global -gx`` for ``pattern``."""
        if not pattern:
            return []
        run = self._run_global(grep_args(pattern))
        if not run.ok:
            self.host.show_error(f"global error: {run.error}")
            return []
        rows = format_tag_listing(parse_tag_output(run.stdout))
        self.host.show_info("\n".join([f"--search pattern: {pattern}", *rows]))
        return rows

    def update_tags(self) -> bool:
        """Rebuild the tag database in the project root."""
        run = self._runner([], self.root, command=self.config.gtags_command)
        if not run.ok:
            self.host.show_error(f"gtags error: {run.error}")
            return False
        self.host.show_info("Tags updated.")
        return True
