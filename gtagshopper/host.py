"""Editor-host boundary and the terminal implementation used by the CLI.

``EditorHost`` is everything the navigator needs from its surroundings.
Hosts report failures as message strings instead of raising.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, TextIO

from .candidates import CandidateItem, resolve_file
from .highlight import DEFAULT_STYLE, highlight_snippet, sanitize_terminal_text


class EditorHost(Protocol):
    def open_at(
        self,
        file: Path | str,
        line: int,
        column: int = 0,
        pane_hint: str | None = None,
    ) -> str | None:
        """Open ``file`` at zero-based ``line``/``column``; return an error or ``None``."""

    def present_choices(self, items: Sequence[CandidateItem], placeholder: str) -> CandidateItem | None:
        """Let the user pick one item; ``None`` means dismissed."""

    def show_info(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class TerminalHost:
    """Numbered-list picker on stdin/stdout that opens files with ``$EDITOR``.

    Without ``$EDITOR`` the chosen location is printed as ``path:line:column``.
    """

    def __init__(
        self,
        root: Path,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        color: bool = False,
        style: str = DEFAULT_STYLE,
        editor: str | None = None,
    ) -> None:
        self.root = root
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.color = color
        self.style = style
        self.editor = os.environ.get("EDITOR", "") if editor is None else editor

    def _choice_row(self, index: int, item: CandidateItem) -> str:
        label = sanitize_terminal_text(item.label)
        if not item.description:
            return f"{index:>3}) {label}"
        if self.color and not item.is_open_all:
            description = highlight_snippet(item.description, item.file, self.style)
        else:
            description = sanitize_terminal_text(item.description)
        return f"{index:>3}) {label}  {description}"

    def present_choices(self, items: Sequence[CandidateItem], placeholder: str) -> CandidateItem | None:
        if not items:
            return None
        self.stdout.write(f"{placeholder}\n")
        for index, item in enumerate(items, start=1):
            self.stdout.write(self._choice_row(index, item) + "\n")
        self.stdout.write("> ")
        self.stdout.flush()

        answer = self.stdin.readline().strip()
        if not answer:
            return None
        try:
            choice = int(answer)
        except ValueError:
            return None
        if not 1 <= choice <= len(items):
            return None
        return items[choice - 1]

    def open_at(
        self,
        file: Path | str,
        line: int,
        column: int = 0,
        pane_hint: str | None = None,
    ) -> str | None:
        target = resolve_file(str(file), self.root)
        editor_cmd = shlex.split(self.editor) if self.editor.strip() else []
        if not editor_cmd:
            self.stdout.write(f"{target}:{line + 1}:{column + 1}\n")
            return None
        try:
            subprocess.run([*editor_cmd, f"+{line + 1}", str(target)], check=False)
        except Exception as exc:
            return f"Failed to launch editor: {exc}"
        return None

    def show_info(self, message: str) -> None:
        self.stdout.write(message + "\n")

    def show_error(self, message: str) -> None:
        self.stderr.write(message + "\n")
