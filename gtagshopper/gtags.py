"""GNU GLOBAL command adapter.

Runs ``global``/``gtags`` in a project root and parses ``global -x`` rows.
Failures come back as an error string on ``GlobalRun``; nothing here raises.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

GLOBAL_COMMAND = "global"
GTAGS_COMMAND = "gtags"

_TAG_LINE_RE = re.compile(r"^(?P<symbol>\S+)\s+(?P<line>\d+)\s+(?P<file>\S+)(?:\s+(?P<code>.*))?$")
_NUMERIC_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class GlobalRun:
    """Outcome of one external invocation."""

    stdout: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class TagLine:
    """One ``SYMBOL LINE FILE CODE`` row of ``global -x`` output."""

    symbol: str
    line_number: int  # 1-based
    file: str
    code: str

    @property
    def line_index(self) -> int:
        return max(0, self.line_number - 1)


def run_global(
    args: Sequence[str],
    cwd: Path,
    command: str = GLOBAL_COMMAND,
    timeout_seconds: float | None = None,
) -> GlobalRun:
    """Run ``command args...`` in ``cwd`` and capture stdout.

    Non-zero exit status, a missing executable, or any spawn error is turned
    into ``GlobalRun.error``.
    """
    if shutil.which(command) is None:
        return GlobalRun(stdout="", error=f"{command} is not installed.")

    cmd = [command, *args]
    logger.debug("running %s in %s", cmd, cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except Exception as exc:
        logger.debug("failed to run %s: %s", command, exc)
        return GlobalRun(stdout="", error=f"failed to run {command}: {exc}")

    if proc.returncode != 0:
        err = (proc.stderr or "").strip() or f"{command} failed with exit code {proc.returncode}"
        logger.debug("%s exited with %d: %s", command, proc.returncode, err)
        return GlobalRun(stdout=proc.stdout or "", error=err)
    return GlobalRun(stdout=proc.stdout or "")


def parse_tag_line(text: str) -> TagLine | None:
    """Parse one ``global -x`` row, or ``None`` for malformed/degenerate rows.

    A purely numeric file field means the columns were misread and the row is
    dropped.
    """
    match = _TAG_LINE_RE.match(text.strip())
    if match is None:
        return None
    file = match.group("file")
    if _NUMERIC_RE.match(file):
        return None
    return TagLine(
        symbol=match.group("symbol"),
        line_number=int(match.group("line")),
        file=file,
        code=(match.group("code") or "").strip(),
    )


def parse_tag_output(stdout: str) -> list[TagLine]:
    tags: list[TagLine] = []
    for raw in stdout.splitlines():
        if not raw.strip():
            continue
        tag = parse_tag_line(raw)
        if tag is not None:
            tags.append(tag)
    return tags


def definition_args(symbol: str) -> list[str]:
    return ["-xa", symbol]


def reference_args(symbol: str) -> list[str]:
    return ["-rx", symbol]


def file_symbol_args(path: Path | str) -> list[str]:
    return ["-f", str(path)]


def grep_args(pattern: str) -> list[str]:
    return ["-gx", pattern]


def format_tag_listing(tags: Sequence[TagLine]) -> list[str]:
    """Render ``file:line symbol code`` rows for plain-text listings."""
    return [f"{tag.file}:{tag.line_number} {tag.symbol} {tag.code}".rstrip() for tag in tags]
