"""Source loading, sanitization, and one-line snippet highlighting.

Snippets shown in choice lists come from arbitrary project files, so control
bytes are escaped before they reach the terminal.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` or ``\\r\\n`` without dropping a trailing empty line."""
    return re.split(r"\r?\n", text)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    """Return cached terminal formatter, falling back to the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    return Terminal256Formatter(style=style)


def highlight_snippet(code: str, filename: str, style: str = DEFAULT_STYLE) -> str:
    """Colorize one line of code for ``filename``'s language.

    Unknown file types and highlighter failures return the sanitized text.
    """
    clean = sanitize_terminal_text(code)
    try:
        lexer = get_lexer_for_filename(Path(filename).name, clean)
    except ClassNotFound:
        lexer = TextLexer()
    try:
        rendered = pygments_highlight(clean, lexer, _formatter_for_style(style))
    except Exception:
        return clean
    return rendered.rstrip("\n")
