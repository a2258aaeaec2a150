"""Command-line front door for gtagshopper.

Parses CLI options, builds a terminal-hosted navigation session, and
dispatches one command. Jump history is loaded before and saved after.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

from . import config
from .highlight import DEFAULT_STYLE, read_text, split_lines
from .host import TerminalHost
from .navigation import JumpHistory, NavigationPosition
from .session import NavigatorSession

_WORD_RE = re.compile(r"[A-Za-z_$][\w$]*")


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def word_at(line: str, column: int) -> str | None:
    """Return the identifier covering zero-based ``column`` in ``line``."""
    for match in _WORD_RE.finditer(line):
        if match.start() <= column <= match.end():
            return match.group(0)
    return None


def _setup_logging(debug: bool) -> None:
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        stream=sys.stderr,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gtagshopper",
        description="Jump to definitions and references using GNU GLOBAL.",
    )
    parser.add_argument("--root", default=None, help="Project root containing GTAGS. Defaults to current directory.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for snippet highlighting.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--debug", action="store_true", help="Log lookup details to stderr.")
    commands = parser.add_subparsers(dest="command", required=True)

    definition = commands.add_parser("def", help="Jump to the definition of a symbol.")
    definition.add_argument("symbol", nargs="?", default=None, help="Symbol name. Defaults to the word at --line/--column.")
    definition.add_argument("--file", default=None, help="Current file, used by the local fallback search.")
    definition.add_argument("--line", type=_positive_int, default=1, help="Current 1-based line.")
    definition.add_argument("--column", type=_positive_int, default=1, help="Current 1-based column.")

    references = commands.add_parser("ref", help="Jump to a reference of a symbol.")
    references.add_argument("symbol")
    references.add_argument("--file", default=None, help="Current file, recorded in jump history.")
    references.add_argument("--line", type=_positive_int, default=1, help="Current 1-based line.")

    symbols = commands.add_parser("symbols", help="List tags defined in a file.")
    symbols.add_argument("file")

    grep = commands.add_parser("grep", help="Search project sources for a regex pattern.")
    grep.add_argument("pattern")

    commands.add_parser("update", help="Rebuild the GTAGS database.")
    commands.add_parser("back", help="Return to the previous jump origin.")
    return parser


def _run_definition(session: NavigatorSession, args: argparse.Namespace, root: Path) -> None:
    document = Path(args.file).resolve() if args.file else root
    lines: list[str] | None = None
    if args.file:
        if not document.is_file():
            raise SystemExit(f"Path not found: {document}")
        lines = split_lines(read_text(document))

    cursor_line = args.line - 1
    symbol = args.symbol
    if symbol is None and lines is not None and cursor_line < len(lines):
        symbol = word_at(lines[cursor_line], args.column - 1)
    if not symbol:
        session.host.show_error("No symbol selected")
        return
    session.find_definition(symbol, document, lines, cursor_line, args.column - 1)


def _run_references(session: NavigatorSession, args: argparse.Namespace) -> None:
    origin = NavigationPosition(Path(args.file), args.line - 1) if args.file else None
    session.find_references(args.symbol, origin)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one navigation command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.debug)

    root = Path(args.root) if args.root else Path.cwd()
    if not root.is_dir():
        raise SystemExit(f"Path not found: {root}")
    root = root.resolve()

    settings = config.ConfigCache()
    history = JumpHistory(settings.history_size)
    for position in config.load_history():
        history.record_visited(position)

    host = TerminalHost(root, color=not args.no_color and sys.stdout.isatty(), style=args.style)
    session = NavigatorSession(root, host, config=settings, history=history)

    if args.command == "def":
        _run_definition(session, args, root)
    elif args.command == "ref":
        _run_references(session, args)
    elif args.command == "symbols":
        session.list_file_symbols(args.file)
    elif args.command == "grep":
        session.grep_project(args.pattern)
    elif args.command == "update":
        session.update_tags()
    elif args.command == "back":
        session.go_back()

    config.save_history(history.snapshot())


if __name__ == "__main__":
    main()
