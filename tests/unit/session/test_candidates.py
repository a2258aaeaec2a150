"""Tests for candidate formatting from tag rows and ranked matches."""

from __future__ import annotations

import unittest
from pathlib import Path

from gtagshopper.candidates import (
    OPEN_ALL_LABEL,
    UNREADABLE_LINE,
    CandidateItem,
    candidates_from_matches,
    candidates_from_tags,
    first_line_per_file,
    open_all_candidate,
    reference_candidates,
    resolve_file,
)
from gtagshopper.gtags import parse_tag_line
from gtagshopper.ranking import SymbolMatch

ROOT = Path("/proj")


class CandidateFormattingTests(unittest.TestCase):
    def test_definition_candidate_from_tag_row(self) -> None:
        tag = parse_tag_line("foo 42 src/bar.c    int foo(int x) {")
        assert tag is not None
        reads: list[tuple[Path, int]] = []

        def read_line(path: Path, line_index: int) -> str | None:
            reads.append((path, line_index))
            return "  int foo(int x) {  "

        items = candidates_from_tags([tag], ROOT, read_line)

        self.assertEqual(items, [CandidateItem("src/bar.c:42", "int foo(int x) {", "src/bar.c", 41)])
        self.assertEqual(reads, [(ROOT / "src/bar.c", 41)])

    def test_absolute_tag_paths_are_shown_relative_to_root(self) -> None:
        tag = parse_tag_line("foo 3 /proj/lib/a.c int foo;")
        assert tag is not None
        items = candidates_from_tags([tag], ROOT, lambda _path, _line: "int foo;")

        self.assertEqual(items[0].label, "lib/a.c:3")
        self.assertEqual(items[0].file, "/proj/lib/a.c")

    def test_unreadable_line_uses_placeholder(self) -> None:
        tag = parse_tag_line("foo 3 a.c int foo;")
        assert tag is not None
        items = candidates_from_tags([tag], ROOT, lambda _path, _line: None)
        self.assertEqual(items[0].description, UNREADABLE_LINE)

    def test_reference_candidate_label_includes_code(self) -> None:
        tag = parse_tag_line("foo 7 a.c     return foo(1);")
        assert tag is not None
        self.assertEqual(reference_candidates([tag]), [CandidateItem("a.c:7 return foo(1);", "", "a.c", 6)])

    def test_match_candidates_carry_role_and_snippet(self) -> None:
        matches = [SymbolMatch(9, "int count = 0;", 2, "declaration")]
        items = candidates_from_matches(matches, "/proj/src/main.c")
        self.assertEqual(items, [CandidateItem("main.c:10", "declaration: int count = 0;", "/proj/src/main.c", 9)])

    def test_open_all_candidate(self) -> None:
        item = open_all_candidate()
        self.assertTrue(item.is_open_all)
        self.assertEqual(item.label, OPEN_ALL_LABEL)
        self.assertEqual(item.line, -1)

    def test_first_line_per_file_keeps_smallest_line_in_file_order(self) -> None:
        items = [
            CandidateItem("b.c:9", "", "b.c", 8),
            CandidateItem("a.c:5", "", "a.c", 4),
            CandidateItem("b.c:2", "", "b.c", 1),
            open_all_candidate(),
        ]
        self.assertEqual(
            [(item.file, item.line) for item in first_line_per_file(items)],
            [("b.c", 1), ("a.c", 4)],
        )

    def test_resolve_file(self) -> None:
        self.assertEqual(resolve_file("a.c", ROOT), ROOT / "a.c")
        self.assertEqual(resolve_file("/abs/a.c", ROOT), Path("/abs/a.c"))


if __name__ == "__main__":
    unittest.main()
