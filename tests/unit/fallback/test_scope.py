"""Tests for the brace-balancing enclosing-function locator."""

from __future__ import annotations

import unittest

from gtagshopper.scope import ScopeRange, find_enclosing_scope, is_function_head

SOURCE = [
    "#include <stdio.h>",  # 0
    "",  # 1
    "static int helper(int value)",  # 2
    "{",  # 3
    "    if (value > 0) {",  # 4
    "        return value;",  # 5
    "    }",  # 6
    "    return 0;",  # 7
    "}",  # 8
    "",  # 9
    "int main(void) {",  # 10
    "    int total = helper(3);",  # 11
    "    for (int i = 0; i < 3; i++) {",  # 12
    "        total += i;",  # 13
    "    }",  # 14
    "    return total;",  # 15
    "}",  # 16
]


class FunctionHeadTests(unittest.TestCase):
    def test_signatures_are_function_heads(self) -> None:
        self.assertTrue(is_function_head("int main(void) {"))
        self.assertTrue(is_function_head("static int helper(int value)"))

    def test_control_flow_is_not_a_function_head(self) -> None:
        self.assertFalse(is_function_head("    if (value > 0) {"))
        self.assertFalse(is_function_head("    while (running) {"))
        self.assertFalse(is_function_head("    for (int i = 0; i < 3; i++) {"))
        self.assertFalse(is_function_head("    switch (mode) {"))
        self.assertFalse(is_function_head("    } else if (x) {"))

    def test_statement_calls_are_not_function_heads(self) -> None:
        self.assertFalse(is_function_head("    int total = helper(3);"))


class EnclosingScopeTests(unittest.TestCase):
    def test_cursor_inside_nested_block_finds_function(self) -> None:
        self.assertEqual(find_enclosing_scope(SOURCE, 5), ScopeRange(2, 8))

    def test_cursor_on_signature_line_counts(self) -> None:
        self.assertEqual(find_enclosing_scope(SOURCE, 10), ScopeRange(10, 16))

    def test_loop_body_resolves_to_outer_function(self) -> None:
        self.assertEqual(find_enclosing_scope(SOURCE, 13), ScopeRange(10, 16))

    def test_no_head_above_cursor_returns_none(self) -> None:
        self.assertIsNone(find_enclosing_scope(SOURCE, 1))
        self.assertIsNone(find_enclosing_scope([], 0))

    def test_unbalanced_braces_extend_to_last_line(self) -> None:
        lines = ["void run(void) {", "    step();", "    if (x) {"]
        self.assertEqual(find_enclosing_scope(lines, 1), ScopeRange(0, 2))

    def test_cursor_past_end_is_clamped(self) -> None:
        self.assertEqual(find_enclosing_scope(SOURCE, 500), ScopeRange(10, 16))

    def test_repeated_calls_are_idempotent(self) -> None:
        snapshot = list(SOURCE)
        first = find_enclosing_scope(SOURCE, 13)
        second = find_enclosing_scope(SOURCE, 13)
        self.assertEqual(first, second)
        self.assertEqual(SOURCE, snapshot)

    def test_scope_range_membership(self) -> None:
        scope = ScopeRange(2, 8)
        self.assertIn(2, scope)
        self.assertIn(8, scope)
        self.assertNotIn(9, scope)


if __name__ == "__main__":
    unittest.main()
