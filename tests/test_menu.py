"""Tests for overlay menu row layout."""

from __future__ import annotations

import unittest

from panestack.commands import Command
from panestack.menu import menu_lines


class MenuLinesTests(unittest.TestCase):
    def test_header_then_rows_sorted_by_key(self) -> None:
        lines = menu_lines({"gh": Command("cd", ("~",)), "gg": Command("top")})

        self.assertEqual(lines, ["keys command", "gg   top", "gh   cd ~"])

    def test_descriptions_align_to_widest_key(self) -> None:
        lines = menu_lines(
            {
                "z": Command("set", ("hidden!",)),
                "<space>": Command("toggle"),
                "e": Command("shell", ('$EDITOR "$f"',)),
            }
        )

        columns = {line.index(line.split()[1], len(line.split()[0])) for line in lines}
        self.assertEqual(columns, {8})
        self.assertIn('e       $$EDITOR "$f"', lines)

    def test_wide_keys_are_measured_in_columns(self) -> None:
        lines = menu_lines({"漢字": Command("top")})

        self.assertEqual(lines[1], "漢字 top")
        self.assertEqual(lines[0], "keys command")


if __name__ == "__main__":
    unittest.main()
