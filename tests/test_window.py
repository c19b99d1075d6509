"""Tests for window text primitives.

Covers clipping at the right edge, tab expansion, control-character
replacement and wide glyph handling.
"""

from __future__ import annotations

import os
import unittest

from panestack.terminal import Screen
from panestack.ui_theme import BOLD, DEFAULT_STYLE
from panestack.window import Window


def make_screen(width: int = 20, height: int = 5) -> Screen:
    return Screen(0, 1, get_terminal_size=lambda _fallback: os.terminal_size((width, height)))


class WindowPrintTests(unittest.TestCase):
    def test_print_is_relative_to_window_origin(self) -> None:
        screen = make_screen()
        win = Window(screen, 10, 2, 5, 1)

        end = win.print(1, 1, BOLD, "abc")

        self.assertEqual(end, 4)
        self.assertEqual(screen.back.row_text(2)[6:9], "abc")
        self.assertEqual(screen.back.get(6, 2), ("a", BOLD))

    def test_print_never_writes_past_window_width(self) -> None:
        screen = make_screen()
        win = Window(screen, 4, 1, 2, 0)

        end = win.print(0, 0, DEFAULT_STYLE, "abcdefgh")

        self.assertEqual(end, 4)
        self.assertEqual(screen.back.row_text(0), "  abcd" + " " * 14)

    def test_rows_outside_window_are_dropped(self) -> None:
        screen = make_screen()
        win = Window(screen, 10, 1, 0, 1)

        win.print(0, 1, DEFAULT_STYLE, "hidden")
        win.print(0, -1, DEFAULT_STYLE, "hidden")

        self.assertEqual(screen.back.row_text(0).strip(), "")
        self.assertEqual(screen.back.row_text(2).strip(), "")

    def test_tab_advances_to_next_tabstop(self) -> None:
        screen = make_screen()
        win = Window(screen, 20, 1, 0, 0, tabstop=4)

        end = win.print(0, 0, DEFAULT_STYLE, "a\tb")

        self.assertEqual(end, 5)
        self.assertEqual(screen.back.row_text(0)[:5], "a   b")

    def test_tab_stops_counted_from_origin(self) -> None:
        screen = make_screen()
        win = Window(screen, 20, 1, 0, 0, tabstop=4)

        x = win.print(2, 0, DEFAULT_STYLE, "ab")
        x = win.print(x, 0, DEFAULT_STYLE, "\tc", origin=2)

        self.assertEqual(x, 7)
        self.assertEqual(screen.back.row_text(0)[:7], "  ab  c")

    def test_tab_is_clipped_at_window_edge(self) -> None:
        screen = make_screen()
        win = Window(screen, 3, 1, 0, 0, tabstop=8)

        win.print(0, 0, BOLD, "a\tz")

        self.assertEqual(screen.back.row_text(0)[:4], "a   ")
        self.assertEqual(screen.back.get(3, 0)[1], DEFAULT_STYLE)

    def test_control_characters_are_replaced(self) -> None:
        screen = make_screen()
        win = Window(screen, 10, 1, 0, 0)

        win.print(0, 0, DEFAULT_STYLE, "a\x1bb\x0bc")

        self.assertEqual(screen.back.row_text(0)[:5], "a?b c")

    def test_wide_glyph_takes_two_columns(self) -> None:
        screen = make_screen()
        win = Window(screen, 10, 1, 0, 0)

        end = win.print(0, 0, DEFAULT_STYLE, "漢x")

        self.assertEqual(end, 3)
        self.assertEqual(screen.back.get(0, 0)[0], "漢")
        self.assertEqual(screen.back.get(2, 0)[0], "x")

    def test_wide_glyph_that_would_straddle_edge_is_not_drawn(self) -> None:
        screen = make_screen()
        win = Window(screen, 3, 1, 0, 0)

        end = win.print(0, 0, DEFAULT_STYLE, "ab漢")

        self.assertEqual(end, 2)
        self.assertEqual(screen.back.get(2, 0)[0], " ")

    def test_combining_mark_joins_previous_cell(self) -> None:
        screen = make_screen()
        win = Window(screen, 10, 1, 0, 0)

        end = win.print(0, 0, DEFAULT_STYLE, "e\u0301x")

        self.assertEqual(end, 2)
        self.assertEqual(screen.back.get(0, 0)[0], "e\u0301")
        self.assertEqual(screen.back.get(1, 0)[0], "x")

    def test_printl_pads_to_window_width(self) -> None:
        screen = make_screen()
        win = Window(screen, 6, 1, 0, 0)
        win.print(0, 0, DEFAULT_STYLE, "zzzzzz")

        end = win.printl(0, 0, BOLD, "ab")

        self.assertEqual(end, 6)
        self.assertEqual(screen.back.row_text(0)[:6], "ab    ")
        self.assertEqual(screen.back.get(5, 0), (" ", BOLD))

    def test_printf_formats_arguments(self) -> None:
        screen = make_screen()
        win = Window(screen, 10, 1, 0, 0)

        win.printf(0, 0, DEFAULT_STYLE, "%s=%d", "n", 3)

        self.assertEqual(screen.back.row_text(0)[:3], "n=3")

    def test_renew_replaces_geometry(self) -> None:
        win = Window(make_screen(), 1, 1, 0, 0)
        win.renew(5, 6, 7, 8)
        self.assertEqual((win.w, win.h, win.x, win.y), (5, 6, 7, 8))


if __name__ == "__main__":
    unittest.main()
