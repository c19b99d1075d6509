"""Tests for the regular-file previewer.

Covers text drawing at the preview indent, the binary placeholder and its
early stop, line-ending handling, and read failures.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from pathlib import Path

from panestack.errors import PreviewError
from panestack.highlight import Highlighter
from panestack.preview import MAX_LINE_CHARS, draw_file, is_binary_line, open_for_preview
from panestack.terminal import Screen
from panestack.ui_theme import DEFAULT_STYLE, DEFAULT_THEME
from panestack.window import Window


class CountingReader(io.StringIO):
    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.readline_calls = 0

    def readline(self, size: int = -1) -> str:  # type: ignore[override]
        self.readline_calls += 1
        return super().readline(size)


class FailingReader(io.StringIO):
    def readline(self, size: int = -1) -> str:  # type: ignore[override]
        raise OSError("Input/output error")


def make_window(height: int = 4, width: int = 20) -> tuple[Screen, Window]:
    screen = Screen(0, 1, get_terminal_size=lambda _fallback: os.terminal_size((width, height + 2)))
    return screen, Window(screen, width, height, 0, 1)


class DrawFileTests(unittest.TestCase):
    def test_text_lines_drawn_at_indent(self) -> None:
        screen, win = make_window()

        draw_file(win, io.StringIO("alpha\nbeta\r\ngamma\n"))

        self.assertEqual(screen.back.row_text(1)[:7], "  alpha")
        self.assertEqual(screen.back.row_text(2)[:7], "  beta ")
        self.assertEqual(screen.back.row_text(3)[:7], "  gamma")
        self.assertEqual(screen.back.get(2, 1)[1], DEFAULT_STYLE)

    def test_only_window_height_lines_are_read(self) -> None:
        screen, win = make_window(height=2)
        handle = CountingReader("".join(f"line{i}\n" for i in range(50)))

        draw_file(win, handle)

        self.assertEqual(handle.readline_calls, 4)
        self.assertEqual(screen.back.row_text(2)[:7], "  line1")

    def test_binary_line_draws_placeholder_and_stops_reading(self) -> None:
        screen, win = make_window()
        handle = CountingReader("bad\x00line\nmore\nmore\n")

        draw_file(win, handle)

        self.assertEqual(handle.readline_calls, 1)
        self.assertEqual(screen.back.row_text(1)[:6], "binary")
        self.assertEqual(screen.back.get(0, 1)[1], DEFAULT_THEME.placeholder)
        self.assertEqual(screen.back.row_text(2).strip(), "")

    def test_tabs_and_whitespace_are_not_binary(self) -> None:
        self.assertFalse(is_binary_line("a\tb\x0c c"))
        self.assertTrue(is_binary_line("a\x07b"))

    def test_undecodable_bytes_are_binary(self) -> None:
        screen, win = make_window()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "blob.bin"
            path.write_bytes(b"ok\n\xff\xfe\x80\n")
            with open_for_preview(str(path)) as handle:
                draw_file(win, handle)

        self.assertEqual(screen.back.row_text(1)[:6], "binary")

    def test_overlong_line_raises_preview_error(self) -> None:
        _, win = make_window()

        with self.assertRaises(PreviewError) as ctx:
            draw_file(win, io.StringIO("x" * (MAX_LINE_CHARS + 10)))

        self.assertTrue(str(ctx.exception).startswith("printing regular file: "))

    def test_read_failure_raises_preview_error(self) -> None:
        _, win = make_window()

        with self.assertRaises(PreviewError) as ctx:
            draw_file(win, FailingReader(""))

        self.assertIn("Input/output error", str(ctx.exception))

    def test_highlighted_lines_keep_text_and_gain_color(self) -> None:
        screen, win = make_window(width=30)

        draw_file(win, io.StringIO("def f(x):\n\treturn x\n"), filename="m.py", highlighter=Highlighter("monokai"))

        self.assertEqual(screen.back.row_text(1)[:11], "  def f(x):")
        self.assertEqual(screen.back.row_text(2)[:18], "          return x")
        self.assertNotEqual(screen.back.get(2, 1)[1], DEFAULT_STYLE)

    def test_highlighted_bare_carriage_return_stays_on_its_line(self) -> None:
        screen, win = make_window(width=30)

        draw_file(win, io.StringIO("10%\r20%\nsecond\nthird\n"), filename="x.txt", highlighter=Highlighter())

        self.assertEqual(screen.back.row_text(1)[:9], "  10% 20%")
        self.assertEqual(screen.back.row_text(2)[:8], "  second")
        self.assertEqual(screen.back.row_text(3)[:7], "  third")


class HighlighterTests(unittest.TestCase):
    def test_unknown_style_falls_back(self) -> None:
        with self.assertLogs("panestack.highlight", level="WARNING"):
            highlighter = Highlighter("no-such-style")

        self.assertEqual(highlighter.style_name, "monokai")

    def test_runs_split_per_line(self) -> None:
        runs = Highlighter().line_runs("notes.txt", ["one", "", "two"])

        self.assertEqual(["".join(text for _, text in line) for line in runs], ["one", "", "two"])

    def test_carriage_returns_are_kept_inside_lines(self) -> None:
        runs = Highlighter().line_runs("m.py", ["x = 1\r# c", "y = 2"])

        self.assertEqual(["".join(text for _, text in line) for line in runs], ["x = 1\r# c", "y = 2"])

    def test_unknown_extension_uses_plain_text(self) -> None:
        lexer = Highlighter.lexer_for("file.zzz-unknown", "hello")

        self.assertEqual(lexer.name, "Text only")


if __name__ == "__main__":
    unittest.main()
