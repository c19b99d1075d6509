"""Tests for the modal prompt loop on the status line."""

from __future__ import annotations

import os
import unittest
from unittest import mock

from panestack.completion import complete_command, complete_shell
from panestack.input import KeyEvent, ResizeEvent
from panestack.prompt import PromptLoop, completer_for
from panestack.terminal import Screen
from panestack.window import Window


def make_prompt(prefix: str = ":", complete=None) -> tuple[Screen, PromptLoop]:
    screen = Screen(0, 1, get_terminal_size=lambda _fallback: os.terminal_size((30, 6)))
    win = Window(screen, 30, 1, 0, 5)
    return screen, PromptLoop(screen, win, prefix, complete)


def run_with_keys(screen: Screen, loop: PromptLoop, *events) -> str:
    with mock.patch.object(screen, "poll_event", side_effect=list(events)), mock.patch(
        "panestack.terminal.os.write"
    ):
        return loop.run()


class PromptLoopTests(unittest.TestCase):
    def test_enter_returns_accumulated_text(self) -> None:
        screen, loop = make_prompt()

        result = run_with_keys(
            screen,
            loop,
            KeyEvent("c"),
            KeyEvent("d"),
            KeyEvent("SPACE"),
            KeyEvent("/"),
            KeyEvent("ENTER"),
        )

        self.assertEqual(result, "cd /")
        self.assertEqual(screen.back.row_text(5).strip(), "")

    def test_escape_returns_empty_string(self) -> None:
        screen, loop = make_prompt()

        result = run_with_keys(screen, loop, KeyEvent("q"), KeyEvent("ESC"))

        self.assertEqual(result, "")

    def test_backspace_removes_last_character(self) -> None:
        screen, loop = make_prompt()

        result = run_with_keys(
            screen,
            loop,
            KeyEvent("a"),
            KeyEvent("é"),
            KeyEvent("BACKSPACE2"),
            KeyEvent("BACKSPACE"),
            KeyEvent("BACKSPACE"),
            KeyEvent("b"),
            KeyEvent("ENTER"),
        )

        self.assertEqual(result, "b")

    def test_tab_applies_completer(self) -> None:
        completer = mock.Mock(return_value="quit ")
        screen, loop = make_prompt(complete=completer)

        result = run_with_keys(screen, loop, KeyEvent("q"), KeyEvent("TAB"), KeyEvent("ENTER"))

        completer.assert_called_once_with("q")
        self.assertEqual(result, "quit ")

    def test_resize_and_unhandled_keys_keep_state(self) -> None:
        screen, loop = make_prompt()

        result = run_with_keys(
            screen,
            loop,
            KeyEvent("x"),
            ResizeEvent(40, 10),
            KeyEvent("PGDN"),
            KeyEvent("ENTER"),
        )

        self.assertEqual(result, "x")

    def test_line_shows_prefix_and_text_with_cursor_after(self) -> None:
        screen, loop = make_prompt("$")
        loop.acc = "ls"

        with mock.patch("panestack.terminal.os.write"):
            loop.redraw()

        self.assertEqual(screen.back.row_text(5)[:4], "$ls ")
        self.assertEqual(screen._cursor, (3, 5))

    def test_cursor_hidden_after_loop(self) -> None:
        screen, loop = make_prompt()

        run_with_keys(screen, loop, KeyEvent("ESC"))

        self.assertIsNone(screen._cursor)


class CompleterSelectionTests(unittest.TestCase):
    def test_prefix_picks_provider(self) -> None:
        self.assertIs(completer_for(":"), complete_command)
        self.assertIs(completer_for("$"), complete_shell)
        self.assertIs(completer_for("!"), complete_shell)


if __name__ == "__main__":
    unittest.main()
