"""Modal single-line input on the status line."""

from __future__ import annotations

from collections.abc import Callable

from .ansi import display_width
from .completion import complete_command, complete_shell
from .input import KeyEvent
from .terminal import Screen
from .ui_theme import DEFAULT_STYLE
from .window import Window

COMMAND_PREFIX = ":"
SHELL_PREFIX = "$"

Completer = Callable[[str], str]


def completer_for(prefix: str) -> Completer:
    """Pick the completion provider by prompt prefix."""
    if prefix == COMMAND_PREFIX:
        return complete_command
    return complete_shell


class PromptLoop:
    """Collect one line of text after ``prefix`` until enter or escape."""

    def __init__(self, screen: Screen, win: Window, prefix: str, complete: Completer | None = None) -> None:
        self.screen = screen
        self.win = win
        self.prefix = prefix
        self.complete = complete or completer_for(prefix)
        self.acc = ""

    def redraw(self) -> None:
        self.win.printl(0, 0, DEFAULT_STYLE, self.prefix)
        self.win.print(display_width(self.prefix), 0, DEFAULT_STYLE, self.acc)
        self.screen.set_cursor(self.win.x + display_width(self.prefix + self.acc), self.win.y)
        self.screen.flush()

    def handle_key(self, key: str) -> str | None:
        """Apply one key; return the final text on enter or escape."""
        if key == "ENTER":
            self.win.printl(0, 0, DEFAULT_STYLE, "")
            self.screen.set_cursor(self.win.x, self.win.y)
            self.screen.flush()
            return self.acc
        if key == "ESC":
            return ""
        if key == "SPACE":
            self.acc += " "
        elif key in {"BACKSPACE", "BACKSPACE2"}:
            self.acc = self.acc[:-1]
        elif key == "TAB":
            self.acc = self.complete(self.acc)
        elif len(key) == 1:
            self.acc += key
        return None

    def run(self) -> str:
        self.acc = ""
        self.redraw()
        try:
            while True:
                event = self.screen.poll_event()
                if not isinstance(event, KeyEvent):
                    continue
                result = self.handle_key(event.key)
                if result is not None:
                    return result
                self.redraw()
        finally:
            self.screen.hide_cursor()
