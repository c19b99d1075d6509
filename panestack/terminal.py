"""Terminal control and the cell-addressed screen surface.

``TerminalController`` owns the raw-mode lifecycle and alternate-screen
switching. ``Screen`` layers a double-buffered cell grid on top of it: draw
calls write into the back buffer and ``flush`` sends only changed cells.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import sys
import termios
import tty
from collections.abc import Callable

from .ansi import char_display_width
from .errors import TerminalInitError
from .input import Event, KeyEvent, ResizeEvent, read_key
from .ui_theme import DEFAULT_STYLE, CellStyle

POLL_INTERVAL_MS = 100

Cell = tuple[str, CellStyle]
BLANK: Cell = (" ", DEFAULT_STYLE)
# Right half of a wide glyph; never emitted on its own.
CONTINUATION: Cell = ("", DEFAULT_STYLE)


class TerminalController:
    """Manage terminal mode transitions for one tty."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and the main screen buffer."""
        os.write(self.stdout_fd, b"\x1b[0m\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()


class CellBuffer:
    """Fixed-size grid of ``(glyph, style)`` cells."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.rows: list[list[Cell]] = [[BLANK] * self.width for _ in range(self.height)]

    def fill(self, cell: Cell = BLANK) -> None:
        for row in self.rows:
            row[:] = [cell] * self.width

    def get(self, x: int, y: int) -> Cell:
        return self.rows[y][x]

    def put(self, x: int, y: int, cell: Cell) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.rows[y][x] = cell

    def row_text(self, y: int) -> str:
        """Return the glyphs of row ``y`` as one string."""
        return "".join(glyph for glyph, _ in self.rows[y])


class Screen:
    """Double-buffered terminal surface with a blocking event poll."""

    def __init__(
        self,
        stdin_fd: int | None = None,
        stdout_fd: int | None = None,
        *,
        get_terminal_size: Callable[[tuple[int, int]], os.terminal_size] = shutil.get_terminal_size,
    ) -> None:
        self.stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self.stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
        self._get_terminal_size = get_terminal_size
        self._controller: TerminalController | None = None
        self._active = False
        self._cursor: tuple[int, int] | None = None
        width, height = self._query_size()
        self.back = CellBuffer(width, height)
        self.front = CellBuffer(width, height)

    def _query_size(self) -> tuple[int, int]:
        size = self._get_terminal_size((80, 24))
        return size.columns, size.lines

    def _reallocate(self, width: int, height: int) -> None:
        self.back = CellBuffer(width, height)
        self.front = CellBuffer(width, height)
        # Unknown contents on the real terminal; force a full repaint.
        self.front.fill(CONTINUATION)

    def init(self) -> None:
        """Put the tty into TUI mode; raises ``TerminalInitError`` on failure."""
        try:
            if self._controller is None:
                self._controller = TerminalController(self.stdin_fd, self.stdout_fd)
            self._controller.enable_tui_mode()
        except (termios.error, OSError) as exc:
            raise TerminalInitError(f"initializing terminal: {exc}") from exc
        self._active = True
        self._reallocate(*self._query_size())
        os.write(self.stdout_fd, b"\x1b[0m\x1b[2J")

    def close(self) -> None:
        """Return the tty to its saved state."""
        if self._controller is not None and self._active:
            self._controller.disable_tui_mode()
        self._active = False

    @contextlib.contextmanager
    def session(self):
        """Scoped acquire/release of the terminal."""
        self.init()
        try:
            yield self
        finally:
            self.close()

    def size(self) -> tuple[int, int]:
        """Return current ``(width, height)``, resizing buffers if it changed."""
        width, height = self._query_size()
        if (width, height) != (self.back.width, self.back.height):
            self._reallocate(width, height)
        return width, height

    def set_cell(self, x: int, y: int, glyph: str, style: CellStyle) -> None:
        """Write one glyph; wide glyphs also claim the cell to their right."""
        self.back.put(x, y, (glyph, style))
        if glyph and char_display_width(glyph[0]) == 2:
            self.back.put(x + 1, y, CONTINUATION)

    def clear(self) -> None:
        self.back.fill(BLANK)

    def set_cursor(self, x: int, y: int) -> None:
        self._cursor = (x, y)

    def hide_cursor(self) -> None:
        self._cursor = None

    def flush(self) -> None:
        """Send changed cells and the cursor state to the terminal."""
        out: list[str] = []
        current_style: CellStyle | None = None
        for y in range(self.back.height):
            back_row = self.back.rows[y]
            front_row = self.front.rows[y]
            at: tuple[int, int] | None = None
            for x in range(self.back.width):
                cell = back_row[x]
                if cell == front_row[x] or cell == CONTINUATION:
                    continue
                glyph, style = cell
                if at != (x, y):
                    out.append(f"\033[{y + 1};{x + 1}H")
                if style != current_style:
                    out.append(style.sgr())
                    current_style = style
                out.append(glyph)
                at = (x + char_display_width(glyph[0]), y)
            front_row[:] = back_row
        out.append("\033[0m")
        if self._cursor is None:
            out.append("\033[?25l")
        else:
            cx, cy = self._cursor
            out.append(f"\033[{cy + 1};{cx + 1}H\033[?25h")
        os.write(self.stdout_fd, "".join(out).encode("utf-8", errors="replace"))

    def sync(self) -> None:
        """Forget what the terminal shows and repaint everything."""
        width, height = self._query_size()
        if (width, height) != (self.back.width, self.back.height):
            self._reallocate(width, height)
        else:
            self.front.fill(CONTINUATION)
        os.write(self.stdout_fd, b"\x1b[0m\x1b[2J")
        self.flush()

    def poll_event(self) -> Event:
        """Block until a key press or a terminal resize."""
        while True:
            width, height = self._query_size()
            if (width, height) != (self.back.width, self.back.height):
                self._reallocate(width, height)
                return ResizeEvent(width, height)
            key = read_key(self.stdin_fd, timeout_ms=POLL_INTERVAL_MS)
            if key:
                return KeyEvent(key)


__all__ = ["CellBuffer", "Screen", "TerminalController"]
