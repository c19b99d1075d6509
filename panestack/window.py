"""Rectangular drawing surface addressed relative to its own origin."""

from __future__ import annotations

from typing import Protocol

from .ansi import char_display_width, display_width, is_printable
from .ui_theme import CellStyle


class CellSurface(Protocol):
    def set_cell(self, x: int, y: int, glyph: str, style: CellStyle) -> None: ...


class Window:
    """A ``w`` x ``h`` region of the screen whose top-left cell is ``(x, y)``."""

    def __init__(self, surface: CellSurface, w: int, h: int, x: int, y: int, *, tabstop: int = 8) -> None:
        self.surface = surface
        self.w = w
        self.h = h
        self.x = x
        self.y = y
        self.tabstop = tabstop

    def __repr__(self) -> str:
        return f"Window(w={self.w}, h={self.h}, x={self.x}, y={self.y})"

    def renew(self, w: int, h: int, x: int, y: int) -> None:
        """Replace geometry in place after a terminal resize."""
        self.w = w
        self.h = h
        self.x = x
        self.y = y

    def print(self, x: int, y: int, style: CellStyle, text: str, *, origin: int | None = None) -> int:
        """Draw ``text`` at column ``x`` of row ``y`` and return the next column.

        Output stops at the right edge. Tabs advance to the next multiple of
        ``tabstop`` counted from ``origin`` (default: ``x``), so a line drawn
        as several styled runs keeps one consistent set of tab stops.
        """
        if y < 0 or y >= self.h:
            return x
        off = x if origin is None else origin
        last: tuple[int, str] | None = None
        for ch in text:
            if x >= self.w:
                break
            if ch == "\t":
                stop = x + self.tabstop - (x - off) % self.tabstop
                for col in range(x, min(stop, self.w)):
                    self.surface.set_cell(self.x + col, self.y + y, " ", style)
                x = stop
                last = None
                continue
            if not is_printable(ch):
                # Never send control bytes to the terminal.
                ch = " " if ch.isspace() else "?"
            width = char_display_width(ch)
            if width == 0:
                if last is not None:
                    col, glyph = last
                    last = (col, glyph + ch)
                    self.surface.set_cell(self.x + col, self.y + y, last[1], style)
                continue
            if x + width > self.w:
                break
            self.surface.set_cell(self.x + x, self.y + y, ch, style)
            last = (x, ch)
            x += width
        return x

    def printf(self, x: int, y: int, style: CellStyle, fmt: str, *args: object) -> int:
        return self.print(x, y, style, fmt % args if args else fmt)

    def printl(self, x: int, y: int, style: CellStyle, text: str) -> int:
        """Draw ``text`` blank-padded to the window width (clears the row)."""
        padding = max(0, self.w - x - display_width(text))
        return self.print(x, y, style, text + " " * padding)
