"""Syntax coloring of previewed lines with Pygments.

Lines are lexed as one block and split back into per-line styled runs, so the
previewer can draw each run with its own cell style while keeping tab stops
continuous across runs.
"""

from __future__ import annotations

import logging

from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ui_theme import CellStyle

logger = logging.getLogger(__name__)

FALLBACK_STYLE = "monokai"
# Candidates for standing in for bare "\r" while lexing; Pygments reads "\r" as
# a line break.
_CR_STAND_INS = range(0xE000, 0xF900)

StyledRun = tuple[CellStyle, str]


def _cr_stand_in(source: str) -> str | None:
    for code in _CR_STAND_INS:
        ch = chr(code)
        if ch not in source:
            return ch
    return None


def _hex_to_rgb(value: str) -> tuple[int, int, int] | None:
    value = value.lstrip("#")
    if len(value) != 6:
        return None
    try:
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    except ValueError:
        return None


class Highlighter:
    """Map Pygments tokens of a file's first lines onto cell styles."""

    def __init__(self, style_name: str = FALLBACK_STYLE) -> None:
        try:
            self._style = get_style_by_name(style_name)
            self.style_name = style_name
        except ClassNotFound:
            logger.warning("unknown pygments style %r, using %s", style_name, FALLBACK_STYLE)
            self._style = get_style_by_name(FALLBACK_STYLE)
            self.style_name = FALLBACK_STYLE
        self._cell_styles: dict[object, CellStyle] = {}

    def cell_style(self, ttype: object) -> CellStyle:
        cached = self._cell_styles.get(ttype)
        if cached is not None:
            return cached
        token_style = self._style.style_for_token(ttype)
        color = _hex_to_rgb(token_style["color"]) if token_style.get("color") else None
        style = CellStyle(fg=color, bold=bool(token_style.get("bold")))
        self._cell_styles[ttype] = style
        return style

    @staticmethod
    def lexer_for(filename: str, sample: str) -> Lexer:
        try:
            return get_lexer_for_filename(filename, sample, stripnl=False, ensurenl=True)
        except ClassNotFound:
            return TextLexer(stripnl=False, ensurenl=True)

    def line_runs(self, filename: str, lines: list[str]) -> list[list[StyledRun]]:
        """Return styled runs for each of ``lines``."""
        runs: list[list[StyledRun]] = [[] for _ in lines]
        if not lines:
            return runs
        source = "\n".join(lines) + "\n"
        stand_in = None
        if "\r" in source:
            stand_in = _cr_stand_in(source)
            if stand_in is None:
                return [[(CellStyle(), line)] for line in lines]
            source = source.replace("\r", stand_in)
        row = 0
        for ttype, value in self.lexer_for(filename, source).get_tokens(source):
            if stand_in is not None:
                value = value.replace(stand_in, "\r")
            for j, part in enumerate(value.split("\n")):
                if j > 0:
                    row += 1
                if row >= len(lines):
                    return runs
                if part:
                    runs[row].append((self.cell_style(ttype), part))
        return runs
