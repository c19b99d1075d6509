"""Display-width measurement and column clipping for terminal cells.

Column accounting is display-width based: East Asian wide/fullwidth glyphs
take two cells, combining marks take none, everything else takes one.
"""

from __future__ import annotations

import unicodedata


def char_display_width(ch: str) -> int:
    """Return terminal column width for one non-tab character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return total column width of ``text`` (tabs count as one column)."""
    return sum(char_display_width(ch) for ch in text)


def clip_to_width(text: str, max_cols: int) -> str:
    """Trim ``text`` to at most ``max_cols`` display columns.

    A wide glyph that would straddle the limit is dropped entirely, so the
    result may be one column short of ``max_cols``.
    """
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def fit_to_width(text: str, cols: int) -> str:
    """Clip or blank-pad ``text`` so it occupies exactly ``cols`` columns."""
    clipped = clip_to_width(text, cols)
    return clipped + " " * max(0, cols - display_width(clipped))


def is_printable(ch: str) -> bool:
    """Return whether ``ch`` is a graphic character or the ASCII space.

    Control, format, surrogate, private-use and unassigned code points are not
    printable; neither are separators other than U+0020.
    """
    return ch.isprintable()
