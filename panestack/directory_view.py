"""Draw one directory listing into a pane window.

The viewport is derived from the snapshot's selection index and scroll
anchor: ``beg = max(ind - pos, 0)``, ``end = min(beg + height, count)``. The
anchor itself is maintained by the navigation layer; the renderer never
recomputes it.
"""

from __future__ import annotations

import os
from collections.abc import Collection
from datetime import datetime

from .ansi import clip_to_width, fit_to_width
from .nav import Dir, FileInfo
from .ui_theme import DEFAULT_THEME, UITheme
from .window import Window

SIZE_MIN_WIDTH = 8
TIME_MIN_WIDTH = 24
_SIZE_PREFIXES = ("K", "M", "G", "T", "P", "E", "Z", "Y")


def humanize(size: int) -> str:
    """Format a byte count with a decimal (1000-based) unit suffix."""
    if size < 1000:
        return str(size)
    value = float(size)
    for prefix in _SIZE_PREFIXES:
        value /= 1000
        if value < 1000 or prefix == _SIZE_PREFIXES[-1]:
            if value < 10:
                return f"{value:.1f}{prefix}"
            return f"{int(value)}{prefix}"
    raise AssertionError("unreachable")


def format_mtime(mtime: float) -> str:
    """Format like ``Jan  2 15:04`` (day of month space-padded)."""
    t = datetime.fromtimestamp(mtime)
    return f"{t:%b} {t.day:>2} {t:%H:%M}"


def viewport(ind: int, pos: int, height: int, count: int) -> tuple[int, int]:
    """Return ``(beg, end)`` of the visible entry range."""
    beg = max(ind - pos, 0)
    end = min(beg + height, count)
    return beg, end


def _info_text(f: FileInfo, showinfo: str, width: int) -> str | None:
    if showinfo == "size":
        return humanize(f.size) if width > SIZE_MIN_WIDTH else None
    if showinfo == "time":
        return format_mtime(f.mtime) if width > TIME_MIN_WIDTH else None
    return None


def format_row(f: FileInfo, width: int, showinfo: str) -> str:
    """Build the ``width - 2`` column name field for one entry."""
    field = width - 2
    info = _info_text(f, showinfo, width)
    if info is None:
        return fit_to_width(" " + f.name, field)
    name_cols = field - 1 - len(info)
    return fit_to_width(clip_to_width(" " + f.name, name_cols), name_cols) + " " + info


def draw_dir(
    win: Window,
    d: Dir,
    marks: Collection[str],
    showinfo: str = "none",
    theme: UITheme = DEFAULT_THEME,
) -> None:
    """Draw the visible part of ``d`` into ``win``."""
    if win.w < 3:
        return

    if not d.fi:
        win.print(0, 0, theme.placeholder, "empty")
        return

    beg, end = viewport(d.ind, d.pos, win.h, len(d.fi))

    for i, f in enumerate(d.fi[beg:end]):
        style = theme.style_for(f.kind)

        if os.path.join(d.path, f.name) in marks:
            win.print(0, i, theme.mark, " ")

        if beg + i == d.ind:
            style = style.reversed()

        win.print(1, i, style, format_row(f, win.w, showinfo))
