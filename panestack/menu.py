"""Overlay menu listing key-binding candidates."""

from __future__ import annotations

from collections.abc import Mapping

from .ansi import display_width
from .commands import Command

MENU_HEADER = ("keys", "command")
COLUMN_GAP = 1


def menu_lines(binds: Mapping[str, Command]) -> list[str]:
    """Return header plus one aligned row per binding, sorted by key.

    Alignment is two passes: measure the widest key, then render every row
    with its key padded to that width.
    """
    rows = [MENU_HEADER, *((key, binds[key].description()) for key in sorted(binds))]

    key_width = max(display_width(key) for key, _ in rows)

    lines: list[str] = []
    for key, desc in rows:
        padding = key_width - display_width(key) + COLUMN_GAP
        lines.append(f"{key}{' ' * padding}{desc}")
    return lines
