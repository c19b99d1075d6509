"""Pane geometry: split the terminal width into ratio-weighted columns."""

from __future__ import annotations

from collections.abc import Sequence


def pane_widths(total: int, ratios: Sequence[int]) -> list[int]:
    """Return one width per ratio, summing exactly to ``total``.

    Every pane but the last gets ``ratio * (total // sum(ratios))`` columns; the
    last pane absorbs whatever integer division left over.
    """
    unit = total // sum(ratios)
    widths = [ratio * unit for ratio in ratios[:-1]]
    widths.append(total - sum(widths))
    return widths


def pane_geometry(total_width: int, total_height: int, ratios: Sequence[int]) -> list[tuple[int, int, int, int]]:
    """Return ``(w, h, x, y)`` for each pane between the path bar and status line."""
    height = max(0, total_height - 2)
    geometry: list[tuple[int, int, int, int]] = []
    x = 0
    for width in pane_widths(total_width, ratios):
        geometry.append((width, height, x, 1))
        x += width
    return geometry
