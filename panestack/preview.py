"""Preview of regular files: text content or a binary placeholder.

The first ``height`` lines are scanned once; any character that is neither
whitespace nor printable marks the file as binary and stops reading. Text
files are rewound and drawn unwrapped at a two-column indent.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import IO

from .ansi import is_printable
from .errors import PreviewError
from .highlight import Highlighter
from .ui_theme import DEFAULT_STYLE, DEFAULT_THEME, UITheme
from .window import Window

PREVIEW_INDENT = 2
MAX_LINE_CHARS = 64 * 1024


def open_for_preview(path: str) -> IO[str]:
    """Open ``path`` so undecodable bytes surface as non-printable surrogates."""
    return open(path, encoding="utf-8", errors="surrogateescape", newline="\n")


def read_lines(handle: IO[str], count: int) -> Iterator[str]:
    """Yield up to ``count`` lines without their ``\\n`` / ``\\r\\n`` endings."""
    for _ in range(count):
        line = handle.readline(MAX_LINE_CHARS + 1)
        if not line:
            return
        if len(line) > MAX_LINE_CHARS and not line.endswith("\n"):
            raise PreviewError("printing regular file: line too long")
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        yield line


def is_binary_line(line: str) -> bool:
    return any(not ch.isspace() and not is_printable(ch) for ch in line)


def draw_file(
    win: Window,
    handle: IO[str],
    *,
    filename: str = "",
    highlighter: Highlighter | None = None,
    theme: UITheme = DEFAULT_THEME,
) -> None:
    """Draw the start of an open text handle into ``win``.

    Raises ``PreviewError`` when reading fails.
    """
    try:
        for line in read_lines(handle, win.h):
            if is_binary_line(line):
                win.print(0, 0, theme.placeholder, "binary")
                return
        handle.seek(0)
        lines = list(read_lines(handle, win.h))
    except (OSError, UnicodeError) as exc:
        raise PreviewError(f"printing regular file: {exc}") from exc

    if highlighter is None:
        for i, line in enumerate(lines):
            win.print(PREVIEW_INDENT, i, DEFAULT_STYLE, line)
        return

    for i, runs in enumerate(highlighter.line_runs(filename, lines)):
        x = PREVIEW_INDENT
        for style, text in runs:
            x = win.print(x, i, style, text, origin=PREVIEW_INDENT)
