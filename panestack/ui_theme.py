"""Cell styles and the UI palette.

Styles are terminal-cell attributes (8-color or truecolor foreground and
background, bold, reverse) rendered to SGR sequences by the screen backend.
Syntax colors for previewed files come from the pygments style instead.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .file_kind import FileKind

Color = int | tuple[int, int, int] | None

BLACK = 0
RED = 1
GREEN = 2
YELLOW = 3
BLUE = 4
MAGENTA = 5
CYAN = 6
WHITE = 7


def _color_params(color: Color, base: int) -> str:
    if color is None:
        return str(base + 9)
    if isinstance(color, tuple):
        r, g, b = color
        return f"{base + 8};2;{r};{g};{b}"
    return str(base + color)


@dataclass(frozen=True)
class CellStyle:
    """Attributes of one terminal cell."""

    fg: Color = None
    bg: Color = None
    bold: bool = False
    reverse: bool = False

    def reversed(self) -> CellStyle:
        return replace(self, reverse=not self.reverse)

    def sgr(self) -> str:
        """Return the full SGR sequence selecting this style from scratch."""
        params = ["0"]
        if self.bold:
            params.append("1")
        if self.reverse:
            params.append("7")
        params.append(_color_params(self.fg, 30))
        params.append(_color_params(self.bg, 40))
        return f"\033[{';'.join(params)}m"


DEFAULT_STYLE = CellStyle()
BOLD = CellStyle(bold=True)


@dataclass(frozen=True)
class UITheme:
    """Semantic palette used by the pane, path-bar and menu renderers."""

    name: str
    kinds: dict[FileKind, CellStyle]
    mark: CellStyle
    user_host: CellStyle
    path: CellStyle
    placeholder: CellStyle
    menu_header: CellStyle

    def style_for(self, kind: FileKind) -> CellStyle:
        return self.kinds.get(kind, DEFAULT_STYLE)


DEFAULT_THEME = UITheme(
    name="default",
    kinds={
        FileKind.REGULAR_EXECUTABLE: CellStyle(fg=GREEN, bold=True),
        FileKind.REGULAR_OTHER: DEFAULT_STYLE,
        FileKind.DIRECTORY: CellStyle(fg=BLUE, bold=True),
        FileKind.SYMLINK: CellStyle(fg=CYAN),
        FileKind.FIFO: CellStyle(fg=RED),
        FileKind.SOCKET: CellStyle(fg=YELLOW),
        FileKind.DEVICE: CellStyle(fg=WHITE),
        FileKind.OTHER: DEFAULT_STYLE,
    },
    mark=CellStyle(bg=MAGENTA),
    user_host=CellStyle(fg=GREEN, bold=True),
    path=CellStyle(fg=BLUE, bold=True),
    placeholder=BOLD,
    menu_header=BOLD,
)

PLAIN_THEME = UITheme(
    name="plain",
    kinds={},
    mark=CellStyle(reverse=True),
    user_host=DEFAULT_STYLE,
    path=DEFAULT_STYLE,
    placeholder=DEFAULT_STYLE,
    menu_header=DEFAULT_STYLE,
)


def resolve_theme(*, no_color: bool = False) -> UITheme:
    """Return the palette for the requested color mode."""
    if no_color:
        return PLAIN_THEME
    return DEFAULT_THEME


__all__ = [
    "Color",
    "CellStyle",
    "DEFAULT_STYLE",
    "BOLD",
    "UITheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "resolve_theme",
]
