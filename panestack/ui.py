"""Frame orchestration: pane windows, path bar, status line and overlay menu.

One ``draw`` call renders a complete frame (path bar, directory stack, optional
preview pane, status message) into the screen's back buffer and commits it
with exactly one flush. Preview failures only cost the preview; they are
logged and echoed on the status line.
"""

from __future__ import annotations

import getpass
import logging
import os
import socket
import stat
import time
from collections.abc import Mapping
from pathlib import Path

from .commands import Command
from .config import SHOWINFO_VALUES, Options
from .directory_view import draw_dir, humanize
from .errors import PreviewError, TerminalInitError
from .highlight import Highlighter
from .keys import KeyResolver
from .layout import pane_geometry
from .menu import menu_lines
from .nav import Dir, Nav, home_shorthand
from .preview import draw_file, open_for_preview
from .prompt import PromptLoop
from .terminal import Screen
from .ui_theme import DEFAULT_STYLE, DEFAULT_THEME, UITheme
from .window import Window

logger = logging.getLogger(__name__)


class UI:
    """Owns every window on screen and draws whole frames."""

    def __init__(
        self,
        screen: Screen,
        options: Options,
        *,
        theme: UITheme = DEFAULT_THEME,
        user: str | None = None,
        host: str | None = None,
        home: str | None = None,
    ) -> None:
        self.screen = screen
        self.theme = theme
        self.user = user if user is not None else os.environ.get("USER") or getpass.getuser()
        self.host = host if host is not None else socket.gethostname()
        self.home = home if home is not None else str(Path.home())
        self.message = ""

        wtot, htot = screen.size()
        self.pwdwin = Window(screen, wtot, 1, 0, 0)
        self.msgwin = Window(screen, wtot, 1, 0, htot - 1)
        self.menuwin = Window(screen, wtot, 1, 0, htot - 2)
        self.wins: list[Window] = []
        self.reconfigure(options)

    def reconfigure(self, options: Options) -> None:
        """Adopt new options: pane count, tab stops, highlighting, key map."""
        self.options = options
        self.resolver = KeyResolver(options)
        self.highlighter = Highlighter(options.style) if options.highlight else None
        wtot, htot = self.screen.size()
        self.wins = [
            Window(self.screen, w, h, x, y, tabstop=options.tabstop)
            for w, h, x, y in pane_geometry(wtot, htot, options.ratios)
        ]
        for win in (self.pwdwin, self.msgwin, self.menuwin):
            win.tabstop = options.tabstop
        if options.showinfo not in SHOWINFO_VALUES:
            self.message = f"unknown showinfo type: {options.showinfo}"
            logger.warning(self.message)

    @property
    def pane_height(self) -> int:
        return self.wins[0].h

    def renew(self) -> None:
        """Recompute every window's geometry for the current terminal size."""
        self.screen.flush()
        wtot, htot = self.screen.size()
        for win, (w, h, x, y) in zip(self.wins, pane_geometry(wtot, htot, self.options.ratios)):
            win.renew(w, h, x, y)
        self.pwdwin.renew(wtot, 1, 0, 0)
        self.msgwin.renew(wtot, 1, 0, htot - 1)
        self.menuwin.renew(wtot, 1, 0, htot - 2)

    def _report(self, message: str) -> None:
        self.message = message
        logger.error(message)

    def echo_file_info(self, nav: Nav) -> None:
        f = nav.curr_file()
        if f is None:
            return
        self.message = f"{f.mode_string} {humanize(f.size)} {time.ctime(f.mtime)}"

    def clear_msg(self) -> None:
        win = self.msgwin
        win.printl(0, 0, DEFAULT_STYLE, "")
        self.screen.set_cursor(win.x, win.y)
        self.screen.flush()

    def _draw_path_bar(self, nav: Nav) -> None:
        path = home_shorthand(nav.curr_dir().path, self.home)
        x = self.pwdwin.print(0, 0, self.theme.user_host, f"{self.user}@{self.host}")
        x = self.pwdwin.print(x, 0, DEFAULT_STYLE, ":")
        self.pwdwin.print(x, 0, self.theme.path, path)

    def _draw_stack(self, nav: Nav) -> None:
        panes = len(self.wins)
        if self.options.preview:
            panes -= 1
        length = min(panes, len(nav.dirs))
        woff = panes - length
        doff = len(nav.dirs) - length
        for i in range(length):
            draw_dir(self.wins[woff + i], nav.dirs[doff + i], nav.marks, self.options.showinfo, self.theme)

    def _draw_preview(self, nav: Nav) -> None:
        if nav.curr_file() is None:
            return

        win = self.wins[-1]
        path = nav.curr_path()

        try:
            st = os.stat(path)
        except OSError as exc:
            self._report(f"getting file information: {exc}")
            return

        if stat.S_ISDIR(st.st_mode):
            d = Dir(path, hidden=self.options.hidden)
            d.load(nav.inds.get(path, 0), nav.poss.get(path, 0), nav.height, nav.names.get(path))
            draw_dir(win, d, nav.marks, self.options.showinfo, self.theme)
        elif stat.S_ISREG(st.st_mode):
            try:
                handle = open_for_preview(path)
            except OSError as exc:
                self._report(f"opening file: {exc}")
                return
            with handle:
                try:
                    draw_file(
                        win,
                        handle,
                        filename=os.path.basename(path),
                        highlighter=self.highlighter,
                        theme=self.theme,
                    )
                except PreviewError as exc:
                    self._report(str(exc))

    def draw(self, nav: Nav) -> None:
        """Render one complete frame for ``nav``."""
        self.screen.clear()
        try:
            self._draw_path_bar(nav)
            self._draw_stack(nav)
            if self.options.preview:
                self._draw_preview(nav)
        finally:
            self.msgwin.print(0, 0, DEFAULT_STYLE, self.message)
            self.screen.flush()

    def list_binds(self, binds: Mapping[str, Command]) -> None:
        """Show binding candidates in the overlay menu above the status line."""
        lines = menu_lines(binds)
        self.menuwin.h = len(lines)
        self.menuwin.y = max(0, self.msgwin.y - len(lines))

        self.menuwin.printl(0, 0, self.theme.menu_header, lines[0])
        for i, line in enumerate(lines[1:], start=1):
            self.menuwin.printl(0, i, DEFAULT_STYLE, line)

        self.screen.flush()

    def get_expr(self) -> Command:
        """Read input events until the key resolver yields a command."""
        while True:
            resolution = self.resolver.feed(self.screen.poll_event())
            if resolution.message is not None:
                self.message = resolution.message
            if resolution.command is not None:
                return resolution.command
            if resolution.candidates is not None:
                self.list_binds(resolution.candidates)

    def prompt(self, prefix: str) -> str:
        return PromptLoop(self.screen, self.msgwin, prefix).run()

    def pause(self) -> None:
        """Hand the terminal to a subprocess."""
        self.screen.close()

    def resume(self) -> None:
        """Take the terminal back; failure leaves nothing to draw on."""
        try:
            self.screen.init()
        except TerminalInitError as exc:
            logger.critical("%s", exc)
            raise SystemExit(str(exc)) from exc

    def sync(self) -> None:
        try:
            self.screen.sync()
        except OSError as exc:
            logger.error("syncing terminal: %s", exc)
        self.screen.set_cursor(0, 0)
        self.screen.hide_cursor()
