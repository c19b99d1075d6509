"""Application loop: draw a frame, resolve one command, execute it."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

from .commands import Command, CommandRegistry, parse_command
from .config import Options
from .errors import CommandError, PanestackError
from .nav import Nav
from .prompt import COMMAND_PREFIX, SHELL_PREFIX
from .terminal import Screen
from .ui import UI
from .ui_theme import DEFAULT_THEME, UITheme

logger = logging.getLogger(__name__)


def _count_arg(command: Command) -> int:
    if not command.args:
        return 1
    try:
        count = int(command.args[0])
    except ValueError as exc:
        raise CommandError(f"{command.name}: invalid count: {command.args[0]}") from exc
    if count <= 0:
        raise CommandError(f"{command.name}: count must be positive")
    return count


class App:
    """Owns the screen, UI, navigation stack and the command table."""

    def __init__(
        self,
        screen: Screen,
        options: Options,
        path: str = ".",
        *,
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self.screen = screen
        self.options = options
        self.ui = UI(screen, options, theme=theme)
        self.nav = Nav(path, self.ui.pane_height, hidden=options.hidden)
        self.quitting = False
        self.registry = (
            CommandRegistry()
            .register("redraw", self._redraw)
            .register("quit", self._quit)
            .register("up", self._up)
            .register("down", self._down)
            .register("top", self._top)
            .register("bottom", self._bottom)
            .register("updir", self._updir)
            .register("open", self._open)
            .register("toggle", self._toggle)
            .register("invert", self._invert)
            .register("clear", self._clear)
            .register("read", self._read)
            .register("shell", self._shell)
            .register("echo", self._echo)
            .register("cd", self._cd)
            .register("set", self._set)
            .register("info", self._info)
        )

    def execute(self, command: Command) -> None:
        """Dispatch ``command``; failures become the status message."""
        logger.debug("executing %s", command)
        try:
            self.registry.dispatch(command)
        except (PanestackError, OSError) as exc:
            self.ui.message = str(exc)
            logger.error("%s: %s", command, exc)

    def run(self) -> None:
        with self.screen.session():
            self._redraw(None)
            try:
                while not self.quitting:
                    self.ui.draw(self.nav)
                    self.execute(self.ui.get_expr())
            except EOFError as exc:
                logger.warning("%s, quitting", exc)
                self.quitting = True

    def _redraw(self, _command: Command | None) -> None:
        self.ui.renew()
        self.nav.renew(self.ui.pane_height)

    def _quit(self, _command: Command) -> None:
        self.quitting = True

    def _up(self, command: Command) -> None:
        self.nav.up(_count_arg(command))
        self.ui.echo_file_info(self.nav)

    def _down(self, command: Command) -> None:
        self.nav.down(_count_arg(command))
        self.ui.echo_file_info(self.nav)

    def _top(self, _command: Command) -> None:
        self.nav.top()
        self.ui.echo_file_info(self.nav)

    def _bottom(self, _command: Command) -> None:
        self.nav.bottom()
        self.ui.echo_file_info(self.nav)

    def _updir(self, _command: Command) -> None:
        self.nav.updir()
        self.ui.echo_file_info(self.nav)

    def _open(self, _command: Command) -> None:
        path = self.nav.open()
        if path is None:
            self.ui.echo_file_info(self.nav)
            return
        cmd = shlex.split(self.options.opener)
        if not cmd:
            raise CommandError("open: opener is empty")
        self._run_external([*cmd, path])

    def _toggle(self, _command: Command) -> None:
        self.nav.toggle_mark()

    def _invert(self, _command: Command) -> None:
        self.nav.invert_marks()

    def _clear(self, _command: Command) -> None:
        self.nav.clear_marks()

    def _read(self, _command: Command) -> None:
        text = self._prompt(COMMAND_PREFIX)
        if not text.strip():
            return
        self.execute(parse_command(text))

    def _shell(self, command: Command) -> None:
        if command.args:
            line = " ".join(command.args)
        else:
            line = self._prompt(SHELL_PREFIX)
        if not line.strip():
            return
        self._run_external([self.options.shell, "-c", line])

    def _prompt(self, prefix: str) -> str:
        self.ui.clear_msg()
        text = self.ui.prompt(prefix)
        # Resize events are consumed by the prompt; lay out for the current size.
        self._redraw(None)
        return text

    def _echo(self, command: Command) -> None:
        self.ui.message = " ".join(command.args)

    def _cd(self, command: Command) -> None:
        target = command.args[0] if command.args else str(Path.home())
        self.nav.cd(target)

    def _set(self, command: Command) -> None:
        if not command.args:
            raise CommandError("set: missing option name")
        name, *rest = command.args
        self.apply_options(self.options.with_setting(name, " ".join(rest) if rest else None))

    def _info(self, _command: Command) -> None:
        self.ui.echo_file_info(self.nav)

    def apply_options(self, options: Options) -> None:
        self.options = options
        self.ui.reconfigure(options)
        self.nav.hidden = options.hidden
        self.nav.renew(self.ui.pane_height)

    def shell_env(self) -> dict[str, str]:
        """Environment for subprocesses: ``f`` current, ``fs`` marked, ``fx`` either."""
        env = dict(os.environ)
        env["f"] = self.nav.curr_path() if self.nav.curr_file() is not None else ""
        env["fs"] = "\n".join(sorted(self.nav.marks))
        env["fx"] = "\n".join(self.nav.marked_or_current())
        return env

    def _run_external(self, argv: list[str]) -> None:
        """Run ``argv`` with the terminal released, then take it back."""
        logger.info("running %s", shlex.join(argv))
        env = self.shell_env()
        self.ui.pause()
        try:
            proc = subprocess.run(argv, env=env, check=False)
        finally:
            self.ui.resume()
            self.ui.sync()
            # The terminal may have been resized while it was released.
            self._redraw(None)
        if proc.returncode != 0:
            logger.warning("%s exited with status %d", argv[0], proc.returncode)
