"""Command values, command-line parsing, and the name-to-handler registry."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass

from .errors import CommandError

COMMAND_NAMES: tuple[str, ...] = (
    "bottom",
    "cd",
    "clear",
    "down",
    "echo",
    "info",
    "invert",
    "open",
    "quit",
    "read",
    "redraw",
    "set",
    "shell",
    "toggle",
    "top",
    "up",
    "updir",
)


@dataclass(frozen=True)
class Command:
    """An opaque action produced by key resolution or typed at the prompt."""

    name: str
    args: tuple[str, ...] = ()

    def description(self) -> str:
        """Text shown for this command in the key overlay menu."""
        if self.name == "shell" and self.args:
            return "$" + " ".join(self.args)
        return " ".join((self.name, *self.args))

    def __str__(self) -> str:
        return self.description()


REDRAW = Command("redraw")


def parse_command(text: str) -> Command:
    """Parse ``name arg...`` (optionally ``:``-prefixed) or ``$shell command``."""
    stripped = text.strip()
    if stripped.startswith("$"):
        body = stripped[1:].strip()
        return Command("shell", (body,) if body else ())
    if stripped.startswith(":"):
        stripped = stripped[1:].strip()
    try:
        words = shlex.split(stripped)
    except ValueError as exc:
        raise CommandError(f"parsing command: {exc}") from exc
    if not words:
        raise CommandError("empty command")
    name, *args = words
    if name not in COMMAND_NAMES:
        raise CommandError(f"unknown command: {name}")
    return Command(name, tuple(args))


class CommandRegistry:
    """Dispatch table from command name to handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[Command], None]] = {}

    def register(self, name: str, handler: Callable[[Command], None]) -> CommandRegistry:
        """Register ``handler`` for ``name`` and return ``self`` for fluent usage."""
        self._handlers[name] = handler
        return self

    def dispatch(self, command: Command) -> None:
        handler = self._handlers.get(command.name)
        if handler is None:
            raise CommandError(f"unknown command: {command.name}")
        handler(command)


__all__ = [
    "COMMAND_NAMES",
    "Command",
    "CommandRegistry",
    "REDRAW",
    "parse_command",
]
