"""Resolve key presses into commands through prefix matching.

The resolver is a two-state machine. ``IDLE`` has no pending keys;
``ACCUMULATING`` holds a key sequence that is a strict prefix of at least one
binding. Every input event either dispatches a command (returning to
``IDLE``) or asks the caller to show the remaining candidates.

An exact match dispatches immediately even when longer bindings share its
prefix; those longer bindings are then unreachable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from .commands import REDRAW, Command
from .config import Options
from .input import Event, ResizeEvent

NAMED_KEY_TOKENS: dict[str, str] = {
    "SPACE": "<space>",
    "ENTER": "<cr>",
    "BACKSPACE": "<bs>",
    "BACKSPACE2": "<bs2>",
    "TAB": "<tab>",
    "UP": "<up>",
    "DOWN": "<down>",
    "LEFT": "<left>",
    "RIGHT": "<right>",
    "CTRL_L": "<c-l>",
}


class ResolverState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


@dataclass(frozen=True)
class Resolution:
    """Outcome of feeding one event.

    ``command`` is ``None`` only while more keys are needed; ``candidates``
    then holds the bindings to list in the overlay menu.
    """

    command: Command | None = None
    message: str | None = None
    candidates: Mapping[str, Command] | None = None


def token_for(key: str) -> str | None:
    """Return the canonical token for a decoded key, or ``None`` if unhandled."""
    if len(key) == 1:
        return key
    return NAMED_KEY_TOKENS.get(key)


def find_binds(keys: Mapping[str, Command], prefix: str) -> tuple[dict[str, Command], bool]:
    """Return bindings starting with ``prefix`` and whether one equals it."""
    binds: dict[str, Command] = {}
    exact = False
    for key, command in keys.items():
        if key.startswith(prefix):
            binds[key] = command
            if key == prefix:
                exact = True
    return binds, exact


class KeyResolver:
    """Accumulate key tokens until they name exactly one binding."""

    def __init__(self, options: Options) -> None:
        self.keys: Mapping[str, Command] = options.keys
        self.pending: list[str] = []

    @property
    def state(self) -> ResolverState:
        return ResolverState.ACCUMULATING if self.pending else ResolverState.IDLE

    @property
    def sequence(self) -> str:
        return "".join(self.pending)

    def reset(self) -> None:
        self.pending = []

    def _finish(self, command: Command, message: str | None = None) -> Resolution:
        self.reset()
        return Resolution(command=command, message=message)

    def feed(self, event: Event) -> Resolution:
        if isinstance(event, ResizeEvent):
            return self._finish(REDRAW)

        if event.key == "ESC":
            return self._finish(REDRAW)
        token = token_for(event.key)
        if token is None:
            return self._finish(REDRAW, "unhandled key")

        self.pending.append(token)
        seq = self.sequence
        binds, exact = find_binds(self.keys, seq)

        if not binds:
            return self._finish(REDRAW, f"unknown mapping: {seq}")
        if exact:
            return self._finish(self.keys[seq])
        return Resolution(candidates=binds)
