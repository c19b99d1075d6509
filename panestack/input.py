"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Printable characters decode to themselves (UTF-8 aware); everything else
decodes to an upper-case name such as ``ENTER``, ``UP`` or ``CTRL_L``.
"""

from __future__ import annotations

import os
import select
from dataclasses import dataclass

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_NAMES = {
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE2",
    b" ": "SPACE",
}

_CSI_FINALS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_CODES = {
    b"1": "HOME",
    b"2": "INSERT",
    b"3": "DELETE",
    b"4": "END",
    b"5": "PGUP",
    b"6": "PGDN",
    b"7": "HOME",
    b"8": "END",
}


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key press."""

    key: str

    @property
    def ch(self) -> str | None:
        """Return the typed character, or ``None`` for named keys."""
        return self.key if len(self.key) == 1 else None


@dataclass(frozen=True)
class ResizeEvent:
    """Terminal size changed to ``width`` x ``height`` cells."""

    width: int
    height: int


Event = KeyEvent | ResizeEvent


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8_char(fd: int, lead: bytes) -> str:
    data = lead
    for _ in range(_utf8_length(lead[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _read_csi(fd: int) -> str:
    params = b""
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part.isalpha() or part == b"~":
            break
        params += part
        if len(params) > 16:
            return "UNKNOWN"
    if part == b"~":
        return _CSI_TILDE_CODES.get(params.split(b";", 1)[0], "UNKNOWN")
    return _CSI_FINALS.get(part, "UNKNOWN")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; returns ``""`` on timeout.

    Raises ``EOFError`` when the input side of the terminal is closed.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            raise EOFError("terminal input closed")

    name = _CONTROL_NAMES.get(ch)
    if name is not None:
        return name

    if ch != b"\x1b":
        code = ch[0]
        if code < 0x20:
            return f"CTRL_{chr(code + 0x40)}"
        return _read_utf8_char(fd, ch)

    # Escape / arrow key sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINALS.get(final, "UNKNOWN")
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"
    return _read_csi(fd)


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "Event",
    "KeyEvent",
    "ResizeEvent",
    "read_key",
]
