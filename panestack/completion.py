"""Tab completion for the command (``:``) and shell (``$``) prompts.

Both providers complete the last word of the accumulated text to the longest
common prefix of its matches. A unique match also gets its terminator: a
space after commands and files, a slash after directories.
"""

from __future__ import annotations

import os
from collections.abc import Iterable

from .commands import COMMAND_NAMES

SET_OPTION_NAMES: tuple[str, ...] = (
    "hidden",
    "hidden!",
    "highlight",
    "highlight!",
    "nohidden",
    "nohighlight",
    "nopreview",
    "opener",
    "preview",
    "preview!",
    "ratios",
    "shell",
    "showinfo",
    "style",
    "tabstop",
)


def _split_last_word(acc: str) -> tuple[str, str]:
    idx = acc.rfind(" ")
    return acc[: idx + 1], acc[idx + 1 :]


def _complete_word(word: str, candidates: Iterable[str]) -> str:
    matches = sorted({c for c in candidates if c.startswith(word)})
    if not matches:
        return word
    if len(matches) == 1:
        return matches[0] + " "
    return os.path.commonprefix(matches)


def _complete_path(word: str, *, dirs_only: bool = False) -> str:
    base = os.path.basename(word)
    head = word[: len(word) - len(base)]
    search = os.path.expanduser(head) if head else "."
    try:
        names = os.listdir(search)
    except OSError:
        return word

    matches: list[str] = []
    for name in names:
        if not name.startswith(base):
            continue
        if name.startswith(".") and not base.startswith("."):
            continue
        if dirs_only and not os.path.isdir(os.path.join(search, name)):
            continue
        matches.append(name)
    if not matches:
        return word
    if len(matches) == 1:
        name = matches[0]
        suffix = "/" if os.path.isdir(os.path.join(search, name)) else " "
        return head + name + suffix
    return head + os.path.commonprefix(sorted(matches))


def _executables() -> set[str]:
    found: set[str] = set()
    for directory in os.environ.get("PATH", "").split(os.pathsep):
        try:
            with os.scandir(directory or ".") as entries:
                for entry in entries:
                    if entry.is_file() and os.access(entry.path, os.X_OK):
                        found.add(entry.name)
        except OSError:
            continue
    return found


def complete_command(acc: str) -> str:
    """Complete a ``:`` command line."""
    if " " not in acc:
        return _complete_word(acc, COMMAND_NAMES)
    name = acc.split(" ", 1)[0]
    head, word = _split_last_word(acc)
    if name == "cd":
        return head + _complete_path(word, dirs_only=True)
    if name == "set" and head == "set ":
        return head + _complete_word(word, SET_OPTION_NAMES)
    return acc


def complete_shell(acc: str) -> str:
    """Complete a ``$`` shell command line."""
    head, word = _split_last_word(acc)
    if not head.strip() and "/" not in word:
        return head + _complete_word(word, _executables())
    return head + _complete_path(word)
