"""Options object and its JSON option file.

Options are read once at startup into a frozen ``Options`` value that is
handed to the UI, key resolver and navigation layer. A missing, unreadable or
malformed file falls back to defaults; keys that are present are validated
strictly and raise ``ConfigError``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_config_dir

from .commands import Command, parse_command
from .errors import CommandError, ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "panestack"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

SHOWINFO_VALUES: tuple[str, ...] = ("none", "size", "time")

_DEFAULT_KEY_TEXT: dict[str, str] = {
    "k": "up",
    "<up>": "up",
    "j": "down",
    "<down>": "down",
    "h": "updir",
    "<left>": "updir",
    "l": "open",
    "<right>": "open",
    "<cr>": "open",
    "gg": "top",
    "G": "bottom",
    "gh": "cd ~",
    "g/": "cd /",
    "<space>": "toggle",
    "v": "invert",
    "u": "clear",
    ":": "read",
    "$": "shell",
    "e": '$$EDITOR "$f"',
    "i": '$$PAGER "$f"',
    "w": "$$SHELL",
    "zh": "set hidden!",
    "zp": "set preview!",
    "zn": "set showinfo none",
    "zs": "set showinfo size",
    "zt": "set showinfo time",
    "<c-l>": "redraw",
    "q": "quit",
}

DEFAULT_KEYS: dict[str, Command] = {key: parse_command(text) for key, text in _DEFAULT_KEY_TEXT.items()}


@dataclass(frozen=True)
class Options:
    """Process-wide settings, built once and passed to components explicitly."""

    ratios: tuple[int, ...] = (1, 2, 3)
    tabstop: int = 8
    showinfo: str = "none"
    preview: bool = True
    hidden: bool = False
    highlight: bool = True
    style: str = "monokai"
    shell: str = "sh"
    opener: str = "xdg-open"
    keys: Mapping[str, Command] = field(default_factory=lambda: dict(DEFAULT_KEYS))

    def __post_init__(self) -> None:
        if not self.ratios:
            raise ConfigError("ratios", "must not be empty")
        if any(isinstance(r, bool) or not isinstance(r, int) or r <= 0 for r in self.ratios):
            raise ConfigError("ratios", "must be positive integers")
        if isinstance(self.tabstop, bool) or not isinstance(self.tabstop, int) or self.tabstop <= 0:
            raise ConfigError("tabstop", "must be a positive integer")
        if self.preview and len(self.ratios) < 2:
            raise ConfigError("ratios", "preview needs at least two panes")

    def with_setting(self, name: str, value: str | None = None) -> Options:
        """Return a copy with one setting changed, as typed at ``:set``.

        Booleans accept ``name``, ``noname`` and ``name!`` (toggle).
        """
        for flag in ("preview", "hidden", "highlight"):
            if name == flag:
                return replace(self, **{flag: True})
            if name == "no" + flag:
                return replace(self, **{flag: False})
            if name == flag + "!":
                return replace(self, **{flag: not getattr(self, flag)})
        if value is None:
            raise ConfigError(name, "missing value")
        if name == "tabstop":
            return replace(self, tabstop=_parse_int(name, value))
        if name == "ratios":
            return replace(self, ratios=tuple(_parse_int(name, part) for part in value.split(":")))
        if name in {"showinfo", "style", "shell", "opener"}:
            return replace(self, **{name: value})
        raise ConfigError(name, "unknown option")


def _parse_int(key: str, text: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        raise ConfigError(key, f"invalid integer value: {text!r}") from exc


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict[str, object]:
    """Load the JSON option file as a dict.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring option file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring option file %s: top level is not an object", path)
        return {}
    return data


def _keys_from_config(raw: object) -> dict[str, Command]:
    if not isinstance(raw, dict):
        raise ConfigError("keys", "must be an object")
    keys = dict(DEFAULT_KEYS)
    for key, text in raw.items():
        if text is None:
            keys.pop(key, None)
            continue
        if not isinstance(text, str):
            raise ConfigError(f"keys.{key}", "command must be a string")
        try:
            keys[key] = parse_command(text)
        except CommandError as exc:
            raise ConfigError(f"keys.{key}", str(exc)) from exc
    return keys


def options_from_config(data: Mapping[str, object]) -> Options:
    """Validate a decoded option file into ``Options``."""
    kwargs: dict[str, object] = {}
    if "ratios" in data:
        ratios = data["ratios"]
        if not isinstance(ratios, list):
            raise ConfigError("ratios", "must be a list")
        kwargs["ratios"] = tuple(ratios)
    if "tabstop" in data:
        kwargs["tabstop"] = data["tabstop"]
    for name in ("preview", "hidden", "highlight"):
        if name in data:
            if not isinstance(data[name], bool):
                raise ConfigError(name, "must be true or false")
            kwargs[name] = data[name]
    for name in ("showinfo", "style", "shell", "opener"):
        if name in data:
            if not isinstance(data[name], str):
                raise ConfigError(name, "must be a string")
            kwargs[name] = data[name]
    if "keys" in data:
        kwargs["keys"] = _keys_from_config(data["keys"])
    unknown = sorted(set(data) - set(Options.__dataclass_fields__))
    for name in unknown:
        logger.warning("ignoring unknown option: %s", name)
    return Options(**kwargs)


def load_options(path: Path | None = None) -> Options:
    """Read options from ``path`` (default: the platform config directory)."""
    return options_from_config(load_config(path or DEFAULT_CONFIG_PATH))


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_KEYS",
    "Options",
    "SHOWINFO_VALUES",
    "load_config",
    "load_options",
    "options_from_config",
]
