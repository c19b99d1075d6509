"""Exception types raised across panestack.

Only terminal initialization failures are fatal; the rest are turned into
status-line messages by the runtime loop.
"""

from __future__ import annotations


class PanestackError(Exception):
    """Base class for recoverable panestack failures."""


class ConfigError(PanestackError):
    """Option file contains a value that cannot be used."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class CommandError(PanestackError):
    """Command text could not be parsed or executed."""


class PreviewError(PanestackError):
    """Reading a file for the preview pane failed."""


class TerminalInitError(PanestackError):
    """The controlling terminal could not be put into TUI mode."""
