"""Command-line front door for panestack.

Parses CLI options, loads the option file, sets up file logging and hands
control to the interactive application loop.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from .app import App
from .config import DEFAULT_CONFIG_PATH, load_options
from .errors import ConfigError, TerminalInitError
from .log import DEFAULT_LOG_PATH, setup_logging
from .terminal import Screen
from .ui_theme import resolve_theme

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="panestack",
        description="Browse directories in side-by-side panes with a file preview.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to start in. Defaults to current directory.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"JSON option file (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help=f"Log file path (default: {DEFAULT_LOG_PATH}).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Minimum level written to the log file.",
    )
    parser.add_argument("--no-preview", action="store_true", help="Disable the preview pane.")
    parser.add_argument("--no-color", action="store_true", help="Draw without colors.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run panestack until the user quits."""
    args = build_parser().parse_args(argv)

    path = Path(args.path) if args.path is not None else Path.cwd()
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    try:
        setup_logging(args.log_file, args.log_level)
    except OSError as exc:
        raise SystemExit(f"Cannot open log file: {exc}") from exc

    try:
        options = load_options(args.config)
        if args.no_preview:
            options = replace(options, preview=False)
    except ConfigError as exc:
        logger.error("%s", exc)
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    logger.info("starting in %s", path)
    app = App(Screen(), options, str(path), theme=resolve_theme(no_color=args.no_color))
    try:
        app.run()
    except TerminalInitError as exc:
        logger.critical("%s", exc)
        raise SystemExit(str(exc)) from exc
    logger.info("exiting")
