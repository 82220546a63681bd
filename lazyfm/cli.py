"""Command-line front door for lazyfm.

Parses CLI options, merges them over the persisted config, and launches the
interactive session on the target directory.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from .editor import launch_editor
from .keybindings.definitions import create_default_bindings
from .keybindings.help import format_bindings
from .runtime.config import AppConfig, load_app_config
from .runtime.logs import configure_logging
from .state import initial_state

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyfm",
        description="Vim-modal terminal file manager.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--editor", default=None, help="Editor command (default: config, $EDITOR, $VISUAL, vi).")
    parser.add_argument("--show-hidden", action="store_true", help="Show dotfiles on startup.")
    parser.add_argument(
        "--timeout-ms",
        type=_positive_int,
        default=None,
        help="Multi-key disambiguation timeout in milliseconds.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for the log file (default: WARNING).",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--keys", action="store_true", help="Print key bindings and exit.")
    return parser


def merge_config(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Apply CLI overrides on top of the persisted config."""
    if args.editor:
        config = replace(config, editor=args.editor)
    if args.show_hidden:
        config = replace(config, show_hidden=True)
    if args.timeout_ms is not None:
        config = replace(config, key_timeout_ms=args.timeout_ms)
    return config


def resolve_start_path(raw: str | None, default_path: Path | None = None) -> Path:
    """Directory to open; a file argument opens its parent directory."""
    path = Path(raw).expanduser() if raw else (default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    return path if path.is_dir() else path.parent


def run_app(start: Path, config: AppConfig) -> None:
    from .runtime.loop import run_main_loop
    from .runtime.session import Session
    from .runtime.terminal import TerminalController

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        raise SystemExit("lazyfm needs an interactive terminal.")

    terminal = TerminalController(stdin_fd, stdout_fd)

    def open_in_editor(path: Path, line: int | None) -> str | None:
        return launch_editor(config.editor, path, terminal.disable_tui_mode, terminal.enable_tui_mode, line)

    state = initial_state(start, show_hidden=config.show_hidden, sort=config.sort)
    session = Session(state, config=config, launch_editor=open_in_editor)
    session.start()
    run_main_loop(session, terminal, stdin_fd)


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch lazyfm.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)

    if args.keys:
        sys.stdout.write(format_bindings(create_default_bindings()))
        return

    start = resolve_start_path(args.path, default_path)
    log_path = configure_logging(args.log_level, args.log_file)
    config = merge_config(load_app_config(), args)
    logger.info("starting in %s (log=%s)", start, log_path)
    run_app(start, config)
