"""Main interactive event loop for the terminal UI.

Each iteration applies finished background work, redraws when something
changed, then waits for one key. The wait is bounded by the pending
disambiguation deadline so ``d`` can fire on its own once the timer passes.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from ..input.keys import KeyEvent
from ..input.reader import read_key
from .screen import CLEAR_SCREEN, body_rows, render_lines
from .session import Session
from .terminal import TerminalController

logger = logging.getLogger(__name__)

IDLE_POLL_MS = 100


def read_timeout_ms(session: Session, idle_ms: int = IDLE_POLL_MS) -> int:
    """Input wait in milliseconds: the idle poll, shortened to the pending deadline."""
    remaining = session.next_timeout()
    if remaining is None:
        return idle_ms
    return max(0, min(idle_ms, int(remaining * 1000) + 1))


def _pending_text(session: Session) -> str:
    return session.matcher.pending_count + "".join(session.matcher.pending_keys)


def run_main_loop(
    session: Session,
    terminal: TerminalController,
    stdin_fd: int,
    read: Callable[..., KeyEvent | None] = read_key,
) -> None:
    with terminal.raw_mode():
        dirty = True
        last_size = None
        while not session.exited:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                session.preview_height = body_rows(term.lines)
                dirty = True

            if session.drain_background():
                dirty = True

            if dirty:
                lines = render_lines(
                    session.state,
                    term.columns,
                    term.lines,
                    pending=_pending_text(session),
                    git=session.git_info(),
                )
                terminal.write(CLEAR_SCREEN + "\r\n".join(lines))
                dirty = False

            try:
                event = read(stdin_fd, timeout_ms=read_timeout_ms(session))
            except KeyboardInterrupt:
                continue

            # A key that arrived before the deadline supersedes the fallback.
            if event is not None:
                session.process_key_event(event)
                dirty = True
            if session.tick():
                dirty = True
    logger.info("session ended in %s", session.state.current_path)
