"""Multi-key sequence matcher with timeout-based disambiguation.

The matcher buffers tokens for the active mode until they resolve to a
binding. When a buffered sequence is both a complete binding and the prefix
of a longer one (``d`` vs ``dd``), resolution is deferred until either another
token arrives or the disambiguation deadline passes.

The deadline is owned by the matcher; the runtime loop asks for the time
remaining, and calls ``expire`` from the same thread that feeds tokens.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..keybindings.registry import Binding, BindingRegistry
from ..state import Mode

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 1000
_COUNT_DIGIT_RE = re.compile(r"^[0-9]$")

COUNTING = "counting"
PENDING = "pending"
MATCHED = "matched"
DISCARDED = "discarded"


@dataclass(frozen=True)
class PendingTimer:
    """Armed disambiguation deadline and the binding to run if it passes."""

    deadline: float
    fallback: Binding | None


@dataclass
class KeyBuffer:
    keys: list[str] = field(default_factory=list)
    count: str = ""
    timer: PendingTimer | None = None

    def reset(self) -> None:
        self.keys.clear()
        self.count = ""
        self.timer = None

    def resolved_count(self) -> int:
        return int(self.count) if self.count else 0


@dataclass(frozen=True)
class Resolution:
    """Outcome of feeding one token (or of a timer expiry).

    ``binding`` is set only for ``MATCHED``; ``fallback`` only for
    ``PENDING``. They are separate so a pending wait can never be mistaken
    for a dispatch.
    """

    status: str
    binding: Binding | None = None
    fallback: Binding | None = None
    count: int = 0


class SequenceMatcher:
    """Resolve buffered key tokens against a ``BindingRegistry``."""

    def __init__(
        self,
        registry: BindingRegistry,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.registry = registry
        self.timeout_seconds = max(0, timeout_ms) / 1000.0
        self.clock = clock
        self.buffer = KeyBuffer()

    @property
    def pending_keys(self) -> tuple[str, ...]:
        return tuple(self.buffer.keys)

    @property
    def pending_count(self) -> str:
        return self.buffer.count

    def reset(self) -> None:
        self.buffer.reset()

    def feed(self, mode: Mode, token: str) -> Resolution:
        """Add ``token`` to the buffer and resolve it for ``mode``."""
        buffer = self.buffer
        buffer.timer = None

        if not buffer.keys and _COUNT_DIGIT_RE.match(token):
            buffer.count += token
            return Resolution(COUNTING)

        buffer.keys.append(token)
        match = self.registry.find(mode, buffer.keys)

        if match.partial is not None:
            buffer.timer = PendingTimer(
                deadline=self.clock() + self.timeout_seconds,
                fallback=match.exact,
            )
            logger.debug("pending %s (fallback=%s)", buffer.keys, match.exact.keys if match.exact else None)
            return Resolution(PENDING, fallback=match.exact, count=buffer.resolved_count())

        if match.exact is not None:
            count = buffer.resolved_count()
            buffer.reset()
            logger.debug("matched %s count=%d", match.exact.keys, count)
            return Resolution(MATCHED, binding=match.exact, count=count)

        logger.debug("no binding for %s", buffer.keys)
        buffer.reset()
        return Resolution(DISCARDED)

    def timeout_remaining(self, now: float | None = None) -> float | None:
        """Seconds until the armed deadline, or ``None`` when nothing is pending."""
        timer = self.buffer.timer
        if timer is None:
            return None
        current = self.clock() if now is None else now
        return max(0.0, timer.deadline - current)

    def expire(self, now: float | None = None) -> Resolution | None:
        """Fire the disambiguation timer if its deadline has passed.

        Returns ``None`` while the deadline is still ahead (or unarmed). Once
        fired the buffer is cleared; the fallback binding, if any, is returned
        as a ``MATCHED`` resolution.
        """
        timer = self.buffer.timer
        if timer is None:
            return None
        current = self.clock() if now is None else now
        if current < timer.deadline:
            return None
        count = self.buffer.resolved_count()
        self.buffer.reset()
        if timer.fallback is None:
            return Resolution(DISCARDED)
        logger.debug("timeout fallback %s count=%d", timer.fallback.keys, count)
        return Resolution(MATCHED, binding=timer.fallback, count=count)
