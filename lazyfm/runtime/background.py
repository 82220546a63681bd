"""Background job runners.

Jobs run off the input thread and return reducer actions. Results are
queued and applied later by the state owner via ``drain_results``, so state
is only ever mutated from one thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from queue import Empty, Queue

from ..actions import Action, SetError

logger = logging.getLogger(__name__)

Job = Callable[[], Iterable[Action]]


@dataclass(frozen=True)
class JobResult:
    """Actions produced by one job; ``channel``/``request_id`` identify stale results."""

    actions: tuple[Action, ...]
    channel: str = ""
    request_id: int = 0


def run_job(job: Job) -> tuple[Action, ...]:
    """Run ``job`` and convert unexpected exceptions into an error action."""
    try:
        return tuple(job())
    except Exception as exc:
        logger.exception("background job failed")
        return (SetError(f"Error: {exc}"),)


class ThreadedJobRunner:
    """Run each job on a daemon thread and queue its actions."""

    def __init__(self) -> None:
        self._results: Queue[JobResult] = Queue()

    def submit(self, job: Job, channel: str = "", request_id: int = 0) -> None:
        def worker() -> None:
            self._results.put(JobResult(actions=run_job(job), channel=channel, request_id=request_id))

        threading.Thread(target=worker, name=f"lazyfm-{channel or 'job'}", daemon=True).start()

    def drain_results(self) -> list[JobResult]:
        """Drain all completed job results."""
        out: list[JobResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


class InlineJobRunner:
    """Run jobs immediately on the caller's thread."""

    def __init__(self) -> None:
        self._results: list[JobResult] = []

    def submit(self, job: Job, channel: str = "", request_id: int = 0) -> None:
        self._results.append(JobResult(actions=run_job(job), channel=channel, request_id=request_id))

    def drain_results(self) -> list[JobResult]:
        out, self._results = self._results, []
        return out
