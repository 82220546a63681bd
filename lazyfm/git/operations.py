"""Git commands triggered from key bindings.

All commands run ``git -C <cwd>`` synchronously with a timeout; callers run
them off the input thread. Failures raise ``GitCommandError`` carrying git's
stderr so handlers can show it verbatim.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30.0


class GitCommandError(RuntimeError):
    """A git or gh invocation failed or could not be started."""


def run_git(
    args: Sequence[str],
    cwd: Path,
    timeout_seconds: float = GIT_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess[str]:
    """Run ``git`` in ``cwd`` and return the completed process (never checks)."""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        return subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise GitCommandError("git is not installed") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitCommandError(f"git {args[0]} timed out") from exc


def _checked(args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    proc = run_git(args, cwd)
    if proc.returncode != 0:
        raise GitCommandError(proc.stderr.strip() or f"git {args[0]} failed")
    return proc


class GitOperations:
    """Mutating git commands; ``on_change`` runs after the index or HEAD moves."""

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def add(self, paths: Sequence[Path], cwd: Path) -> None:
        _checked(["add", "--", *(str(p) for p in paths)], cwd)
        self._changed()

    def commit(self, message: str, cwd: Path) -> str:
        proc = _checked(["commit", "-m", message], cwd)
        self._changed()
        return proc.stdout.strip()

    def push(self, cwd: Path) -> str:
        proc = _checked(["push"], cwd)
        return (proc.stdout + proc.stderr).strip()


def git_diff(path: Path, cwd: Path) -> str:
    """Staged diff followed by unstaged diff for ``path``."""
    staged = run_git(["diff", "--cached", "--", str(path)], cwd)
    unstaged = run_git(["diff", "--", str(path)], cwd)
    parts = [out.strip() for out in (staged.stdout, unstaged.stdout) if out.strip()]
    return "\n".join(parts) or "(no changes)"


def git_log(cwd: Path, count: int = 50) -> str:
    proc = run_git(["log", "--oneline", "--graph", f"-{max(1, count)}"], cwd)
    return proc.stdout.strip() or "(no commits)"
