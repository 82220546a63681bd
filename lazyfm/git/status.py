"""Git repository status with a short-lived cache.

Status is read from ``git status --porcelain=v1 -z`` and cached per
directory for a few seconds so that rapid navigation does not spawn a git
process on every redraw.
"""

from __future__ import annotations

import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

STATUS_TTL_SECONDS = 5.0
STATUS_TIMEOUT_SECONDS = 0.5


@dataclass(frozen=True)
class GitFileStatus:
    index: str
    work_tree: str
    path: str


@dataclass(frozen=True)
class GitRepositoryInfo:
    is_repo: bool
    branch: str = ""
    files: dict[str, GitFileStatus] = field(default_factory=dict)


NOT_A_REPO = GitRepositoryInfo(is_repo=False)


def parse_porcelain(output: str) -> dict[str, GitFileStatus]:
    """Parse NUL-separated porcelain v1 records keyed by repo-relative path."""
    files: dict[str, GitFileStatus] = {}
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if len(token) < 4 or token[2] != " ":
            continue
        status = token[:2]
        path_text = token[3:]
        files[path_text] = GitFileStatus(index=status[0], work_tree=status[1], path=path_text)
        # Renames and copies carry the source path as an extra token.
        if "R" in status or "C" in status:
            index += 1
    return files


def display_status(status: GitFileStatus) -> str | None:
    """Single-letter badge, preferring work-tree state over the index."""
    if status.index == "?" and status.work_tree == "?":
        return "?"
    if status.index == "!" and status.work_tree == "!":
        return "!"
    if status.work_tree in {"M", "D"}:
        return status.work_tree
    if status.index in {"A", "M"}:
        return "A"
    if status.index in {"D", "R"}:
        return status.index
    return None


def is_staged(status: GitFileStatus) -> bool:
    return status.index not in {" ", "?", "!"}


def _run(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=STATUS_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None


def fetch_git_info(directory: Path) -> GitRepositoryInfo:
    branch_proc = _run(["rev-parse", "--abbrev-ref", "HEAD"], directory)
    if branch_proc is None or branch_proc.returncode != 0:
        return NOT_A_REPO
    status_proc = _run(["status", "--porcelain=v1", "-z"], directory)
    files = parse_porcelain(status_proc.stdout) if status_proc is not None else {}
    return GitRepositoryInfo(is_repo=True, branch=branch_proc.stdout.strip(), files=files)


class GitStatusCache:
    """Single-entry TTL cache in front of ``fetch_git_info``."""

    def __init__(
        self,
        ttl_seconds: float = STATUS_TTL_SECONDS,
        fetch: Callable[[Path], GitRepositoryInfo] = fetch_git_info,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._fetch = fetch
        self._clock = clock
        self._path: Path | None = None
        self._info: GitRepositoryInfo | None = None
        self._stamp = 0.0

    def clear(self) -> None:
        self._path = None
        self._info = None

    def get(self, directory: Path) -> GitRepositoryInfo:
        now = self._clock()
        if self._info is not None and self._path == directory and now - self._stamp < self.ttl_seconds:
            return self._info
        info = self._fetch(directory)
        self._path = directory
        self._info = info
        self._stamp = now
        return info
