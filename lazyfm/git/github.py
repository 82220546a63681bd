"""GitHub CLI (``gh``) wrappers for the issue/PR previews."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .operations import GitCommandError

logger = logging.getLogger(__name__)

GH_TIMEOUT_SECONDS = 30.0
GH_MISSING_MESSAGE = "gh CLI is not installed. Install it from https://cli.github.com/"


def run_gh(args: list[str], cwd: Path) -> str:
    logger.debug("gh %s (cwd=%s)", " ".join(args), cwd)
    try:
        proc = subprocess.run(
            ["gh", *args],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=GH_TIMEOUT_SECONDS,
        )
    except FileNotFoundError as exc:
        raise GitCommandError(GH_MISSING_MESSAGE) from exc
    except subprocess.TimeoutExpired as exc:
        raise GitCommandError(f"gh {args[0]} timed out") from exc
    if proc.returncode != 0:
        raise GitCommandError(proc.stderr.strip() or f"gh {args[0]} failed")
    return proc.stdout.strip()


def issue_list(cwd: Path) -> str:
    return run_gh(["issue", "list"], cwd)


def pr_list(cwd: Path) -> str:
    return run_gh(["pr", "list"], cwd)


def open_in_browser(cwd: Path) -> None:
    run_gh(["browse"], cwd)
