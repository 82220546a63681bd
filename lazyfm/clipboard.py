"""System clipboard writes for copied preview lines."""

from __future__ import annotations

import shutil
import subprocess

# First available tool wins.
CLIPBOARD_COMMANDS = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
)


class ClipboardError(RuntimeError):
    pass


def clipboard_command() -> list[str] | None:
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return list(cmd)
    return None


def copy_to_clipboard(text: str) -> None:
    cmd = clipboard_command()
    if cmd is None:
        raise ClipboardError("no clipboard tool found")
    try:
        proc = subprocess.run(cmd, input=text, text=True, check=False, timeout=5.0, capture_output=True)
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ClipboardError(str(exc)) from exc
    if proc.returncode != 0:
        raise ClipboardError(proc.stderr.strip() or f"{cmd[0]} failed")
