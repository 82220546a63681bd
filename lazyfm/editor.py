"""Editor launch helper for external file edits.

Runs the configured editor while temporarily leaving raw/alternate-screen TUI
mode. Returns an error message string instead of raising for UI-friendly
handling.
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Callable


def editor_command(editor: str, target: Path, line: int | None = None) -> list[str]:
    """Build the argv for ``editor``, adding ``+LINE`` when ``line`` is given."""
    cmd = shlex.split(editor)
    if line is not None and line > 0:
        cmd.append(f"+{line}")
    cmd.append(str(target))
    return cmd


def launch_editor(
    editor: str,
    target: Path,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
    line: int | None = None,
) -> str | None:
    if not editor.strip():
        return "Cannot edit: no editor configured."

    disable_tui_mode()
    try:
        subprocess.run(editor_command(editor, target, line), check=False)
    except OSError as exc:
        return f"Failed to launch editor: {exc}"
    finally:
        enable_tui_mode()
    return None
