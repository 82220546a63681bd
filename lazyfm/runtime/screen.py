"""Plain, unstyled screen composition.

``render_lines`` is pure: it turns an ``AppState`` into exactly ``height``
rows of at most ``width`` characters. Writing them to the terminal is the
loop's job.
"""

from __future__ import annotations

from ..fs.entries import format_size
from ..git.status import GitRepositoryInfo
from ..keybindings.help import mode_hint
from ..state import AppState, FileEntry, Mode

CLEAR_SCREEN = "\x1b[H\x1b[2J"

# Header, blank separator, status line, hint line.
CHROME_ROWS = 4


def body_rows(height: int) -> int:
    return max(1, height - CHROME_ROWS)


def _fit(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) <= width:
        return text.ljust(width)
    return text[: width - 1] + "~"


def _window_start(cursor: int, total: int, rows: int) -> int:
    """Keep ``cursor`` roughly centered while never scrolling past the end."""
    return max(0, min(cursor - rows // 2, total - rows))


def _entry_line(entry: FileEntry, *, is_cursor: bool, selected: bool, width: int) -> str:
    marker = ">" if is_cursor else " "
    mark = "*" if selected else " "
    name = f"{entry.name}/" if entry.is_dir else entry.name
    if entry.is_symlink:
        name += "@"
    size = "     " if entry.is_dir else format_size(entry.size)
    name_width = max(1, width - len(size) - 4)
    return f"{marker}{mark}{_fit(name, name_width)} {size}"


def listing_rows(state: AppState, width: int, rows: int) -> list[str]:
    if not state.files:
        return [_fit("  (empty)", width)] + [" " * width] * (rows - 1)
    start = _window_start(state.cursor, len(state.files), rows)
    out: list[str] = []
    for index in range(start, min(len(state.files), start + rows)):
        line = _entry_line(
            state.files[index],
            is_cursor=index == state.cursor,
            selected=index in state.selected_indices,
            width=width,
        )
        out.append(_fit(line, width))
    out.extend([" " * width] * (rows - len(out)))
    return out


def preview_rows(state: AppState, width: int, rows: int) -> list[str]:
    lines = state.preview.lines() if state.preview.kind != "none" else []
    in_preview = state.mode == Mode.PREVIEW
    start = state.preview_scroll if in_preview else 0
    out: list[str] = []
    for index in range(start, min(len(lines), start + rows)):
        text = lines[index].replace("\t", "    ")
        if in_preview:
            marker = ">" if index == state.preview_cursor else " "
            mark = "*" if index in state.preview_selected_lines else " "
            text = f"{marker}{mark}{text}"
        out.append(_fit(text, width))
    out.extend([" " * width] * (rows - len(out)))
    return out


def header_line(state: AppState, git: GitRepositoryInfo | None, width: int) -> str:
    parts = [str(state.current_path)]
    if git is not None and git.is_repo:
        changed = len(git.files)
        parts.append(f"[{git.branch}{f' +{changed}' if changed else ''}]")
    if state.preview.language:
        parts.append(f"({state.preview.language})")
    return _fit("  ".join(parts), width)


def status_line(state: AppState, pending: str, width: int) -> str:
    if state.mode == Mode.COMMAND:
        return _fit(f":{state.command_input}", width)
    if state.mode == Mode.SEARCH:
        return _fit(f"/{state.command_input}", width)
    if state.mode == Mode.PROMPT and state.prompt is not None:
        return _fit(f"{state.prompt.title} {state.prompt.value}", width)

    left = f"-- {state.mode.value.upper()} --"
    if state.error:
        left = f"{left}  {state.error}"
    elif state.message:
        left = f"{left}  {state.message}"
    elif state.search is not None and state.search.matches:
        left = f"{left}  /{state.search.query} [{state.search.current_match + 1}/{len(state.search.matches)}]"
    right = pending
    if state.clipboard is not None:
        right = f"{right} {state.clipboard.operation}:{len(state.clipboard.files)}".strip()
    right = f"{right} {state.cursor + 1 if state.files else 0}/{len(state.files)}".strip()
    usable = max(1, width)
    gap = max(1, usable - len(left) - len(right))
    return _fit(f"{left}{' ' * gap}{right}", width)


def render_lines(
    state: AppState,
    width: int,
    height: int,
    *,
    pending: str = "",
    git: GitRepositoryInfo | None = None,
) -> list[str]:
    """Compose the whole screen as plain text rows."""
    rows = body_rows(height)
    left_width = max(10, width // 2)
    right_width = max(0, width - left_width - 1)
    left = listing_rows(state, left_width, rows)
    right = preview_rows(state, right_width, rows)
    body = [f"{a}|{b}" if right_width else a for a, b in zip(left, right)]
    lines = [header_line(state, git, width), _fit("", width), *body]
    lines.append(status_line(state, pending, width))
    lines.append(_fit(mode_hint(state.mode), width))
    return lines[:height]
