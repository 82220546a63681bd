"""Default key bindings for normal, visual, and preview modes.

Handlers only read ``ctx.state`` and publish changes through
``ctx.dispatch``; anything that touches the filesystem, git, or the system
clipboard is wrapped in a job handed to ``ctx.run_in_background`` whose
returned actions are applied later by the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from ..actions import (
    Action,
    ClearClipboard,
    ClearPreviewSelection,
    ClearSelection,
    MoveCursor,
    MovePreviewCursor,
    RequestRefresh,
    SelectPreviewLineRange,
    SelectRange,
    SetClipboard,
    SetCursor,
    SetError,
    SetMessage,
    SetMode,
    SetPreviewCursor,
    SetPreviewVisualAnchor,
    SetPrompt,
    SetSearch,
    SetVisualAnchor,
    ShowPreview,
    ToggleHidden,
    TogglePreviewLineSelection,
    ToggleSelection,
)
from ..clipboard import ClipboardError, copy_to_clipboard
from ..fs.operations import copy_files, create_directory, create_file, delete_files, move_files, rename_file
from ..git import github
from ..git.operations import GitCommandError, git_diff, git_log
from ..reducer import clamp_index
from ..runtime.config import DEFAULT_HALF_PAGE
from ..state import SCROLLABLE_PREVIEW_KINDS, ClipboardEntry, Mode, PreviewContent, PromptState, SearchState
from .registry import ActionContext, BindingRegistry, Handler

logger = logging.getLogger(__name__)


def _half_page(ctx: ActionContext) -> int:
    return ctx.config.half_page if ctx.config is not None else DEFAULT_HALF_PAGE


def _in_background(ctx: ActionContext, label: str, work: Callable[[], Iterable[Action]]) -> None:
    """Run ``work`` off the input thread, reporting I/O failures as ``label failed: ...``."""

    def job() -> list[Action]:
        try:
            return list(work())
        except (OSError, GitCommandError, ClipboardError) as exc:
            logger.warning("%s failed: %s", label, exc)
            return [SetError(f"{label} failed: {exc}")]

    ctx.run_in_background(job)


def _prompt(ctx: ActionContext, title: str, value: str, on_value: Callable[[str], None]) -> None:
    """Open a prompt whose submit runs ``on_value`` and then closes the prompt."""

    def on_submit(submitted: str) -> None:
        on_value(submitted)
        ctx.dispatch(SetPrompt(None))

    ctx.dispatch(SetPrompt(PromptState(title=title, value=value, on_submit=on_submit)))


# -- normal mode: movement ---------------------------------------------------


def move_down(ctx: ActionContext) -> None:
    ctx.dispatch(MoveCursor(ctx.repeat))


def move_up(ctx: ActionContext) -> None:
    ctx.dispatch(MoveCursor(-ctx.repeat))


def go_first(ctx: ActionContext) -> None:
    ctx.dispatch(SetCursor(ctx.count - 1 if ctx.count else 0))


def go_last(ctx: ActionContext) -> None:
    ctx.dispatch(SetCursor(ctx.count - 1 if ctx.count else len(ctx.state.files) - 1))


def half_page_down(ctx: ActionContext) -> None:
    ctx.dispatch(MoveCursor(_half_page(ctx) * ctx.repeat))


def half_page_up(ctx: ActionContext) -> None:
    ctx.dispatch(MoveCursor(-_half_page(ctx) * ctx.repeat))


def enter_or_preview(ctx: ActionContext) -> None:
    entry = ctx.state.current_entry()
    if entry is None:
        return
    if entry.is_dir:
        ctx.enter_directory()
    elif ctx.state.preview.kind in SCROLLABLE_PREVIEW_KINDS:
        ctx.dispatch(SetMode(Mode.PREVIEW))


def parent_directory(ctx: ActionContext) -> None:
    ctx.parent_directory()


def go_home(ctx: ActionContext) -> None:
    ctx.navigate(Path.home())


def go_back(ctx: ActionContext) -> None:
    ctx.go_back()


# -- normal mode: selection & clipboard --------------------------------------


def toggle_selection(ctx: ActionContext) -> None:
    ctx.dispatch(ToggleSelection(ctx.state.cursor))
    ctx.dispatch(MoveCursor(1))


def enter_visual(ctx: ActionContext) -> None:
    cursor = ctx.state.cursor
    ctx.dispatch(SetMode(Mode.VISUAL))
    ctx.dispatch(SetVisualAnchor(cursor))
    if ctx.state.files:
        ctx.dispatch(SelectRange(cursor, cursor))


def toggle_select_all(ctx: ActionContext) -> None:
    if ctx.state.selected_indices:
        ctx.dispatch(ClearSelection())
    elif ctx.state.files:
        ctx.dispatch(SelectRange(0, len(ctx.state.files) - 1))


def _capture(ctx: ActionContext, operation: str) -> None:
    files = ctx.state.target_entries()
    if not files:
        return
    ctx.dispatch(SetClipboard(ClipboardEntry(operation=operation, files=tuple(files))))
    ctx.dispatch(ClearSelection())
    verb = "yanked" if operation == "copy" else "cut"
    ctx.dispatch(SetMessage(f"{len(files)} file(s) {verb}"))


def yank(ctx: ActionContext) -> None:
    _capture(ctx, "copy")


def cut(ctx: ActionContext) -> None:
    _capture(ctx, "cut")


def confirm_delete(ctx: ActionContext) -> None:
    files = ctx.state.target_entries()
    if not files:
        return

    def on_value(value: str) -> None:
        if value not in {"y", "Y"}:
            return

        def work() -> list[Action]:
            delete_files(files)
            return [ClearSelection(), RequestRefresh()]

        _in_background(ctx, "Delete", work)

    _prompt(ctx, f"Delete {len(files)} file(s)? (y/n)", "", on_value)


def paste(ctx: ActionContext) -> None:
    clipboard = ctx.state.clipboard
    if clipboard is None:
        return
    dest = ctx.state.current_path

    def work() -> list[Action]:
        if clipboard.operation == "copy":
            copy_files(clipboard.files, dest)
            return [RequestRefresh()]
        move_files(clipboard.files, dest)
        return [ClearClipboard(), RequestRefresh()]

    _in_background(ctx, "Paste", work)


# -- normal mode: file actions -----------------------------------------------


def open_preview(ctx: ActionContext) -> None:
    if ctx.state.preview.kind in SCROLLABLE_PREVIEW_KINDS:
        ctx.dispatch(SetMode(Mode.PREVIEW))


def open_in_editor(ctx: ActionContext) -> None:
    entry = ctx.state.current_entry()
    if entry is not None and not entry.is_dir:
        ctx.open_editor(entry.path)


def rename(ctx: ActionContext) -> None:
    entry = ctx.state.current_entry()
    if entry is None:
        return

    def on_value(value: str) -> None:
        if not value or value == entry.name:
            return

        def work() -> list[Action]:
            rename_file(entry.path, value)
            return [RequestRefresh()]

        _in_background(ctx, "Rename", work)

    _prompt(ctx, "Rename:", entry.name, on_value)


def _create_prompt(ctx: ActionContext, title: str, label: str, create: Callable[[Path], None]) -> None:
    directory = ctx.state.current_path

    def on_value(value: str) -> None:
        if not value.strip():
            return

        def work() -> list[Action]:
            create(directory / value.strip())
            return [RequestRefresh()]

        _in_background(ctx, label, work)

    _prompt(ctx, title, "", on_value)


def new_file(ctx: ActionContext) -> None:
    _create_prompt(ctx, "New file:", "Create file", create_file)


def new_directory(ctx: ActionContext) -> None:
    _create_prompt(ctx, "New directory:", "Create directory", create_directory)


def toggle_hidden(ctx: ActionContext) -> None:
    ctx.dispatch(ToggleHidden())


def enter_command(ctx: ActionContext) -> None:
    ctx.dispatch(SetMode(Mode.COMMAND))


def enter_search(ctx: ActionContext) -> None:
    ctx.dispatch(SetMode(Mode.SEARCH))


def _step_search(ctx: ActionContext, step: int) -> None:
    search = ctx.state.search
    if search is None or not search.matches:
        return
    current = (search.current_match + step) % len(search.matches)
    ctx.dispatch(SetSearch(SearchState(query=search.query, matches=search.matches, current_match=current)))
    ctx.dispatch(SetCursor(search.matches[current]))


def next_match(ctx: ActionContext) -> None:
    _step_search(ctx, ctx.repeat)


def previous_match(ctx: ActionContext) -> None:
    _step_search(ctx, -ctx.repeat)


def quit_app(ctx: ActionContext) -> None:
    ctx.exit()


# -- normal mode: git --------------------------------------------------------


def git_stage(ctx: ActionContext) -> None:
    files = ctx.state.target_entries()
    if not files:
        return
    cwd = ctx.state.current_path

    def work() -> list[Action]:
        ctx.git.add([f.path for f in files], cwd)
        return [ClearSelection(), SetMessage(f"Staged {len(files)} file(s)"), RequestRefresh()]

    _in_background(ctx, "git add", work)


def git_commit(ctx: ActionContext) -> None:
    cwd = ctx.state.current_path

    def on_value(value: str) -> None:
        if not value.strip():
            return

        def work() -> list[Action]:
            output = ctx.git.commit(value.strip(), cwd)
            summary = output.splitlines()[0] if output else "Committed"
            return [SetMessage(summary), RequestRefresh()]

        _in_background(ctx, "git commit", work)

    _prompt(ctx, "Commit message:", "", on_value)


def git_push(ctx: ActionContext) -> None:
    cwd = ctx.state.current_path

    def work() -> list[Action]:
        output = ctx.git.push(cwd)
        lines = output.splitlines()
        return [SetMessage(lines[-1] if lines else "Pushed")]

    _in_background(ctx, "git push", work)


def _show_in_preview(ctx: ActionContext, label: str, kind: str, path: Path, produce: Callable[[], str]) -> None:
    def work() -> list[Action]:
        preview = PreviewContent(kind=kind, content=produce(), path=path)
        return [ShowPreview(preview)]

    _in_background(ctx, label, work)


def git_show_diff(ctx: ActionContext) -> None:
    entry = ctx.state.current_entry()
    if entry is None or entry.is_dir:
        return
    cwd = ctx.state.current_path
    _show_in_preview(ctx, "git diff", "diff", entry.path, lambda: git_diff(entry.path, cwd))


def git_show_log(ctx: ActionContext) -> None:
    cwd = ctx.state.current_path
    _show_in_preview(ctx, "git log", "log", cwd, lambda: git_log(cwd))


def github_issues(ctx: ActionContext) -> None:
    cwd = ctx.state.current_path
    _show_in_preview(ctx, "gh issue list", "github", cwd, lambda: github.issue_list(cwd) or "(no issues)")


def github_pull_requests(ctx: ActionContext) -> None:
    cwd = ctx.state.current_path
    _show_in_preview(ctx, "gh pr list", "github", cwd, lambda: github.pr_list(cwd) or "(no pull requests)")


def github_browse(ctx: ActionContext) -> None:
    cwd = ctx.state.current_path

    def work() -> list[Action]:
        github.open_in_browser(cwd)
        return [SetMessage("Opened in browser")]

    _in_background(ctx, "gh browse", work)


# -- visual mode -------------------------------------------------------------


def _extend_visual(ctx: ActionContext, delta: int) -> None:
    state = ctx.state
    ctx.dispatch(MoveCursor(delta))
    new_cursor = clamp_index(state.cursor + delta, len(state.files))
    ctx.dispatch(SelectRange(state.visual_anchor, new_cursor))


def visual_down(ctx: ActionContext) -> None:
    _extend_visual(ctx, ctx.repeat)


def visual_up(ctx: ActionContext) -> None:
    _extend_visual(ctx, -ctx.repeat)


def visual_cancel(ctx: ActionContext) -> None:
    ctx.dispatch(ClearSelection())
    ctx.dispatch(SetMode(Mode.NORMAL))


def visual_confirm(ctx: ActionContext) -> None:
    ctx.dispatch(SetMode(Mode.NORMAL))


def visual_yank(ctx: ActionContext) -> None:
    ctx.dispatch(SetMode(Mode.NORMAL))
    yank(ctx)


def visual_delete(ctx: ActionContext) -> None:
    ctx.dispatch(SetMode(Mode.NORMAL))
    confirm_delete(ctx)


# -- preview mode ------------------------------------------------------------


def _place_preview_cursor(ctx: ActionContext, index: int) -> None:
    state = ctx.state
    ctx.dispatch(SetPreviewCursor(index, ctx.preview_height))
    anchor = state.preview_visual_anchor
    if anchor is not None:
        target = clamp_index(index, state.preview.line_count)
        ctx.dispatch(ClearPreviewSelection())
        ctx.dispatch(SelectPreviewLineRange(anchor, target))


def _move_preview(ctx: ActionContext, delta: int) -> None:
    state = ctx.state
    ctx.dispatch(MovePreviewCursor(delta, ctx.preview_height))
    anchor = state.preview_visual_anchor
    if anchor is not None:
        target = clamp_index(state.preview_cursor + delta, state.preview.line_count)
        ctx.dispatch(ClearPreviewSelection())
        ctx.dispatch(SelectPreviewLineRange(anchor, target))


def preview_down(ctx: ActionContext) -> None:
    _move_preview(ctx, ctx.repeat)


def preview_up(ctx: ActionContext) -> None:
    _move_preview(ctx, -ctx.repeat)


def preview_half_down(ctx: ActionContext) -> None:
    _move_preview(ctx, max(1, ctx.preview_height // 2))


def preview_half_up(ctx: ActionContext) -> None:
    _move_preview(ctx, -max(1, ctx.preview_height // 2))


def preview_first(ctx: ActionContext) -> None:
    _place_preview_cursor(ctx, ctx.count - 1 if ctx.count else 0)


def preview_last(ctx: ActionContext) -> None:
    _place_preview_cursor(ctx, ctx.count - 1 if ctx.count else ctx.state.preview.line_count - 1)


def preview_toggle_line(ctx: ActionContext) -> None:
    ctx.dispatch(TogglePreviewLineSelection(ctx.state.preview_cursor))
    ctx.dispatch(MovePreviewCursor(1, ctx.preview_height))


def preview_visual(ctx: ActionContext) -> None:
    state = ctx.state
    if state.preview_visual_anchor is None:
        ctx.dispatch(SetPreviewVisualAnchor(state.preview_cursor))
        ctx.dispatch(SelectPreviewLineRange(state.preview_cursor, state.preview_cursor))
    else:
        ctx.dispatch(SetPreviewVisualAnchor(None))


def preview_toggle_all(ctx: ActionContext) -> None:
    state = ctx.state
    if state.preview_selected_lines:
        ctx.dispatch(ClearPreviewSelection())
    else:
        ctx.dispatch(SelectPreviewLineRange(0, state.preview.line_count - 1))


def selected_preview_text(state) -> tuple[str, int]:
    """Text of the selected preview lines (or the cursor line) and the line count."""
    lines = state.preview.lines()
    selected = sorted(state.preview_selected_lines)
    if selected:
        return "\n".join(lines[i] if i < len(lines) else "" for i in selected), len(selected)
    cursor = state.preview_cursor
    return (lines[cursor] if cursor < len(lines) else ""), 1


def preview_copy(ctx: ActionContext) -> None:
    text, count = selected_preview_text(ctx.state)

    def work() -> list[Action]:
        copy_to_clipboard(text)
        return [
            SetMessage(f"{count} line(s) copied"),
            ClearPreviewSelection(),
            SetPreviewVisualAnchor(None),
        ]

    _in_background(ctx, "Copy", work)


def preview_edit(ctx: ActionContext) -> None:
    state = ctx.state
    target: Path | None = None
    if state.preview.kind == "text" and state.preview.path is not None:
        target = state.preview.path
    else:
        entry = state.current_entry()
        if entry is not None and not entry.is_dir:
            target = entry.path
    if target is not None:
        ctx.open_editor(target, state.preview_cursor + 1)


def preview_quit(ctx: ActionContext) -> None:
    ctx.dispatch(SetMode(Mode.NORMAL))


def preview_escape(ctx: ActionContext) -> None:
    if ctx.state.preview_visual_anchor is not None:
        ctx.dispatch(SetPreviewVisualAnchor(None))
        ctx.dispatch(ClearPreviewSelection())
        return
    ctx.dispatch(SetMode(Mode.NORMAL))


BindingSpec = tuple[tuple[str, ...], str, Handler]

NORMAL_BINDINGS: tuple[BindingSpec, ...] = (
    (("j",), "Move cursor down", move_down),
    (("k",), "Move cursor up", move_up),
    (("down",), "Move cursor down", move_down),
    (("up",), "Move cursor up", move_up),
    (("l",), "Enter directory / open preview", enter_or_preview),
    (("return",), "Enter directory / open preview", enter_or_preview),
    (("right",), "Enter directory / open preview", enter_or_preview),
    (("h",), "Go to parent directory", parent_directory),
    (("left",), "Go to parent directory", parent_directory),
    (("g", "g"), "Go to first file", go_first),
    (("G",), "Go to last file", go_last),
    (("C-d",), "Half page down", half_page_down),
    (("C-u",), "Half page up", half_page_up),
    (("~",), "Go to home directory", go_home),
    (("C-o",), "Go back in history", go_back),
    ((" ",), "Toggle selection", toggle_selection),
    (("v",), "Enter visual mode", enter_visual),
    (("V",), "Select all / deselect all", toggle_select_all),
    (("y", "y"), "Copy (yank) selected files", yank),
    (("x",), "Cut selected files", cut),
    (("d", "d"), "Delete selected files", confirm_delete),
    (("D",), "Delete selected files", confirm_delete),
    (("p", "p"), "Paste files", paste),
    (("P",), "Enter preview mode", open_preview),
    (("e",), "Open in editor", open_in_editor),
    (("r",), "Rename file", rename),
    (("o",), "New file", new_file),
    (("O",), "New directory", new_directory),
    ((".",), "Toggle hidden files", toggle_hidden),
    ((":",), "Enter command mode", enter_command),
    (("/",), "Enter search mode", enter_search),
    (("n",), "Next search match", next_match),
    (("N",), "Previous search match", previous_match),
    (("g", "s"), "Git: stage files", git_stage),
    (("g", "c"), "Git: commit", git_commit),
    (("g", "p"), "Git: push", git_push),
    (("g", "d"), "Git: diff of file", git_show_diff),
    (("g", "l"), "Git: log", git_show_log),
    (("g", "i"), "GitHub: issues", github_issues),
    (("g", "r"), "GitHub: pull requests", github_pull_requests),
    (("g", "b"), "GitHub: open in browser", github_browse),
    (("q",), "Quit", quit_app),
)

VISUAL_BINDINGS: tuple[BindingSpec, ...] = (
    (("j",), "Extend selection down", visual_down),
    (("k",), "Extend selection up", visual_up),
    (("down",), "Extend selection down", visual_down),
    (("up",), "Extend selection up", visual_up),
    (("y",), "Copy selection", visual_yank),
    (("d",), "Delete selection", visual_delete),
    (("escape",), "Exit visual mode", visual_cancel),
    (("v",), "Confirm selection and exit visual mode", visual_confirm),
)

PREVIEW_BINDINGS: tuple[BindingSpec, ...] = (
    (("j",), "Move cursor down", preview_down),
    (("down",), "Move cursor down", preview_down),
    (("k",), "Move cursor up", preview_up),
    (("up",), "Move cursor up", preview_up),
    (("C-d",), "Half page down", preview_half_down),
    (("C-u",), "Half page up", preview_half_up),
    (("g", "g"), "Go to first line", preview_first),
    (("G",), "Go to last line", preview_last),
    ((" ",), "Toggle line selection", preview_toggle_line),
    (("v",), "Visual line selection", preview_visual),
    (("V",), "Select all / deselect all lines", preview_toggle_all),
    (("y",), "Copy selected lines to clipboard", preview_copy),
    (("e",), "Open in editor at line", preview_edit),
    (("q",), "Exit preview mode", preview_quit),
    (("escape",), "Exit preview mode", preview_escape),
)


def create_default_bindings() -> BindingRegistry:
    registry = BindingRegistry()
    for mode, table in (
        (Mode.NORMAL, NORMAL_BINDINGS),
        (Mode.VISUAL, VISUAL_BINDINGS),
        (Mode.PREVIEW, PREVIEW_BINDINGS),
    ):
        for keys, description, handler in table:
            registry.register(mode, keys, description, handler)
    return registry
