"""Pure application-state transitions.

``reduce`` never raises and never performs I/O. Out-of-range indices are
clamped rather than rejected, and unknown actions return the same state
object so callers can cheaply detect "nothing changed".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from . import actions as act
from .state import TEXT_MODES, AppState, Mode


def clamp_index(index: int, length: int) -> int:
    """Clamp ``index`` into ``[0, length - 1]``, or ``0`` for empty sequences."""
    if length <= 0:
        return 0
    return max(0, min(length - 1, index))


def follow_cursor(cursor: int, scroll: int, height: int) -> int:
    """Return the minimally adjusted scroll offset keeping ``cursor`` visible."""
    height = max(1, height)
    if cursor < scroll:
        return cursor
    if cursor >= scroll + height:
        return cursor - height + 1
    return scroll


def _range_union(existing: frozenset[int], start: int, end: int) -> frozenset[int]:
    low, high = min(start, end), max(start, end)
    return existing | frozenset(range(low, high + 1))


def _toggle(existing: frozenset[int], index: int) -> frozenset[int]:
    if index in existing:
        return existing - {index}
    return existing | {index}


def _set_path(state: AppState, action: act.SetPath) -> AppState:
    history = state.history
    if action.record and action.path != state.current_path:
        history = (*history, state.current_path)
    return replace(
        state,
        current_path=action.path,
        cursor=0,
        selected_indices=frozenset(),
        search=None,
        error=None,
        history=history,
    )


def _pop_history(state: AppState, _action: act.PopHistory) -> AppState:
    if not state.history:
        return state
    return replace(state, history=state.history[:-1])


def _set_files(state: AppState, action: act.SetFiles) -> AppState:
    files = tuple(action.files)
    return replace(state, files=files, cursor=clamp_index(state.cursor, len(files)))


def _set_parent_files(state: AppState, action: act.SetParentFiles) -> AppState:
    files = tuple(action.files)
    return replace(state, parent_files=files, parent_cursor=clamp_index(state.parent_cursor, len(files)))


def _set_parent_path(state: AppState, action: act.SetParentPath) -> AppState:
    return replace(state, parent_path=action.path)


def _move_cursor(state: AppState, action: act.MoveCursor) -> AppState:
    return replace(state, cursor=clamp_index(state.cursor + action.delta, len(state.files)))


def _set_cursor(state: AppState, action: act.SetCursor) -> AppState:
    return replace(state, cursor=clamp_index(action.index, len(state.files)))


def _set_parent_cursor(state: AppState, action: act.SetParentCursor) -> AppState:
    return replace(state, parent_cursor=clamp_index(action.index, len(state.parent_files)))


def _set_mode(state: AppState, action: act.SetMode) -> AppState:
    # Prompt mode is only entered through SetPrompt.
    if action.mode == Mode.PROMPT and state.prompt is None:
        return state
    changes: dict[str, object] = {"mode": action.mode}
    if action.mode != Mode.PROMPT:
        changes["prompt"] = None
    if action.mode in (Mode.COMMAND, Mode.SEARCH):
        changes["command_input"] = ""
    if state.mode == Mode.PREVIEW and action.mode != Mode.PREVIEW:
        changes["preview_cursor"] = 0
        changes["preview_scroll"] = 0
        changes["preview_selected_lines"] = frozenset()
        changes["preview_visual_anchor"] = None
    return replace(state, **changes)


def _toggle_selection(state: AppState, action: act.ToggleSelection) -> AppState:
    return replace(state, selected_indices=_toggle(state.selected_indices, action.index))


def _select_range(state: AppState, action: act.SelectRange) -> AppState:
    return replace(state, selected_indices=_range_union(state.selected_indices, action.start, action.end))


def _clear_selection(state: AppState, _action: act.ClearSelection) -> AppState:
    return replace(state, selected_indices=frozenset())


def _set_clipboard(state: AppState, action: act.SetClipboard) -> AppState:
    return replace(state, clipboard=action.clipboard)


def _clear_clipboard(state: AppState, _action: act.ClearClipboard) -> AppState:
    return replace(state, clipboard=None)


def _set_preview(state: AppState, action: act.SetPreview) -> AppState:
    if action.preview.path == state.preview.path:
        return replace(state, preview=action.preview)
    return replace(
        state,
        preview=action.preview,
        preview_cursor=0,
        preview_scroll=0,
        preview_selected_lines=frozenset(),
        preview_visual_anchor=None,
    )


def _show_preview(state: AppState, action: act.ShowPreview) -> AppState:
    state = _set_preview(state, act.SetPreview(action.preview))
    if state.mode in TEXT_MODES:
        return state
    return _set_mode(state, act.SetMode(Mode.PREVIEW))


def _set_command_input(state: AppState, action: act.SetCommandInput) -> AppState:
    return replace(state, command_input=action.text)


def _set_search(state: AppState, action: act.SetSearch) -> AppState:
    return replace(state, search=action.search)


def _set_prompt(state: AppState, action: act.SetPrompt) -> AppState:
    mode = Mode.PROMPT if action.prompt is not None else Mode.NORMAL
    return replace(state, prompt=action.prompt, mode=mode)


def _set_error(state: AppState, action: act.SetError) -> AppState:
    return replace(state, error=action.error)


def _set_message(state: AppState, action: act.SetMessage) -> AppState:
    return replace(state, message=action.message)


def _toggle_hidden(state: AppState, _action: act.ToggleHidden) -> AppState:
    return replace(state, show_hidden=not state.show_hidden)


def _set_sort(state: AppState, action: act.SetSort) -> AppState:
    return replace(state, sort=action.sort)


def _set_visual_anchor(state: AppState, action: act.SetVisualAnchor) -> AppState:
    return replace(state, visual_anchor=action.index)


def _place_preview_cursor(state: AppState, index: int, height: int) -> AppState:
    cursor = clamp_index(index, state.preview.line_count)
    scroll = follow_cursor(cursor, state.preview_scroll, height)
    return replace(state, preview_cursor=cursor, preview_scroll=scroll)


def _move_preview_cursor(state: AppState, action: act.MovePreviewCursor) -> AppState:
    return _place_preview_cursor(state, state.preview_cursor + action.delta, action.height)


def _set_preview_cursor(state: AppState, action: act.SetPreviewCursor) -> AppState:
    return _place_preview_cursor(state, action.index, action.height)


def _toggle_preview_line(state: AppState, action: act.TogglePreviewLineSelection) -> AppState:
    return replace(state, preview_selected_lines=_toggle(state.preview_selected_lines, action.line))


def _select_preview_range(state: AppState, action: act.SelectPreviewLineRange) -> AppState:
    return replace(
        state,
        preview_selected_lines=_range_union(state.preview_selected_lines, action.start, action.end),
    )


def _clear_preview_selection(state: AppState, _action: act.ClearPreviewSelection) -> AppState:
    return replace(state, preview_selected_lines=frozenset())


def _set_preview_visual_anchor(state: AppState, action: act.SetPreviewVisualAnchor) -> AppState:
    return replace(state, preview_visual_anchor=action.index)


_TRANSITIONS: dict[type, Callable[[AppState, act.Action], AppState]] = {
    act.SetPath: _set_path,
    act.PopHistory: _pop_history,
    act.SetFiles: _set_files,
    act.SetParentFiles: _set_parent_files,
    act.SetParentPath: _set_parent_path,
    act.MoveCursor: _move_cursor,
    act.SetCursor: _set_cursor,
    act.SetParentCursor: _set_parent_cursor,
    act.SetMode: _set_mode,
    act.ToggleSelection: _toggle_selection,
    act.SelectRange: _select_range,
    act.ClearSelection: _clear_selection,
    act.SetClipboard: _set_clipboard,
    act.ClearClipboard: _clear_clipboard,
    act.SetPreview: _set_preview,
    act.ShowPreview: _show_preview,
    act.SetCommandInput: _set_command_input,
    act.SetSearch: _set_search,
    act.SetPrompt: _set_prompt,
    act.SetError: _set_error,
    act.SetMessage: _set_message,
    act.ToggleHidden: _toggle_hidden,
    act.SetSort: _set_sort,
    act.SetVisualAnchor: _set_visual_anchor,
    act.MovePreviewCursor: _move_preview_cursor,
    act.SetPreviewCursor: _set_preview_cursor,
    act.TogglePreviewLineSelection: _toggle_preview_line,
    act.SelectPreviewLineRange: _select_preview_range,
    act.ClearPreviewSelection: _clear_preview_selection,
    act.SetPreviewVisualAnchor: _set_preview_visual_anchor,
}


def reduce(state: AppState, action: object) -> AppState:
    """Return the state that results from applying ``action`` to ``state``."""
    transition = _TRANSITIONS.get(type(action))
    if transition is None:
        return state
    return transition(state, action)
