"""Line-editing sub-machines for command, search, and prompt modes.

Text modes bypass the sequence matcher: every key edits a single string
buffer directly. Handlers read from the state snapshot they are given and
publish their effects as reducer actions.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace

from ..actions import Action, SetCommandInput, SetCursor, SetMode, SetPrompt, SetSearch
from ..state import AppState, FileEntry, Mode, PromptState, SearchState
from .keys import ParsedKey

Dispatch = Callable[[Action], None]


def search_matches(files: Sequence[FileEntry], query: str) -> tuple[int, ...]:
    """Indices of entries whose name contains ``query``, case-insensitively, in listing order."""
    needle = query.lower()
    return tuple(idx for idx, entry in enumerate(files) if needle in entry.name.lower())


def _update_search(query: str, state: AppState, dispatch: Dispatch) -> None:
    if not query:
        dispatch(SetSearch(None))
        return
    matches = search_matches(state.files, query)
    dispatch(SetSearch(SearchState(query=query, matches=matches, current_match=0)))
    if matches:
        dispatch(SetCursor(matches[0]))


def handle_command_key(
    key: ParsedKey,
    state: AppState,
    dispatch: Dispatch,
    execute_command: Callable[[str], None],
) -> None:
    if key.key == "escape":
        dispatch(SetMode(Mode.NORMAL))
        dispatch(SetCommandInput(""))
        return

    if key.key == "return":
        execute_command(state.command_input)
        dispatch(SetMode(Mode.NORMAL))
        dispatch(SetCommandInput(""))
        return

    if key.key == "backspace":
        text = state.command_input[:-1]
        if not text:
            dispatch(SetMode(Mode.NORMAL))
        dispatch(SetCommandInput(text))
        return

    if key.is_printable:
        dispatch(SetCommandInput(state.command_input + key.key))


def handle_search_key(key: ParsedKey, state: AppState, dispatch: Dispatch) -> None:
    if key.key == "escape":
        dispatch(SetMode(Mode.NORMAL))
        dispatch(SetCommandInput(""))
        return

    if key.key == "return":
        # Keep the computed matches for n/N.
        dispatch(SetMode(Mode.NORMAL))
        return

    if key.key == "backspace":
        text = state.command_input[:-1]
        if not text:
            dispatch(SetMode(Mode.NORMAL))
        dispatch(SetCommandInput(text))
        _update_search(text, state, dispatch)
        return

    if key.is_printable:
        text = state.command_input + key.key
        dispatch(SetCommandInput(text))
        _update_search(text, state, dispatch)


def handle_prompt_key(key: ParsedKey, state: AppState, dispatch: Dispatch) -> None:
    prompt = state.prompt
    if key.key == "escape":
        dispatch(SetPrompt(None))
        return

    if prompt is None:
        return

    if key.key == "return":
        # Closing the prompt is up to the submit handler.
        prompt.on_submit(prompt.value)
        return

    if key.key == "backspace":
        dispatch(SetPrompt(_with_value(prompt, prompt.value[:-1])))
        return

    if key.is_printable:
        dispatch(SetPrompt(_with_value(prompt, prompt.value + key.key)))


def _with_value(prompt: PromptState, value: str) -> PromptState:
    return replace(prompt, value=value)


def handle_text_key(
    key: ParsedKey,
    state: AppState,
    dispatch: Dispatch,
    *,
    execute_command: Callable[[str], None],
) -> bool:
    """Route ``key`` to the sub-machine for ``state.mode``.

    Returns ``False`` when the mode is not a text mode.
    """
    if state.mode == Mode.COMMAND:
        handle_command_key(key, state, dispatch, execute_command)
        return True
    if state.mode == Mode.SEARCH:
        handle_search_key(key, state, dispatch)
        return True
    if state.mode == Mode.PROMPT:
        handle_prompt_key(key, state, dispatch)
        return True
    return False
