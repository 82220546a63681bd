"""State owner for one interactive session.

``Session`` holds the current ``AppState`` and is the only place it is
replaced. Every dispatched action is reduced first; side effects (directory
reloads, preview loads, preference persistence) are derived afterwards by
comparing the previous and next state. Slow work runs through a job runner and
comes back as actions drained on the owner thread.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from ..actions import (
    Action,
    PopHistory,
    RequestRefresh,
    SetCursor,
    SetError,
    SetFiles,
    SetMessage,
    SetParentCursor,
    SetParentFiles,
    SetParentPath,
    SetPath,
    SetPreview,
)
from ..clipboard import ClipboardError
from ..fs.entries import read_directory
from ..fs.preview import load_preview
from ..git.operations import GitCommandError, GitOperations
from ..git.status import GitRepositoryInfo, GitStatusCache
from ..input.keys import KeyEvent, normalize, parse_key
from ..input.matcher import MATCHED, Resolution, SequenceMatcher
from ..input.text_modes import handle_text_key
from ..keybindings.commands import execute_command
from ..keybindings.definitions import create_default_bindings
from ..keybindings.registry import ActionContext, Binding, BindingRegistry
from ..reducer import reduce
from ..state import TEXT_MODES, AppState, FileEntry, Mode
from .background import Job, ThreadedJobRunner
from .config import AppConfig, save_show_hidden, save_sort

logger = logging.getLogger(__name__)

LISTING_CHANNEL = "listing"
PREVIEW_CHANNEL = "preview"

# Previews produced by git and gh commands rather than loaded for the entry.
COMMAND_PREVIEW_KINDS = frozenset({"diff", "log", "github"})

EditorLauncher = Callable[[Path, "int | None"], "str | None"]


class Session:
    """Own ``AppState`` and turn key events into reducer actions."""

    def __init__(
        self,
        state: AppState,
        *,
        config: AppConfig | None = None,
        registry: BindingRegistry | None = None,
        runner=None,
        clock: Callable[[], float] = time.monotonic,
        launch_editor: EditorLauncher | None = None,
        preview_height: int = 20,
        persist: bool = True,
    ) -> None:
        self.state = state
        self.config = config if config is not None else AppConfig()
        self.registry = registry if registry is not None else create_default_bindings()
        self.matcher = SequenceMatcher(self.registry, self.config.key_timeout_ms, clock)
        self.runner = runner if runner is not None else ThreadedJobRunner()
        self.git_status = GitStatusCache()
        self.git = GitOperations(on_change=self.git_status.clear)
        self.preview_height = preview_height
        self.persist = persist
        self._launch_editor = launch_editor
        self._latest: dict[str, int] = {LISTING_CHANNEL: 0, PREVIEW_CHANNEL: 0}
        self._exited = False
        self._focus: str | None = None

    @property
    def exited(self) -> bool:
        return self._exited

    def start(self) -> None:
        """Schedule the initial listing load."""
        self.reload()

    # -- dispatch & effects --------------------------------------------------

    def dispatch(self, action: Action) -> None:
        previous = self.state
        self.state = reduce(previous, action)
        self._apply_effects(previous, self.state, action)

    def _apply_effects(self, previous: AppState, current: AppState, action: Action) -> None:
        listing_changed = (
            previous.current_path != current.current_path
            or previous.show_hidden != current.show_hidden
            or previous.sort != current.sort
        )
        if listing_changed or isinstance(action, RequestRefresh):
            self.reload()

        if previous.show_hidden != current.show_hidden and self.persist:
            save_show_hidden(current.show_hidden)
        if previous.sort != current.sort and self.persist:
            save_sort(current.sort)

        if previous.mode != current.mode:
            self.matcher.reset()

        if current.mode == Mode.PREVIEW:
            return
        left_command_preview = previous.mode == Mode.PREVIEW and current.preview.kind in COMMAND_PREVIEW_KINDS
        if left_command_preview or previous.current_entry() != current.current_entry():
            self._load_preview(current.current_entry())

    def _submit(self, channel: str, job: Job) -> None:
        self._latest[channel] += 1
        self.runner.submit(job, channel, self._latest[channel])

    def run_in_background(self, job: Job) -> None:
        self.runner.submit(job)

    def reload(self) -> None:
        """Re-read the current and parent listings in the background.

        After ``parent_directory`` the cursor lands on the directory just left.
        """
        state = self.state
        focus, self._focus = self._focus, None
        path, show_hidden, sort = state.current_path, state.show_hidden, state.sort

        def job() -> list[Action]:
            try:
                files = read_directory(path, show_hidden, sort)
            except OSError as exc:
                logger.warning("cannot list %s: %s", path, exc)
                return [SetFiles(()), SetError(f"Cannot read {path}: {exc}")]
            actions: list[Action] = [SetFiles(tuple(files))]
            if focus is not None:
                for index, entry in enumerate(files):
                    if entry.name == focus:
                        actions.append(SetCursor(index))
                        break
            actions.extend(self._parent_actions(path, show_hidden, sort))
            return actions

        self._submit(LISTING_CHANNEL, job)

    @staticmethod
    def _parent_actions(path: Path, show_hidden: bool, sort) -> list[Action]:
        parent = path.parent
        if parent == path:
            return [SetParentPath(path), SetParentFiles(())]
        try:
            parent_files = read_directory(parent, show_hidden, sort)
        except OSError as exc:
            logger.debug("cannot list parent %s: %s", parent, exc)
            parent_files = []
        actions: list[Action] = [SetParentPath(parent), SetParentFiles(tuple(parent_files))]
        for index, entry in enumerate(parent_files):
            if entry.path == path:
                actions.append(SetParentCursor(index))
                break
        return actions

    def _load_preview(self, entry: FileEntry | None) -> None:
        show_hidden = self.state.show_hidden

        def job() -> list[Action]:
            return [SetPreview(load_preview(entry, show_hidden))]

        self._submit(PREVIEW_CHANNEL, job)

    def drain_background(self) -> bool:
        """Apply finished background results; return whether any were applied.

        Listing and preview results superseded by a newer request are
        dropped, as are preview loads that land while preview mode is active.
        """
        applied = False
        while True:
            results = self.runner.drain_results()
            if not results:
                return applied
            for result in results:
                latest = self._latest.get(result.channel)
                if latest is not None and result.request_id != latest:
                    logger.debug("dropping stale %s result %d", result.channel, result.request_id)
                    continue
                if result.channel == PREVIEW_CHANNEL and self.state.mode == Mode.PREVIEW:
                    continue
                for action in result.actions:
                    self.dispatch(action)
                applied = True

    # -- input ---------------------------------------------------------------

    def process_key_event(self, event: KeyEvent) -> None:
        if self.state.error is not None:
            self.dispatch(SetError(None))
        if self.state.message is not None:
            self.dispatch(SetMessage(None))

        if self.state.mode in TEXT_MODES:
            self.process_text_event(event)
            return

        token = normalize(event)
        logger.debug("key %r in %s", token, self.state.mode.value)
        self._handle_resolution(self.matcher.feed(self.state.mode, token))

    def process_text_event(self, event: KeyEvent) -> None:
        handle_text_key(
            parse_key(event),
            self.state,
            self.dispatch,
            execute_command=self._execute_command,
        )

    def _execute_command(self, command: str) -> None:
        execute_command(command, self.build_context(0))

    def tick(self, now: float | None = None) -> bool:
        """Fire an expired disambiguation timer; return whether it fired."""
        resolution = self.matcher.expire(now)
        if resolution is None:
            return False
        self._handle_resolution(resolution)
        return True

    def next_timeout(self) -> float | None:
        return self.matcher.timeout_remaining()

    def _handle_resolution(self, resolution: Resolution) -> None:
        if resolution.status == MATCHED and resolution.binding is not None:
            self._run_binding(resolution.binding, resolution.count)

    def _run_binding(self, binding: Binding, count: int) -> None:
        try:
            binding.handler(self.build_context(count))
        except (OSError, GitCommandError, ClipboardError) as exc:
            logger.warning("%s failed: %s", binding.description, exc)
            self.dispatch(SetError(str(exc)))

    def build_context(self, count: int) -> ActionContext:
        return ActionContext(
            state=self.state,
            dispatch=self.dispatch,
            count=count,
            navigate=self.navigate,
            enter_directory=self.enter_directory,
            parent_directory=self.parent_directory,
            refresh=self.refresh,
            exit=self.exit,
            open_editor=self.open_editor,
            preview_height=self.preview_height,
            go_back=self.go_back,
            run_in_background=self.run_in_background,
            config=self.config,
            git=self.git,
        )

    # -- capabilities --------------------------------------------------------

    def navigate(self, path: Path) -> None:
        self.dispatch(SetPath(path))

    def enter_directory(self) -> None:
        entry = self.state.current_entry()
        if entry is not None and entry.is_dir:
            self.navigate(entry.path)

    def parent_directory(self) -> None:
        current = self.state.current_path
        if current.parent == current:
            return
        self._focus = current.name
        self.dispatch(SetPath(current.parent))

    def go_back(self) -> None:
        history = self.state.history
        if not history:
            self.dispatch(SetMessage("No previous directory"))
            return
        target = history[-1]
        self.dispatch(PopHistory())
        self.dispatch(SetPath(target, record=False))

    def refresh(self) -> None:
        self.git_status.clear()
        self.dispatch(RequestRefresh())

    def exit(self) -> None:
        self._exited = True

    def open_editor(self, path: Path, line: int | None = None) -> None:
        if self._launch_editor is None:
            self.dispatch(SetError("Cannot edit: no terminal attached"))
            return
        error = self._launch_editor(path, line)
        if error:
            self.dispatch(SetError(error))
            return
        self.refresh()

    def git_info(self) -> GitRepositoryInfo:
        return self.git_status.get(self.state.current_path)
