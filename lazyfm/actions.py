"""Actions accepted by ``lazyfm.reducer.reduce``.

Each action is a small frozen record; the reducer looks up a transition by
the action's type and treats unknown types as no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .state import ClipboardEntry, FileEntry, Mode, PreviewContent, PromptState, SearchState, SortSpec


class Action:
    """Marker base class for reducer actions."""

    __slots__ = ()


@dataclass(frozen=True)
class SetPath(Action):
    path: Path
    record: bool = True


@dataclass(frozen=True)
class PopHistory(Action):
    pass


@dataclass(frozen=True)
class SetFiles(Action):
    files: tuple[FileEntry, ...]


@dataclass(frozen=True)
class SetParentFiles(Action):
    files: tuple[FileEntry, ...]


@dataclass(frozen=True)
class SetParentPath(Action):
    path: Path


@dataclass(frozen=True)
class MoveCursor(Action):
    delta: int


@dataclass(frozen=True)
class SetCursor(Action):
    index: int


@dataclass(frozen=True)
class SetParentCursor(Action):
    index: int


@dataclass(frozen=True)
class SetMode(Action):
    mode: Mode


@dataclass(frozen=True)
class ToggleSelection(Action):
    index: int


@dataclass(frozen=True)
class SelectRange(Action):
    start: int
    end: int


@dataclass(frozen=True)
class ClearSelection(Action):
    pass


@dataclass(frozen=True)
class SetClipboard(Action):
    clipboard: ClipboardEntry


@dataclass(frozen=True)
class ClearClipboard(Action):
    pass


@dataclass(frozen=True)
class SetPreview(Action):
    preview: PreviewContent


@dataclass(frozen=True)
class ShowPreview(Action):
    """Replace the preview and enter preview mode unless a text mode is active."""

    preview: PreviewContent


@dataclass(frozen=True)
class SetCommandInput(Action):
    text: str


@dataclass(frozen=True)
class SetSearch(Action):
    search: SearchState | None


@dataclass(frozen=True)
class SetPrompt(Action):
    prompt: PromptState | None


@dataclass(frozen=True)
class SetError(Action):
    error: str | None


@dataclass(frozen=True)
class SetMessage(Action):
    message: str | None


@dataclass(frozen=True)
class ToggleHidden(Action):
    pass


@dataclass(frozen=True)
class SetSort(Action):
    sort: SortSpec


@dataclass(frozen=True)
class SetVisualAnchor(Action):
    index: int


@dataclass(frozen=True)
class MovePreviewCursor(Action):
    delta: int
    height: int


@dataclass(frozen=True)
class SetPreviewCursor(Action):
    index: int
    height: int


@dataclass(frozen=True)
class TogglePreviewLineSelection(Action):
    line: int


@dataclass(frozen=True)
class SelectPreviewLineRange(Action):
    start: int
    end: int


@dataclass(frozen=True)
class ClearPreviewSelection(Action):
    pass


@dataclass(frozen=True)
class SetPreviewVisualAnchor(Action):
    index: int | None


@dataclass(frozen=True)
class RequestRefresh(Action):
    """Effect-only: the reducer ignores it and the session reloads the listing."""
