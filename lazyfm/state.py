"""Application state model.

``AppState`` is the single source of truth for the UI. It is frozen and only
ever replaced wholesale by ``lazyfm.reducer.reduce``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Mode(str, Enum):
    """Mutually exclusive input-interpretation context."""

    NORMAL = "normal"
    VISUAL = "visual"
    COMMAND = "command"
    SEARCH = "search"
    PROMPT = "prompt"
    PREVIEW = "preview"


KEY_MODES = frozenset({Mode.NORMAL, Mode.VISUAL, Mode.PREVIEW})
TEXT_MODES = frozenset({Mode.COMMAND, Mode.SEARCH, Mode.PROMPT})

# Preview kinds that can be entered and scrolled line by line.
SCROLLABLE_PREVIEW_KINDS = frozenset({"text", "diff", "log", "github"})

SORT_FIELDS = ("name", "size", "modified")
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class FileEntry:
    name: str
    path: Path
    is_dir: bool
    is_symlink: bool = False
    size: int = 0
    modified: float = 0.0
    permissions: str = "---------"


@dataclass(frozen=True)
class ClipboardEntry:
    """Files captured by yank/cut; holds copies, not live listing rows."""

    operation: str
    files: tuple[FileEntry, ...]


@dataclass(frozen=True)
class PreviewContent:
    kind: str = "none"
    content: str = ""
    entries: tuple[FileEntry, ...] = ()
    path: Path | None = None
    language: str | None = None

    def lines(self) -> list[str]:
        return self.content.split("\n")

    @property
    def line_count(self) -> int:
        return len(self.lines())


@dataclass(frozen=True)
class SearchState:
    query: str
    matches: tuple[int, ...]
    current_match: int = 0


@dataclass(frozen=True)
class PromptState:
    """Single-line prompt; ``on_submit`` receives the edited value."""

    title: str
    value: str
    on_submit: Callable[[str], None]


@dataclass(frozen=True)
class SortSpec:
    field: str = "name"
    order: str = "asc"


@dataclass(frozen=True)
class AppState:
    current_path: Path
    parent_path: Path
    files: tuple[FileEntry, ...] = ()
    parent_files: tuple[FileEntry, ...] = ()
    cursor: int = 0
    parent_cursor: int = 0
    mode: Mode = Mode.NORMAL
    clipboard: ClipboardEntry | None = None
    selected_indices: frozenset[int] = frozenset()
    preview: PreviewContent = field(default_factory=PreviewContent)
    command_input: str = ""
    search: SearchState | None = None
    prompt: PromptState | None = None
    error: str | None = None
    message: str | None = None
    sort: SortSpec = field(default_factory=SortSpec)
    show_hidden: bool = False
    visual_anchor: int = 0
    preview_scroll: int = 0
    preview_cursor: int = 0
    preview_selected_lines: frozenset[int] = frozenset()
    preview_visual_anchor: int | None = None
    history: tuple[Path, ...] = ()

    def current_entry(self) -> FileEntry | None:
        """Return the listing entry under the cursor, if any."""
        if 0 <= self.cursor < len(self.files):
            return self.files[self.cursor]
        return None

    def target_entries(self) -> list[FileEntry]:
        """Return selected entries, or the cursor entry when nothing is selected."""
        if self.selected_indices:
            return [self.files[idx] for idx in sorted(self.selected_indices) if 0 <= idx < len(self.files)]
        entry = self.current_entry()
        return [entry] if entry is not None else []


def initial_state(
    path: Path,
    *,
    show_hidden: bool = False,
    sort: SortSpec | None = None,
) -> AppState:
    """Build the startup state: cursor at 0, normal mode."""
    resolved = path.resolve()
    return AppState(
        current_path=resolved,
        parent_path=resolved.parent,
        show_hidden=show_hidden,
        sort=sort if sort is not None else SortSpec(),
    )
