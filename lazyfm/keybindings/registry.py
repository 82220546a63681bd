"""Mode-scoped multi-key binding registry.

Bindings are matched by full token-sequence equality (exact) or by strict
prefix (partial). Both outcomes are reported separately so callers can wait
on a partial while remembering an exact fallback.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ..git.operations import GitOperations
from ..state import AppState, Mode

if TYPE_CHECKING:
    from ..actions import Action
    from ..runtime.config import AppConfig

BackgroundJob = Callable[[], "Iterable[Action]"]


@dataclass(frozen=True)
class ActionContext:
    """State snapshot and capabilities handed to a binding handler."""

    state: AppState
    dispatch: Callable[["Action"], None]
    count: int
    navigate: Callable[[Path], None]
    enter_directory: Callable[[], None]
    parent_directory: Callable[[], None]
    refresh: Callable[[], None]
    exit: Callable[[], None]
    open_editor: Callable[..., None]
    preview_height: int
    go_back: Callable[[], None] = lambda: None
    run_in_background: Callable[[BackgroundJob], None] = lambda job: None
    config: AppConfig | None = None
    git: GitOperations = field(default_factory=GitOperations)

    @property
    def repeat(self) -> int:
        """Count with vim's default of one."""
        return self.count or 1


Handler = Callable[[ActionContext], None]


@dataclass(frozen=True)
class Binding:
    keys: tuple[str, ...]
    description: str
    handler: Handler


@dataclass(frozen=True)
class BindingMatch:
    """Registry lookup outcome for one buffered token sequence."""

    exact: Binding | None = None
    partial: Binding | None = None

    @property
    def is_empty(self) -> bool:
        return self.exact is None and self.partial is None


@dataclass
class BindingRegistry:
    bindings: dict[Mode, list[Binding]] = field(default_factory=dict)

    def register(self, mode: Mode, keys: Iterable[str], description: str, handler: Handler) -> Binding:
        """Register one binding for ``mode`` and return it."""
        sequence = tuple(keys)
        if not sequence:
            raise ValueError("binding needs at least one key")
        binding = Binding(keys=sequence, description=description, handler=handler)
        self.bindings.setdefault(mode, []).append(binding)
        return binding

    def bindings_for(self, mode: Mode) -> list[Binding]:
        return list(self.bindings.get(mode, ()))

    def find(self, mode: Mode, sequence: Iterable[str]) -> BindingMatch:
        """Return the first exact and the first partial binding for ``sequence``."""
        keys = tuple(sequence)
        exact: Binding | None = None
        partial: Binding | None = None
        for binding in self.bindings.get(mode, ()):
            if exact is None and binding.keys == keys:
                exact = binding
            elif partial is None and len(binding.keys) > len(keys) and binding.keys[: len(keys)] == keys:
                partial = binding
            if exact is not None and partial is not None:
                break
        return BindingMatch(exact=exact, partial=partial)
