"""Status-line key hints and the printable binding table.

Presentation-only and side-effect free.
"""

from __future__ import annotations

from ..state import Mode
from .registry import BindingRegistry

MODE_HINTS: dict[Mode, str] = {
    Mode.NORMAL: "j/k move  l open  h up  space select  yy/x/pp copy/cut/paste  dd delete  : command  / search  q quit",
    Mode.VISUAL: "j/k extend  y copy  d delete  v confirm  Esc cancel",
    Mode.PREVIEW: "j/k line  C-d/C-u half  space/v/V select  y copy  e edit  q/Esc back",
    Mode.COMMAND: "Enter run  Esc cancel",
    Mode.SEARCH: "Enter keep matches  Esc cancel",
    Mode.PROMPT: "Enter submit  Esc cancel",
}

_ORDERED_MODES = (Mode.NORMAL, Mode.VISUAL, Mode.PREVIEW)


def mode_hint(mode: Mode) -> str:
    return MODE_HINTS.get(mode, "")


def _display_keys(keys: tuple[str, ...]) -> str:
    return " ".join("space" if key == " " else key for key in keys)


def format_bindings(registry: BindingRegistry) -> str:
    """Render every registered binding grouped by mode, one per line."""
    sections: list[str] = []
    for mode in _ORDERED_MODES:
        bindings = registry.bindings_for(mode)
        if not bindings:
            continue
        width = max(len(_display_keys(binding.keys)) for binding in bindings)
        lines = [f"{mode.value.upper()}"]
        for binding in bindings:
            lines.append(f"  {_display_keys(binding.keys).ljust(width)}  {binding.description}")
        sections.append("\n".join(lines))
    return "\n\n".join(sections) + "\n"
