"""Key-event normalization into canonical key tokens.

A token is the base key name prefixed by ``C-`` (ctrl), ``M-`` (meta) and
``S-`` (shift, only for multi-character key names), e.g. ``j``, ``G``,
``C-d``, ``M-x``, ``S-up``.
"""

from __future__ import annotations

from dataclasses import dataclass

# Precedence order when several special flags are set at once.
SPECIAL_KEYS = (
    "up",
    "down",
    "left",
    "right",
    "return",
    "escape",
    "backspace",
    "delete",
    "tab",
    "pageup",
    "pagedown",
)


@dataclass(frozen=True)
class KeyEvent:
    """One raw key press as decoded from the terminal."""

    text: str = ""
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    specials: frozenset[str] = frozenset()

    @classmethod
    def special(cls, name: str, *, ctrl: bool = False, meta: bool = False, shift: bool = False) -> KeyEvent:
        return cls(ctrl=ctrl, meta=meta, shift=shift, specials=frozenset({name}))


@dataclass(frozen=True)
class ParsedKey:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def is_special(self) -> bool:
        return self.key in SPECIAL_KEYS

    @property
    def is_printable(self) -> bool:
        """True for plain text input: no chords, no special keys."""
        return bool(self.key) and not (self.ctrl or self.meta or self.is_special) and self.key.isprintable()


def parse_key(event: KeyEvent) -> ParsedKey:
    """Resolve special flags ahead of the raw character."""
    for name in SPECIAL_KEYS:
        if name not in event.specials:
            continue
        if name == "escape":
            return ParsedKey("escape")
        return ParsedKey(name, ctrl=event.ctrl, meta=event.meta, shift=event.shift)
    return ParsedKey(event.text, ctrl=event.ctrl, meta=event.meta, shift=event.shift)


def key_to_string(parsed: ParsedKey) -> str:
    parts: list[str] = []
    if parsed.ctrl:
        parts.append("C")
    if parsed.meta:
        parts.append("M")
    if parsed.shift and len(parsed.key) > 1:
        parts.append("S")
    parts.append(parsed.key)
    return "-".join(parts)


def normalize(event: KeyEvent) -> str:
    """Return the canonical token for ``event``."""
    return key_to_string(parse_key(event))
