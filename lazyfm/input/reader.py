"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into ``KeyEvent`` values.
Handles ESC-sequence timing, CSI modifier parameters, and control chords.
"""

from __future__ import annotations

import os
import select

from .keys import KeyEvent

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL_KEYS = {
    b"A": "up",
    b"B": "down",
    b"C": "right",
    b"D": "left",
}
_CSI_TILDE_KEYS = {
    b"3": "delete",
    b"5": "pageup",
    b"6": "pagedown",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, first: bytes) -> str:
    lead = first[0]
    if lead >= 0xF0:
        extra = 3
    elif lead >= 0xE0:
        extra = 2
    elif lead >= 0xC0:
        extra = 1
    else:
        extra = 0
    data = first
    for _ in range(extra):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _modifier_flags(param: bytes) -> tuple[bool, bool, bool]:
    """Decode an xterm modifier parameter into ``(ctrl, meta, shift)``."""
    try:
        value = int(param) - 1
    except ValueError:
        return False, False, False
    shift = bool(value & 1)
    meta = bool(value & 2) or bool(value & 8)
    ctrl = bool(value & 4)
    return ctrl, meta, shift


def _decode_plain_byte(fd: int, ch: bytes) -> KeyEvent:
    code = ch[0]
    if ch == b"\t":
        return KeyEvent.special("tab")
    if ch in {b"\r", b"\n"}:
        return KeyEvent.special("return")
    if ch in {b"\x08", b"\x7f"}:
        return KeyEvent.special("backspace")
    if 1 <= code <= 26:
        return KeyEvent(text=chr(code + 96), ctrl=True)
    if code == 0:
        return KeyEvent(text=" ", ctrl=True)
    text = _read_utf8_tail(fd, ch) if code >= 0x80 else ch.decode("ascii")
    return KeyEvent(text=text, shift=text.isalpha() and text.isupper())


def _decode_csi(fd: int) -> KeyEvent:
    params = b""
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return KeyEvent.special("escape")
        if part.isdigit() or part == b";":
            params += part
            if len(params) > 16:
                return KeyEvent.special("escape")
            continue
        final = part
        break

    fields = params.split(b";") if params else []
    ctrl, meta, shift = _modifier_flags(fields[1]) if len(fields) > 1 else (False, False, False)

    if final in _CSI_FINAL_KEYS:
        return KeyEvent.special(_CSI_FINAL_KEYS[final], ctrl=ctrl, meta=meta, shift=shift)
    if final == b"~" and fields and fields[0] in _CSI_TILDE_KEYS:
        return KeyEvent.special(_CSI_TILDE_KEYS[fields[0]], ctrl=ctrl, meta=meta, shift=shift)
    if final == b"Z":
        return KeyEvent.special("tab", shift=True)
    return KeyEvent.special("escape")


def read_key(fd: int, timeout_ms: int | None = None) -> KeyEvent | None:
    """Read one key press from ``fd``.

    Returns ``None`` when ``timeout_ms`` elapses without input, or when the
    descriptor reaches end of file.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return None

        ch = os.read(fd, 1)
        if not ch:
            return None

    if ch != b"\x1b":
        return _decode_plain_byte(fd, ch)

    # Escape, meta chords, and CSI sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return KeyEvent.special("escape")
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return KeyEvent.special("escape")
    if 0x20 <= seq[0] < 0x7F:
        text = seq.decode("ascii")
        return KeyEvent(text=text, meta=True, shift=text.isalpha() and text.isupper())
    _PENDING_BYTES.append(seq)
    return KeyEvent.special("escape")
