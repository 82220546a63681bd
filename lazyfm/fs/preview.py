"""Preview payloads for the entry under the cursor.

Text files are read (bounded by size and line count) and tagged with the
Pygments lexer name; directories list their first entries; known binary
formats and oversized files get a one-line placeholder.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from ..state import FileEntry, PreviewContent, SortSpec
from .entries import build_entry, sort_entries

MAX_PREVIEW_LINES = 100
MAX_FILE_SIZE = 256 * 1024
MAX_DIRECTORY_ENTRIES = 50

BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".svg",
        ".mp4", ".mkv", ".avi", ".mov", ".webm",
        ".mp3", ".flac", ".wav", ".ogg", ".m4a",
        ".zip", ".tar", ".gz", ".bz2", ".xz", ".7z", ".rar",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".exe", ".dll", ".so", ".dylib", ".o", ".a",
        ".wasm", ".class", ".pyc",
    }
)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda m: f"\\x{ord(m.group(0)):02x}", source)


def language_for(path: Path) -> str | None:
    """Pygments lexer name for ``path``, or ``None`` when unknown."""
    try:
        return get_lexer_for_filename(path.name).name
    except ClassNotFound:
        return None


def _looks_binary(path: Path) -> bool:
    with path.open("rb") as handle:
        return b"\0" in handle.read(4096)


def load_text_preview(path: Path) -> PreviewContent:
    if _looks_binary(path):
        return PreviewContent(kind="binary", content=f"Binary file: {path.name}", path=path)
    lines = read_text(path).split("\n")[:MAX_PREVIEW_LINES]
    return PreviewContent(
        kind="text",
        content=sanitize_terminal_text("\n".join(lines)),
        path=path,
        language=language_for(path),
    )


def load_directory_preview(path: Path, show_hidden: bool = True) -> PreviewContent:
    entries: list[FileEntry] = []
    for child in sorted(path.iterdir(), key=lambda p: p.name)[:MAX_DIRECTORY_ENTRIES]:
        if not show_hidden and child.name.startswith("."):
            continue
        entries.append(build_entry(child))
    ordered = sort_entries(entries, SortSpec())
    content = "\n".join(f"{e.name}/" if e.is_dir else e.name for e in ordered)
    return PreviewContent(kind="directory", content=content, entries=tuple(ordered), path=path)


def load_preview(entry: FileEntry | None, show_hidden: bool = True) -> PreviewContent:
    """Build the preview for ``entry``; failures become an ``error`` preview."""
    if entry is None:
        return PreviewContent()
    try:
        if entry.is_dir:
            return load_directory_preview(entry.path, show_hidden)
        if entry.path.suffix.lower() in BINARY_EXTENSIONS:
            return PreviewContent(kind="binary", content=f"Binary file: {entry.name}", path=entry.path)
        if entry.size > MAX_FILE_SIZE:
            return PreviewContent(kind="binary", content=f"File too large: {entry.name}", path=entry.path)
        return load_text_preview(entry.path)
    except OSError as exc:
        return PreviewContent(kind="error", content=f"Error: {exc}", path=entry.path)
