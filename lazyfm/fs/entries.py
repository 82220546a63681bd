"""Directory listing, sorting, and entry formatting helpers."""

from __future__ import annotations

import os
import stat
import time
from pathlib import Path

from ..state import FileEntry, SortSpec

_SIZE_UNITS = ("B", "K", "M", "G", "T")
_PERMISSION_TRIPLETS = ("---", "--x", "-w-", "-wx", "r--", "r-x", "rw-", "rwx")


def format_permissions(mode: int) -> str:
    """Render the low nine permission bits as ``rwxr-xr-x``."""
    owner = _PERMISSION_TRIPLETS[(mode >> 6) & 7]
    group = _PERMISSION_TRIPLETS[(mode >> 3) & 7]
    other = _PERMISSION_TRIPLETS[mode & 7]
    return f"{owner}{group}{other}"


def format_size(num_bytes: int) -> str:
    """Human-readable size right-aligned to five columns, e.g. `` 1.5K``."""
    if num_bytes <= 0:
        return "   0B"
    size = float(num_bytes)
    unit_idx = 0
    while size >= 1024 and unit_idx < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit_idx += 1
    text = f"{size:.1f}" if size < 10 else str(round(size))
    return f"{text}{_SIZE_UNITS[unit_idx]}".rjust(5)


def format_modified(timestamp: float, now: float | None = None) -> str:
    """``Mon DD HH:MM`` for this year, ``Mon DD  YYYY`` otherwise."""
    current = time.localtime(time.time() if now is None else now)
    moment = time.localtime(timestamp)
    month = time.strftime("%b", moment)
    day = f"{moment.tm_mday:>2}"
    if moment.tm_year == current.tm_year:
        return f"{month} {day} {moment.tm_hour:02d}:{moment.tm_min:02d}"
    return f"{month} {day}  {moment.tm_year}"


def build_entry(path: Path) -> FileEntry:
    """Stat ``path`` without following symlinks.

    Entries that cannot be stat'ed (broken links, races with deletion) are
    still listed, with zeroed metadata.
    """
    try:
        st = path.lstat()
    except OSError:
        return FileEntry(name=path.name, path=path, is_dir=False, is_symlink=path.is_symlink())
    is_symlink = stat.S_ISLNK(st.st_mode)
    is_dir = stat.S_ISDIR(st.st_mode) or (is_symlink and path.is_dir())
    return FileEntry(
        name=path.name,
        path=path,
        is_dir=is_dir,
        is_symlink=is_symlink,
        size=st.st_size,
        modified=st.st_mtime,
        permissions=format_permissions(st.st_mode & 0o777),
    )


def _sort_key(entry: FileEntry, field: str) -> object:
    if field == "size":
        return entry.size
    if field == "modified":
        return entry.modified
    return entry.name.casefold()


def sort_entries(entries: list[FileEntry], sort: SortSpec) -> list[FileEntry]:
    """Sort directories first, then files, each group by ``sort``."""
    reverse = sort.order == "desc"
    dirs = sorted((e for e in entries if e.is_dir), key=lambda e: _sort_key(e, sort.field), reverse=reverse)
    files = sorted((e for e in entries if not e.is_dir), key=lambda e: _sort_key(e, sort.field), reverse=reverse)
    return [*dirs, *files]


def read_directory(directory: Path, show_hidden: bool, sort: SortSpec | None = None) -> list[FileEntry]:
    """List ``directory`` as sorted ``FileEntry`` values.

    Raises ``OSError`` when the directory itself cannot be read.
    """
    entries: list[FileEntry] = []
    with os.scandir(directory) as it:
        for dirent in it:
            if not show_hidden and dirent.name.startswith("."):
                continue
            entries.append(build_entry(Path(dirent.path)))
    return sort_entries(entries, sort if sort is not None else SortSpec())
