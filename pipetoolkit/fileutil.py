"""File-system helpers working with '/'-separated paths."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from typing import IO, Callable

__all__ = [
    "create_path",
    "create_file",
    "is_dir",
    "is_special_dir",
    "delete_file",
    "file_exists",
    "load_file",
    "save_file",
    "parent_dir",
    "absolute_path",
    "scan_dir",
    "stream_size",
    "file_size",
    "delete_empty_dir",
]


def _dir_prefixes(path: str):
    """Yield every prefix of ``path`` that ends in '/', skipping a leading root slash."""
    for index, ch in enumerate(path):
        if ch == "/" and index >= 1:
            yield path[: index + 1]


def _make_dirs(path: str, mode: int) -> None:
    for prefix in _dir_prefixes(path):
        if not os.path.exists(prefix):
            os.mkdir(prefix, mode)


def _program_dir() -> str:
    """Directory of the running program, with a trailing '/'."""
    base = os.path.dirname(os.path.abspath(sys.argv[0] if sys.argv and sys.argv[0] else "."))
    base = base.replace(os.sep, "/")
    return base if base.endswith("/") else base + "/"


def create_path(path: str, mode: int = 0o777) -> None:
    """Create every directory leading up to the last '/' in ``path``.

    Raises OSError when a directory cannot be created.
    """
    _make_dirs(path, mode)


def create_file(path: str, mode: str) -> IO | None:
    """Create the parent directories of ``path`` and open it with ``mode``.

    Returns None when ``path`` names a directory (ends in '/').
    """
    _make_dirs(path, 0o777)
    if not path or path.endswith("/"):
        return None
    return open(path, mode)


def is_dir(path: str) -> bool:
    """True when ``path`` is a directory."""
    return bool(path) and os.path.isdir(path)


def is_special_dir(name: str) -> bool:
    """True for the entries '.' and '..'."""
    return name in (".", "..")


def _delete(path: str) -> None:
    if path.endswith("/"):
        path = path[:-1]
    if is_dir(path) and not os.path.islink(path):
        try:
            entries = os.listdir(path)
        except OSError:
            os.rmdir(path)
            return
        for name in entries:
            if is_special_dir(name):
                continue
            with suppress(OSError):
                delete_file(path + "/" + name)
        os.rmdir(path)
        return
    os.remove(path)


def delete_file(path: str, del_empty_dir: bool = False, backtrace: bool = True) -> None:
    """Delete a file or a whole directory tree.

    With ``del_empty_dir`` the parent directory is removed too if it is left
    empty, and with ``backtrace`` so are its empty ancestors.
    Raises OSError when ``path`` cannot be deleted.
    """
    _delete(path)
    if del_empty_dir:
        delete_empty_dir(parent_dir(path), backtrace)


def file_exists(path: str) -> bool:
    """True when ``path`` can be opened for reading."""
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def load_file(path: str) -> bytes:
    """Whole contents of ``path``; empty when it cannot be opened."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return b""


def save_file(data: bytes | str, path: str) -> None:
    """Replace the contents of ``path`` with ``data`` (text is written as UTF-8).

    Raises OSError when the file cannot be opened for writing.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    with open(path, "wb") as handle:
        handle.write(data)


def parent_dir(path: str) -> str:
    """Parent directory of ``path``, ending in '/'; unchanged if it has no '/'."""
    if path.endswith("/"):
        path = path[:-1]
    pos = path.rfind("/")
    return path[: pos + 1] if pos != -1 else path


def absolute_path(path: str, current_path: str = "", can_access_parent: bool = False) -> str:
    """Resolve ``path`` against ``current_path``, folding '.' and '..'.

    An empty ``current_path`` means the program's directory; one starting with
    '.' is resolved against that directory first. Unless ``can_access_parent``
    is set, climbing above ``current_path`` yields ``current_path`` itself.
    """
    if current_path:
        current = current_path
        if current.startswith("."):
            current = absolute_path(current_path, _program_dir(), True)
    else:
        current = _program_dir()

    if not path:
        return current

    if not current.endswith("/"):
        current += "/"
    root = current
    for piece in path.split("/"):
        if piece in ("", "."):
            continue
        if piece == "..":
            if not can_access_parent and len(current) <= len(root):
                return root
            current = parent_dir(current)
            continue
        current += piece + "/"

    if not path.endswith("/") and current.endswith("/"):
        current = current[:-1]
    return current


def scan_dir(
    path: str,
    callback: Callable[[str, bool], bool],
    enter_subdirectory: bool = False,
    show_hidden_file: bool = False,
) -> None:
    """Call ``callback(full_path, is_dir)`` for each entry of ``path``.

    Scanning stops when the callback returns a false value. Subdirectories
    are entered when ``enter_subdirectory`` is set; hidden entries inside
    them are always skipped. An unreadable directory is silently ignored.
    """
    if path.endswith("/"):
        path = path[:-1]
    try:
        entries = os.listdir(path)
    except OSError:
        return
    for name in entries:
        if is_special_dir(name):
            continue
        if not show_hidden_file and name.startswith("."):
            continue
        full_path = path + "/" + name
        entry_is_dir = is_dir(full_path)
        if not callback(full_path, entry_is_dir):
            break
        if entry_is_dir and enter_subdirectory:
            scan_dir(full_path, callback, enter_subdirectory)


def stream_size(stream: IO | None, remain_size: bool = False) -> int:
    """Total size of a seekable stream, or what is left after its position."""
    if stream is None:
        return 0
    current = stream.tell()
    stream.seek(0, os.SEEK_END)
    end = stream.tell()
    stream.seek(current, os.SEEK_SET)
    return end - (current if remain_size else 0)


def file_size(path: str) -> int:
    """Size of the file at ``path``; 0 when it cannot be opened."""
    if not path:
        return 0
    try:
        with open(path, "rb") as handle:
            return stream_size(handle)
    except OSError:
        return 0


def _is_empty_dir(path: str) -> bool:
    try:
        return not any(not is_special_dir(name) for name in os.listdir(path))
    except OSError:
        return True


def delete_empty_dir(directory: str, backtrace: bool = True) -> None:
    """Remove ``directory`` if it is empty, and with ``backtrace`` its empty ancestors."""
    if not is_dir(directory) or not _is_empty_dir(directory):
        return
    try:
        delete_file(directory)
    except OSError:
        return
    if backtrace:
        delete_empty_dir(parent_dir(directory), True)