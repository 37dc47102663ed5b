"""Log records and the channels that write them to a console, syslog, events or files."""

from __future__ import annotations

import enum
import os
import re
import sys
import threading
import time
from abc import ABC, abstractmethod
from contextlib import suppress
from dataclasses import dataclass, field
from typing import IO, Any, Callable

from .fileutil import create_path, delete_file, scan_dir
from .notice import NoticeCenter

__all__ = [
    "LogLevel",
    "LogContext",
    "LogChannel",
    "ConsoleChannel",
    "EventChannel",
    "SysLogChannel",
    "FileChannelBase",
    "FileChannel",
]

CLEAR_COLOR = "\033[0m"
_SECONDS_PER_DAY = 24 * 60 * 60
_CHECK_INTERVAL = 60
_MEGABYTE = 1024 * 1024

# Standard syslog priorities.
_LOG_ERR = 3
_LOG_WARNING = 4
_LOG_NOTICE = 5
_LOG_INFO = 6
_LOG_DEBUG = 7


class LogLevel(enum.IntEnum):
    """Severity of a log record, from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


# (background colour, foreground colour, letter) for each level.
_LEVEL_STYLE = {
    LogLevel.TRACE: ("\033[44;37m", "\033[34m", "T"),
    LogLevel.DEBUG: ("\033[42;37m", "\033[32m", "D"),
    LogLevel.INFO: ("\033[46;37m", "\033[36m", "I"),
    LogLevel.WARN: ("\033[43;37m", "\033[33m", "W"),
    LogLevel.ERROR: ("\033[41;37m", "\033[31m", "E"),
}

_SYSLOG_PRIORITY = {
    LogLevel.TRACE: _LOG_DEBUG,
    LogLevel.DEBUG: _LOG_INFO,
    LogLevel.INFO: _LOG_NOTICE,
    LogLevel.WARN: _LOG_WARNING,
    LogLevel.ERROR: _LOG_ERR,
}


def _base_name(path: str) -> str:
    return re.split(r"[/\\]", path)[-1]


def _program_path() -> str:
    return os.path.abspath(sys.argv[0] if sys.argv and sys.argv[0] else "").replace(os.sep, "/")


@dataclass
class LogContext:
    """One log record: where it came from, when, and what it says."""

    level: LogLevel = LogLevel.TRACE
    file: str = ""
    function: str = ""
    line: int = 0
    module_name: str = ""
    flag: str = ""
    content: str = ""
    repeat: int = 0
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        self.level = LogLevel(self.level)
        self.file = _base_name(self.file)

    def append(self, *values: Any) -> LogContext:
        """Add the text of each value to the message."""
        self.content += "".join(str(value) for value in values)
        return self

    def __str__(self) -> str:
        return self.content


class LogChannel(ABC):
    """A destination for log records at or above a minimum level.

    The ``logger`` handed to channels needs a ``name`` attribute.
    """

    def __init__(self, name: str, level: LogLevel = LogLevel.TRACE) -> None:
        self.name = name
        self.level = LogLevel(level)

    @abstractmethod
    def write(self, logger: Any, ctx: LogContext) -> None:
        """Emit ``ctx`` if its level passes this channel's level."""

    def set_level(self, level: LogLevel) -> None:
        """Change the minimum level written by this channel."""
        self.level = LogLevel(level)

    def _accepts(self, ctx: LogContext) -> bool:
        return self.level <= ctx.level

    @staticmethod
    def print_time(timestamp: float) -> str:
        """Local time of ``timestamp`` as ``YYYY-MM-DD HH:MM:SS.mmm``."""
        seconds, micros = divmod(round(timestamp * 1_000_000), 1_000_000)
        tm = time.localtime(seconds)
        return "%d-%02d-%02d %02d:%02d:%02d.%03d" % (
            tm.tm_year,
            tm.tm_mon,
            tm.tm_mday,
            tm.tm_hour,
            tm.tm_min,
            tm.tm_sec,
            micros // 1000,
        )

    def format(
        self,
        logger: Any,
        stream: IO[str],
        ctx: LogContext,
        enable_color: bool = True,
        enable_detail: bool = True,
    ) -> None:
        """Write ``ctx`` as one line to ``stream``, optionally coloured and with source details."""
        if not enable_detail and not ctx.content:
            return
        _, color, letter = _LEVEL_STYLE[ctx.level]
        parts = []
        if enable_color:
            parts.append(color)
        parts.append(f"{self.print_time(ctx.timestamp)} {letter} ")
        if enable_detail:
            tag = ctx.flag or getattr(logger, "name", "")
            parts.append(f"[{tag}] ")
            parts.append(f"[{os.getpid()}-{ctx.thread_name}] ")
            parts.append(f"{ctx.file}:{ctx.line} {ctx.function} | ")
        parts.append(ctx.content)
        if enable_color:
            parts.append(CLEAR_COLOR)
        if ctx.repeat > 1:
            parts.append(f"\r\n    Last message repeated {ctx.repeat} times")
        parts.append("\n")
        stream.write("".join(parts))
        stream.flush()


class ConsoleChannel(LogChannel):
    """Writes coloured, detailed log lines to standard output."""

    def __init__(self, name: str = "ConsoleChannel", level: LogLevel = LogLevel.TRACE) -> None:
        super().__init__(name, level)

    def write(self, logger: Any, ctx: LogContext) -> None:
        if not self._accepts(ctx):
            return
        self.format(logger, sys.stdout, ctx)


class EventChannel(LogChannel):
    """Broadcasts each record as a notice event carrying ``(logger, ctx)``."""

    BROADCAST_LOG_EVENT = "kBroadcastLogEvent"

    def __init__(
        self,
        name: str = "EventChannel",
        level: LogLevel = LogLevel.TRACE,
        center: NoticeCenter | None = None,
    ) -> None:
        super().__init__(name, level)
        self._center = center

    def write(self, logger: Any, ctx: LogContext) -> None:
        if not self._accepts(ctx):
            return
        center = self._center if self._center is not None else NoticeCenter.instance()
        center.emit_event_safe(self.BROADCAST_LOG_EVENT, logger, ctx)


class SysLogChannel(LogChannel):
    """Sends records to the system log.

    ``emit(priority, message)`` replaces the system logger when given.
    Raises OSError when no system log is available and no ``emit`` is given.
    """

    def __init__(
        self,
        name: str = "SysLogChannel",
        level: LogLevel = LogLevel.TRACE,
        emit: Callable[[int, str], Any] | None = None,
    ) -> None:
        super().__init__(name, level)
        if emit is None:
            try:
                import syslog
            except ImportError as exc:
                raise OSError("system log is not available on this platform") from exc
            emit = syslog.syslog
        self._emit = emit

    def write(self, logger: Any, ctx: LogContext) -> None:
        if not self._accepts(ctx):
            return
        priority = _SYSLOG_PRIORITY[ctx.level]
        letter = _LEVEL_STYLE[ctx.level][2]
        self._emit(priority, f"-> {ctx.file} {ctx.line}\r\n")
        self._emit(
            priority,
            f"## {self.print_time(ctx.timestamp)} {letter} | {ctx.function} {ctx.content}\r\n",
        )


class FileChannelBase(LogChannel):
    """Appends uncoloured log lines to a single file."""

    def __init__(
        self,
        name: str = "FileChannelBase",
        path: str | None = None,
        level: LogLevel = LogLevel.TRACE,
    ) -> None:
        super().__init__(name, level)
        self._path = _program_path() + ".log" if path is None else path
        self._stream: IO[str] | None = None

    @property
    def path(self) -> str:
        """The file this channel writes to."""
        return self._path

    def write(self, logger: Any, ctx: LogContext) -> None:
        if not self._accepts(ctx):
            return
        if self._stream is None and not self.open():
            return
        self.format(logger, self._stream, ctx, False)

    def set_path(self, path: str) -> bool:
        """Switch to ``path`` and open it; False when it cannot be opened."""
        self._path = path
        return self.open()

    def open(self) -> bool:
        """(Re)open the file for appending, creating its directories.

        Raises RuntimeError when no path is set.
        """
        if not self._path:
            raise RuntimeError("Log file path must be set")
        self.close()
        with suppress(OSError):
            create_path(self._path, 0o777)
        try:
            self._stream = open(self._path, "a", encoding="utf-8")
        except OSError:
            self._stream = None
            return False
        return True

    def close(self) -> None:
        """Close the file if it is open."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def size(self) -> int:
        """Bytes written to the open file so far; 0 when it is not open."""
        if self._stream is None:
            return 0
        self._stream.flush()
        return self._stream.tell()

    def __enter__(self) -> FileChannelBase:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _log_file_path(directory: str, second: float, index: int) -> str:
    day = time.strftime("%Y-%m-%d", time.localtime(second))
    return f"{directory}{day}_{index:02d}.log"


_DATE_PREFIX = re.compile(r"(\d{1,4})-(\d{1,2})-(\d{1,2})")
_INDEXED_NAME = re.compile(r"\d+-\d+-\d+_(\d+)")


def _log_file_time(full_path: str) -> int:
    match = _DATE_PREFIX.match(_base_name(full_path))
    if match is None:
        return 0
    year, month, day = (int(part) for part in match.groups())
    try:
        return int(time.mktime((year, month, day, 0, 0, 0, 0, 0, 0)))
    except (OverflowError, ValueError):
        return 0


def _day_number(second: float) -> int:
    return (int(second) + time.localtime().tm_gmtoff) // _SECONDS_PER_DAY


class FileChannel(FileChannelBase):
    """Daily, size-limited log files in one directory, with old files pruned.

    Files are named ``YYYY-MM-DD_NN.log``; by default 30 days, 30 files and
    128 MB per file are kept.
    """

    def __init__(
        self,
        name: str = "FileChannel",
        directory: str | None = None,
        level: LogLevel = LogLevel.TRACE,
    ) -> None:
        super().__init__(name, "", level)
        if directory is None:
            directory = _program_path().rsplit("/", 1)[0] + "/log/"
        self._dir = directory if directory.endswith("/") else directory + "/"
        self._can_write = False
        self._max_day = 30
        self._max_size = 128
        self._max_count = 30
        self._index = 0
        self._last_day = -1
        self._last_check_time = 0
        self._log_files: set[str] = set()

        def collect(path: str, entry_is_dir: bool) -> bool:
            if not entry_is_dir and path.endswith(".log"):
                self._log_files.add(path)
            return True

        scan_dir(self._dir, collect, False)

        today_prefix = time.strftime("%Y-%m-%d_")
        for path in self._log_files:
            file_name = _base_name(path)
            if not file_name.startswith(today_prefix):
                continue
            match = _INDEXED_NAME.match(file_name)
            if match is not None:
                self._index = max(self._index, int(match.group(1)))

    def write(self, logger: Any, ctx: LogContext) -> None:
        second = int(ctx.timestamp)
        day = _day_number(second)
        if day != self._last_day:
            if self._last_day != -1:
                self._index = 0
            self._last_day = day
            self._change_file(second)
        else:
            self._check_size(second)
        if self._can_write:
            super().write(logger, ctx)

    def set_max_day(self, max_day: int) -> None:
        """Keep log files for at most ``max_day`` days (at least 1)."""
        self._max_day = max(max_day, 1)

    def set_file_max_size(self, max_size: int) -> None:
        """Start a new file once the current one passes ``max_size`` MB (at least 1)."""
        self._max_size = max(max_size, 1)

    def set_file_max_count(self, max_count: int) -> None:
        """Keep at most ``max_count`` log files (at least 1)."""
        self._max_count = max(max_count, 1)

    def _remove(self, path: str) -> None:
        with suppress(OSError):
            delete_file(path)
        self._log_files.discard(path)

    def _clean(self) -> None:
        today = _day_number(time.time())
        for path in sorted(self._log_files):
            if today < _day_number(_log_file_time(path)) + self._max_day:
                break
            self._remove(path)

        while len(self._log_files) > self._max_count:
            oldest = min(self._log_files)
            if oldest == self.path:
                break
            self._remove(oldest)

    def _check_size(self, second: int) -> None:
        if second - self._last_check_time > _CHECK_INTERVAL:
            if self.size() > self._max_size * _MEGABYTE:
                self._change_file(second)
            self._last_check_time = second

    def _change_file(self, second: int) -> None:
        log_file = _log_file_path(self._dir, second, self._index)
        self._index += 1
        self._log_files.add(log_file)
        self._can_write = self.set_path(log_file)
        if not self._can_write:
            sys.stderr.write(f"Failed to open log file: {self.path}\n")
        self._clean()